"""Application entry point for Slackboard backend server."""

from slackboard.app import App
from slackboard.config import Config
from slackboard.logging import setup_logging
from slackboard.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
