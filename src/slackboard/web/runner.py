"""Uvicorn server runner with custom configuration."""

import copy
from typing import Any

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from slackboard.app import App
from slackboard.config import Config
from slackboard.web.server import create_fastapi_app

ACCESS_LOG_FORMAT = '%(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s'
DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def build_log_config(debug: bool) -> dict[str, Any]:
    """Uvicorn logging config with compact formats; request lines are logged only in debug mode."""
    log_config = copy.deepcopy(LOGGING_CONFIG)
    log_config["formatters"]["access"]["fmt"] = ACCESS_LOG_FORMAT
    log_config["formatters"]["default"]["fmt"] = DEFAULT_LOG_FORMAT
    log_config["loggers"]["uvicorn.access"]["level"] = "INFO" if debug else "WARNING"
    return log_config


def run_server(app: App, config: Config) -> None:
    """Run the Uvicorn server, trusting proxy headers for client addresses."""
    fastapi_app = create_fastapi_app(app, config)

    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(config.debug),
        access_log=True,
        proxy_headers=True,
    )
