from collections.abc import AsyncIterator, Awaitable, Callable

from slackboard.core.modules.slack.models import SlackResponse
from slackboard.errors import UpstreamError

PageFetcher = Callable[[str | None], Awaitable[SlackResponse]]


async def paginate(fetch_page: PageFetcher, max_pages: int) -> AsyncIterator[SlackResponse]:
    """Yield successive pages of a cursor-paginated Slack method.

    The first call has no cursor; iteration stops when a page carries no
    next_cursor. A failed page, a repeated cursor or more than max_pages
    pages raise UpstreamError.
    """
    cursor: str | None = None
    seen: set[str] = set()
    for _ in range(max_pages):
        page = await fetch_page(cursor)
        page.raise_for_error()
        yield page

        cursor = page.next_cursor
        if cursor is None:
            return
        if cursor in seen:
            raise UpstreamError("pagination_loop", "Slack returned a repeated pagination cursor")
        seen.add(cursor)

    raise UpstreamError("pagination_limit", f"Pagination did not finish within {max_pages} pages")
