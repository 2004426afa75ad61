import aiohttp
import asyncio
from typing import Any, Dict, Optional

from package_extra.domain.exceptions import NotFoundException, FetchFailedException

REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=60, connect=10)
USER_AGENT = "package-extra-fetcher"


def join_url(base: str, *parts: str) -> str:
    """Joins URL segments with exactly one slash between them."""
    segments = [base.rstrip("/")] + [part.strip("/") for part in parts if part]
    return "/".join(segments)


async def get(
    session: aiohttp.ClientSession,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    as_json: bool = True,
) -> Any:
    """
    Performs a single GET request and returns the decoded body.

    Raises:
        NotFoundException: The server answered 404.
        FetchFailedException: Transport error, timeout or any other non-2xx status.
        ValueError: A JSON body could not be decoded.
    """
    request_headers = {"User-Agent": USER_AGENT}
    if headers:
        request_headers.update(headers)

    try:
        async with session.get(url, headers=request_headers, timeout=REQUEST_TIMEOUT) as response:
            if response.status == 404:
                raise NotFoundException(url)
            if response.status >= 400:
                raise FetchFailedException(url, f"HTTP {response.status}")
            if as_json:
                return await response.json(content_type=None)
            return await response.text()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise FetchFailedException(url, str(e) or type(e).__name__) from e
