import aiohttp
from typing import Any, Dict, Optional

from package_extra.infrastructure import http

JSON_ACCEPT = "application/vnd.github.v3+json"
RAW_ACCEPT = "application/vnd.github.v3.raw"


class GitHubClient:
    """
    Client for the GitHub REST API and rendered repository pages.
    The Authorization header is only sent when a token is configured.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = "https://api.github.com",
        web_url: str = "https://github.com",
    ):
        self.headers = {
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        self.api_url = api_url
        self.web_url = web_url

    def _api_headers(self, accept: str) -> Dict[str, str]:
        return {**self.headers, "Accept": accept}

    async def fetch_repo(self, session: aiohttp.ClientSession, repo: str) -> Dict[str, Any]:
        """
        Fetches repository metadata. For forks the payload carries a ``parent`` object.

        Args:
            repo (str): Repository in the ``owner/name`` form.
        """
        url = http.join_url(self.api_url, "repos", repo)
        return await http.get(session, url, headers=self._api_headers(JSON_ACCEPT))

    async def fetch_readme(self, session: aiohttp.ClientSession, repo: str) -> str:
        """Fetches the raw README text of a repository."""
        url = http.join_url(self.api_url, "repos", repo, "readme")
        return await http.get(session, url, headers=self._api_headers(RAW_ACCEPT), as_json=False)

    async def fetch_repo_page(self, session: aiohttp.ClientSession, repo: str) -> str:
        """Fetches the rendered HTML page of a repository."""
        url = http.join_url(self.web_url, repo)
        return await http.get(session, url, as_json=False)
