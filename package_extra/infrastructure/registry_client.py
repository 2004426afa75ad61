import aiohttp
from typing import Any, Dict

from package_extra.infrastructure import http


class RegistryClient:
    """
    Client for the package registry's JSON metadata endpoint.
    """

    def __init__(self, registry_url: str = "https://package.openupm.com"):
        self.registry_url = registry_url
        self.headers = {"Accept": "application/json"}

    async def fetch_package_info(self, session: aiohttp.ClientSession, package_name: str) -> Dict[str, Any]:
        """
        Fetches the registry document of a package (dist-tags, versions, time).

        Raises:
            NotFoundException: The registry doesn't know the package.
            FetchFailedException: The request failed.
        """
        url = http.join_url(self.registry_url, package_name)
        return await http.get(session, url, headers=self.headers)
