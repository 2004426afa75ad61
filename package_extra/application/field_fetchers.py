import logging
from typing import Awaitable, Callable, Optional
import aiohttp

from package_extra.infrastructure.registry_client import RegistryClient
from package_extra.infrastructure.github_client import GitHubClient
from package_extra.infrastructure.database import PackageExtraRepository
from package_extra.infrastructure.acl import RegistryTranslator, GitHubTranslator
from package_extra.infrastructure.html import extract_attribute
from package_extra.domain.models import ExtraField, FetchResult, PackageDescriptor
from package_extra.domain.exceptions import PackageExtraException, NotFoundException

logger = logging.getLogger(__name__)

OG_IMAGE_SELECTOR = "meta[property='og:image']"


class FieldFetchers:
    """
    One fetcher per extra field. Each fetcher writes at most its own field and
    never raises: a 404 is skipped silently, any other failure is logged and
    leaves the stored value untouched.
    """

    def __init__(
            self,
            registry_client: RegistryClient,
            github_client: GitHubClient,
            repository: PackageExtraRepository,
            attribute_extractor: Callable[[str, str, str], Optional[str]] = extract_attribute,
    ):
        self.registry_client = registry_client
        self.github_client = github_client
        self.repository = repository
        self.attribute_extractor = attribute_extractor

    async def _guard(
            self,
            field: ExtraField,
            package_name: str,
            fetch: Callable[[], Awaitable[FetchResult]],
    ) -> FetchResult:
        try:
            return await fetch()
        except NotFoundException:
            return FetchResult.SKIPPED_NOT_FOUND
        except (PackageExtraException, ValueError) as e:
            logger.error(f"[{package_name}] Failed to fetch {field.value}: {e}")
            return FetchResult.SKIPPED_FAILURE
        except Exception as e:
            logger.exception(f"[{package_name}] Unexpected error fetching {field.value}: {e}")
            return FetchResult.SKIPPED_FAILURE

    async def fetch_updated_time(self, session: aiohttp.ClientSession, package_name: str) -> FetchResult:
        """Stores the publish time of the latest version, in epoch millis."""
        async def fetch() -> FetchResult:
            package_info = await self.registry_client.fetch_package_info(session, package_name)
            updated_time = RegistryTranslator.to_updated_time(package_info)
            await self.repository.set_field(ExtraField.UPDATED_TIME, package_name, updated_time)
            return FetchResult.SUCCESS

        return await self._guard(ExtraField.UPDATED_TIME, package_name, fetch)

    async def fetch_unity_version(self, session: aiohttp.ClientSession, package_name: str) -> FetchResult:
        """Stores the minimum Unity version declared by the latest version, if any."""
        async def fetch() -> FetchResult:
            package_info = await self.registry_client.fetch_package_info(session, package_name)
            unity = RegistryTranslator.to_unity_version(package_info)
            if not unity:
                return FetchResult.SKIPPED_NOT_FOUND
            await self.repository.set_field(ExtraField.UNITY_VERSION, package_name, unity)
            return FetchResult.SUCCESS

        return await self._guard(ExtraField.UNITY_VERSION, package_name, fetch)

    async def fetch_stars(self, session: aiohttp.ClientSession, descriptor: PackageDescriptor) -> FetchResult:
        """Stores the star count of the repo, including its parent's when it is a fork."""
        async def fetch() -> FetchResult:
            repo_info = await self.github_client.fetch_repo(session, descriptor.repo)
            stars = GitHubTranslator.to_star_count(repo_info)
            await self.repository.set_field(ExtraField.STARS, descriptor.name, stars)
            return FetchResult.SUCCESS

        return await self._guard(ExtraField.STARS, descriptor.name, fetch)

    async def _fetch_image_url_for_repo(self, session: aiohttp.ClientSession, repo: str) -> str:
        try:
            page = await self.github_client.fetch_repo_page(session, repo)
        except NotFoundException:
            return ""
        return GitHubTranslator.to_image_url(self.attribute_extractor(page, OG_IMAGE_SELECTOR, "content"))

    async def fetch_image_url(self, session: aiohttp.ClientSession, descriptor: PackageDescriptor) -> FetchResult:
        """
        Stores the og:image of the repo page, falling back to the parent repo's page.
        An empty string is stored when neither page has a real image.
        """
        async def fetch() -> FetchResult:
            image_url = await self._fetch_image_url_for_repo(session, descriptor.repo)
            if not image_url and descriptor.parent_repo:
                image_url = await self._fetch_image_url_for_repo(session, descriptor.parent_repo)
            await self.repository.set_field(ExtraField.IMAGE_URL, descriptor.name, image_url)
            return FetchResult.SUCCESS

        return await self._guard(ExtraField.IMAGE_URL, descriptor.name, fetch)

    async def fetch_readme(self, session: aiohttp.ClientSession, descriptor: PackageDescriptor) -> FetchResult:
        """Stores the raw README text of the repo."""
        async def fetch() -> FetchResult:
            readme = await self.github_client.fetch_readme(session, descriptor.repo)
            await self.repository.set_field(ExtraField.README, descriptor.name, readme)
            return FetchResult.SUCCESS

        return await self._guard(ExtraField.README, descriptor.name, fetch)
