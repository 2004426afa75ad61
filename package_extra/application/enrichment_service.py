import logging
from typing import Dict, Iterable
import aiohttp

from package_extra.application.field_fetchers import FieldFetchers
from package_extra.infrastructure.catalog import PackageCatalog
from package_extra.domain.models import ExtraField, FetchResult
from package_extra.domain.exceptions import PackageNotFoundException

logger = logging.getLogger(__name__)


class EnrichmentService:
    """
    Fetches the extra fields of the requested packages.

    Packages are processed one at a time and, within a package, the fields
    are fetched one at a time in a fixed order. A failed field never stops
    the remaining fields or packages, and nothing is rolled back.
    """

    def __init__(self, catalog: PackageCatalog, fetchers: FieldFetchers):
        self.catalog = catalog
        self.fetchers = fetchers

    async def enrich(self, package_names: Iterable[str]) -> Dict[str, Dict[ExtraField, FetchResult]]:
        """
        Returns:
            Dict mapping each attempted package to the outcome of each field.
            Packages skipped before fetching are absent.
        """
        package_names = list(package_names)
        results: Dict[str, Dict[ExtraField, FetchResult]] = {}

        logger.info(f"Fetching extra data for {len(package_names)} package(s).")

        async with aiohttp.ClientSession() as session:
            for package_name in package_names:
                if not self.catalog.exists(package_name):
                    logger.error(f"[{package_name}] Package doesn't exist. Skipping.")
                    continue
                try:
                    descriptor = self.catalog.load_descriptor(package_name)
                except PackageNotFoundException as e:
                    logger.error(f"[{package_name}] {e} Skipping.")
                    continue

                outcome = {
                    ExtraField.UPDATED_TIME: await self.fetchers.fetch_updated_time(session, package_name),
                    ExtraField.UNITY_VERSION: await self.fetchers.fetch_unity_version(session, package_name),
                    ExtraField.STARS: await self.fetchers.fetch_stars(session, descriptor),
                    ExtraField.IMAGE_URL: await self.fetchers.fetch_image_url(session, descriptor),
                    ExtraField.README: await self.fetchers.fetch_readme(session, descriptor),
                }
                results[package_name] = outcome

                failed = [field.value for field, result in outcome.items() if result is FetchResult.SKIPPED_FAILURE]
                if failed:
                    logger.info(f"[{package_name}] Done with failures: {', '.join(failed)}.")
                else:
                    logger.info(f"[{package_name}] Done.")

        logger.info(f"Extra data fetched for {len(results)}/{len(package_names)} package(s).")
        return results
