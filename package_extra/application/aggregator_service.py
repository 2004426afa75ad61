import logging
from typing import Dict

from package_extra.infrastructure.catalog import PackageCatalog
from package_extra.infrastructure.database import PackageExtraRepository
from package_extra.domain.models import AggregatedRecord, ExtraField, DEFAULT_UNITY_VERSION

logger = logging.getLogger(__name__)


class AggregatorService:
    """
    Builds the aggregated extra data of every known package from the stored
    fields and replaces the previous aggregation as a whole.
    """

    def __init__(self, catalog: PackageCatalog, repository: PackageExtraRepository):
        self.catalog = catalog
        self.repository = repository

    async def _build_record(self, package_name: str) -> AggregatedRecord:
        # README is stored but not part of the aggregation.
        stars = await self.repository.get_field(ExtraField.STARS, package_name)
        unity = await self.repository.get_field(ExtraField.UNITY_VERSION, package_name)
        image_url = await self.repository.get_field(ExtraField.IMAGE_URL, package_name)
        updated_time = await self.repository.get_field(ExtraField.UPDATED_TIME, package_name)

        return AggregatedRecord(
            stars=stars or 0,
            unity=unity or DEFAULT_UNITY_VERSION,
            image_url=image_url or None,
            time=updated_time or None,
        )

    async def aggregate(self) -> Dict[str, AggregatedRecord]:
        """
        Aggregates all packages currently in the catalog. Packages that left the
        catalog are dropped. Nothing is written if any read fails.
        """
        records: Dict[str, AggregatedRecord] = {}

        for package_name in self.catalog.list_all():
            if not self.catalog.exists(package_name):
                logger.error(f"[{package_name}] Package doesn't exist. Skipping.")
                continue
            records[package_name] = await self._build_record(package_name)

        await self.repository.set_aggregated(records)
        logger.info(f"Aggregated extra data for {len(records)} package(s).")
        return records
