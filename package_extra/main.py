import argparse
import asyncio
import sys
import logging
from typing import List, Optional
from dotenv import load_dotenv

from package_extra.config import Settings
from package_extra.infrastructure.catalog import PackageCatalog
from package_extra.infrastructure.database import PackageExtraRepository
from package_extra.infrastructure.github_client import GitHubClient
from package_extra.infrastructure.registry_client import RegistryClient
from package_extra.application.field_fetchers import FieldFetchers
from package_extra.application.enrichment_service import EnrichmentService
from package_extra.application.aggregator_service import AggregatorService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="package-extra",
        description="Fetch extra package data (stars, Unity version, image, readme, updated time) and aggregate it.",
    )
    parser.add_argument("names", nargs="*", metavar="name", help="package names to fetch")
    parser.add_argument("--all", action="store_true", help="fetch extra package data for all packages")
    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    # Load environment variables from .env file
    load_dotenv()
    settings = Settings.from_env()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    parser = build_parser()
    args = parser.parse_args(argv)

    catalog = PackageCatalog(settings.packages_dir)
    package_names = catalog.list_all() if args.all else args.names
    if not package_names:
        parser.print_help()
        return 0

    if not settings.database_url:
        logger.error("DATABASE_URL is not set in the environment.")
        return 1

    repository = PackageExtraRepository(db_url=settings.database_url)
    fetchers = FieldFetchers(
        registry_client=RegistryClient(registry_url=settings.registry_url),
        github_client=GitHubClient(
            token=settings.github_token,
            api_url=settings.github_api_url,
            web_url=settings.github_web_url,
        ),
        repository=repository,
    )

    try:
        await repository.create_schema()
        await EnrichmentService(catalog=catalog, fetchers=fetchers).enrich(package_names)
        await AggregatorService(catalog=catalog, repository=repository).aggregate()
    finally:
        await repository.close()
    return 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Interrupted by user. Exiting gracefully.")
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
