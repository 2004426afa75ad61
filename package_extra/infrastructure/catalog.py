import logging
import re
from pathlib import Path
from typing import List, Optional

import yaml

from package_extra.domain.models import PackageDescriptor
from package_extra.domain.exceptions import PackageNotFoundException

logger = logging.getLogger(__name__)

PACKAGE_FILE_SUFFIX = ".yml"
GITHUB_REPO_URL = re.compile(r"^https?://(?:www\.)?github\.com/([^/\s]+/[^/\s]+?)(?:\.git)?/?$")


def parse_repo(repo_url: Optional[str]) -> Optional[str]:
    """Converts a GitHub repository URL into ``owner/name``. Returns None for other URLs."""
    if not repo_url:
        return None
    match = GITHUB_REPO_URL.match(repo_url.strip())
    return match.group(1) if match else None


class PackageCatalog:
    """
    Known packages, one YAML metadata file per package named ``<package>.yml``.
    """

    def __init__(self, packages_dir: str):
        self.packages_dir = Path(packages_dir)

    def _path(self, package_name: str) -> Path:
        return self.packages_dir / f"{package_name}{PACKAGE_FILE_SUFFIX}"

    def list_all(self) -> List[str]:
        """Returns every known package name, sorted."""
        if not self.packages_dir.is_dir():
            logger.warning(f"Packages directory {self.packages_dir} does not exist.")
            return []
        return sorted(
            path.name[:-len(PACKAGE_FILE_SUFFIX)]
            for path in self.packages_dir.iterdir()
            if path.is_file() and path.name.endswith(PACKAGE_FILE_SUFFIX)
        )

    def exists(self, package_name: str) -> bool:
        # Names are file stems; reject anything that could escape the directory.
        if not package_name or "/" in package_name or "\\" in package_name or package_name.startswith("."):
            return False
        return self._path(package_name).is_file()

    def load_descriptor(self, package_name: str) -> PackageDescriptor:
        """
        Loads the repository references of a package.

        Raises:
            PackageNotFoundException: The file is missing, unreadable, or has no GitHub repoUrl.
        """
        if not self.exists(package_name):
            raise PackageNotFoundException(f"Package {package_name} doesn't exist.")
        try:
            with open(self._path(package_name), encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise PackageNotFoundException(f"Failed to load package {package_name}: {e}") from e

        if not isinstance(raw, dict):
            raise PackageNotFoundException(f"Package {package_name} metadata is not a mapping.")
        repo = parse_repo(raw.get('repoUrl'))
        if not repo:
            raise PackageNotFoundException(f"Package {package_name} has no GitHub repoUrl.")

        return PackageDescriptor(
            name=package_name,
            repo=repo,
            parent_repo=parse_repo(raw.get('parentRepoUrl')),
        )
