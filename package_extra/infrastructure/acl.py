import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# GitHub falls back to the owner's avatar when a repo has no social preview image.
AVATAR_URL_PATTERN = re.compile(r"^https://avatar")


def _object(value: Any, name: str) -> Dict[str, Any]:
    """Returns a JSON object member, treating a missing one as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{name} is not a JSON object.")
    return value


def _count(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} is missing or not an integer.")
    return value


class RegistryTranslator:
    """
    Anti-corruption layer that translates raw registry JSON documents into field values.
    Shape problems are reported as ValueError.
    """

    @staticmethod
    def latest_version(package_info: Dict[str, Any]) -> str:
        package_info = _object(package_info, "registry response")
        version = _object(package_info.get('dist-tags'), "dist-tags").get('latest')
        if not isinstance(version, str) or not version:
            raise ValueError("dist-tags.latest is missing from registry response.")
        return version

    @staticmethod
    def to_updated_time(package_info: Dict[str, Any]) -> int:
        """
        Resolves the publish time of the latest version.

        Returns:
            int: Epoch milliseconds.
        """
        version = RegistryTranslator.latest_version(package_info)
        raw_time = _object(package_info.get('time'), "time").get(version)
        if not isinstance(raw_time, str) or not raw_time:
            raise ValueError(f"time of version {version} is missing from registry response.")
        published = datetime.fromisoformat(raw_time.replace("Z", "+00:00"))
        if published.tzinfo is None:
            published = published.replace(tzinfo=timezone.utc)
        return int(published.timestamp() * 1000)

    @staticmethod
    def to_unity_version(package_info: Dict[str, Any]) -> Optional[str]:
        """
        Resolves the minimum Unity version declared by the latest version.
        Returns None when the version doesn't declare one.
        """
        version = RegistryTranslator.latest_version(package_info)
        version_info = _object(package_info.get('versions'), "versions").get(version)
        if not isinstance(version_info, dict):
            raise ValueError(f"versions.{version} is missing from registry response.")
        unity = version_info.get('unity')
        if unity is None:
            return None
        if not isinstance(unity, str):
            raise ValueError(f"versions.{version}.unity is not a string.")
        return unity or None


class GitHubTranslator:
    """
    Anti-corruption layer for GitHub REST payloads and page metadata.
    """

    @staticmethod
    def to_star_count(repo_info: Dict[str, Any]) -> int:
        """Stars of the repository, plus those of its parent when it is a fork."""
        repo_info = _object(repo_info, "repository response")
        stars = _count(repo_info.get('stargazers_count'), "stargazers_count")
        parent = _object(repo_info.get('parent'), "parent")
        if not parent:
            return stars
        return stars + _count(parent.get('stargazers_count'), "parent.stargazers_count")

    @staticmethod
    def to_image_url(og_image: Optional[str]) -> str:
        """Normalizes an og:image value, treating generated avatars as no image."""
        if not og_image or AVATAR_URL_PATTERN.match(og_image):
            return ""
        return og_image
