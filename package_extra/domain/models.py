from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

# Minimum Unity version assumed for packages that don't declare one.
DEFAULT_UNITY_VERSION = "2018.1"


class ExtraField(str, Enum):
    """Keys of the independently stored extra-data fields."""
    UPDATED_TIME = "updated_time"
    UNITY_VERSION = "unity_version"
    STARS = "stars"
    IMAGE_URL = "image_url"
    README = "readme"


class FetchResult(str, Enum):
    """Outcome of a single field fetch."""
    SUCCESS = "success"
    SKIPPED_NOT_FOUND = "skipped_not_found"
    SKIPPED_FAILURE = "skipped_failure"


class PackageDescriptor(BaseModel):
    """
    Immutable description of where a package's sources live.
    Repository references are in the ``owner/name`` form.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Package name, e.g. com.foo.bar")
    repo: str = Field(..., description="Primary GitHub repository (owner/name)")
    parent_repo: Optional[str] = Field(
        default=None,
        description="Fork-origin repository, present only when repo is a fork",
    )


class AggregatedRecord(BaseModel):
    """
    Denormalized extra data for one package, with defaults applied.
    ``None`` marks an image or time that was never resolved.
    """
    model_config = ConfigDict(frozen=True)

    stars: int = Field(default=0, ge=0, description="Stars of the repo plus its parent")
    unity: str = Field(default=DEFAULT_UNITY_VERSION, description="Minimum Unity version")
    image_url: Optional[str] = Field(default=None, description="Social preview image URL")
    time: Optional[int] = Field(default=None, description="Latest publish time in epoch millis")
