"""Image data models."""

from enum import Enum
from typing import Optional
from dataclasses import dataclass


KNOWN_KINDS = ("raw", "tar")


class VerificationMode(Enum):
    """How an image is checked before it is registered."""
    VERIFIED = "verified"
    SKIP_VERIFICATION = "skip-verification"


@dataclass(frozen=True)
class ImageSpec:
    """A requested image, parsed from ``<distribution>/<release>/<type>``."""
    distribution: str
    release: str
    kind: str  # "raw" or "tar", checked by the catalog

    @property
    def local_name(self) -> str:
        """Name of the image in the daemon's registry."""
        return f"{self.distribution}-{self.release}-{self.kind}"

    def __str__(self) -> str:
        return f"{self.distribution}/{self.release}/{self.kind}"


@dataclass(frozen=True)
class RemoteImageLocation:
    """Where an image lives in the catalog."""
    url: str
    expected_status: int = 200

    @classmethod
    def for_spec(cls, spec: ImageSpec, base_url: str) -> 'RemoteImageLocation':
        """Build the catalog URL of ``spec`` under ``base_url``."""
        base = base_url.rstrip('/')
        return cls(
            url=f"{base}/{spec.distribution}/{spec.release}/{spec.kind}/image.{spec.kind}.xz"
        )


@dataclass
class AcquisitionReport:
    """Outcome of a successful acquisition."""
    local_name: str
    already_existed: bool = False
    read_only_cleared: bool = False
    details: Optional[str] = None

    @property
    def message(self) -> str:
        if self.already_existed:
            return f"Image {self.local_name} already exists"
        return f"Image deployed locally as {self.local_name}"


def resolve(token: str, base_url: Optional[str] = None) -> ImageSpec:
    """Parse ``token`` into an ImageSpec.

    Only the structure is looked at: a token with fewer than two separators
    gives an empty release rather than an error, and the catalog lookup is
    left to reject it. ``base_url`` is accepted so callers can resolve and
    locate in one place; it does not change the parsed fields.
    """
    parts = token.strip().split('/')

    distribution = parts[0]
    release = parts[1] if len(parts) > 2 else ""
    kind = parts[-1] if len(parts) > 1 else ""

    return ImageSpec(distribution=distribution, release=release, kind=kind)
