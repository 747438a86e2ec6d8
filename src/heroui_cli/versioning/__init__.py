"""Version comparison, range normalization and upgrade data models."""

from .compare import (
    compare_versions,
    get_update_type,
    get_version_and_mode,
    is_up_to_date,
    min_required_version,
    normalize_peer_version,
)
from .models import (
    MissingDependency,
    MissingDependencySet,
    PackageRecord,
    UpgradeCandidate,
    UpgradeCount,
    VersionChannel,
)

__all__ = [
    "compare_versions",
    "get_update_type",
    "get_version_and_mode",
    "is_up_to_date",
    "min_required_version",
    "normalize_peer_version",
    "MissingDependency",
    "MissingDependencySet",
    "PackageRecord",
    "UpgradeCandidate",
    "UpgradeCount",
    "VersionChannel",
]
