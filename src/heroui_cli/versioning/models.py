"""Data models for version comparison and upgrade resolution."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional

from ..constants import Constants
from .compare import min_required_version, normalize_peer_version


class VersionChannel(Enum):
    """Release line used as the upgrade target."""
    LATEST = "latest"
    BETA = "beta"
    CANARY = "canary"

    @property
    def is_prerelease(self) -> bool:
        """True for channels that publish pre-release builds."""
        return self is not VersionChannel.LATEST

    @property
    def tag(self) -> Optional[str]:
        """Tag a version string must carry to belong to this channel."""
        return self.value if self.is_prerelease else None


@dataclass(frozen=True)
class PackageRecord:
    """An installed dependency as read from package.json."""
    name: str
    installed_version: str
    version_range_prefix: str = ""  # "^" | "~" | ""


@dataclass
class UpgradeCandidate:
    """Installed (or missing) package compared against a target version."""
    package: str
    current_version: str
    latest_version: str
    is_latest: bool
    version_mode: str = ""
    peer_dependencies: Optional[Dict[str, str]] = None

    @property
    def is_missing(self) -> bool:
        return self.current_version == Constants.MISSING_VERSION

    @property
    def spec(self) -> str:
        """Install spec, e.g. ``react@18.0.0``."""
        return f"{self.package}@{self.latest_version}"


@dataclass(frozen=True)
class MissingDependency:
    """A peer dependency required by a component but absent from the project."""
    name: str
    required_range: str


class MissingDependencySet:
    """Missing peers keyed by package name.

    Every declared requirement is remembered. In strict mode the lowest
    normalized requirement represents the peer (ties keep the first seen);
    otherwise the first declared one does.
    """

    def __init__(self, strict: bool = True):
        self.strict = strict
        self._ranges: Dict[str, List[str]] = {}

    def add(self, name: str, required_range: str) -> None:
        self._ranges.setdefault(name, []).append(required_range)

    def requirements(self, name: str) -> List[str]:
        return list(self._ranges.get(name, []))

    def get(self, name: str) -> Optional[MissingDependency]:
        ranges = self._ranges.get(name)
        if not ranges:
            return None
        declared = [r for r in ranges if r] or ranges
        chosen = declared[0]
        if self.strict:
            wanted = min_required_version(declared, strict=True)
            chosen = next((r for r in declared if normalize_peer_version(r) == wanted), chosen)
        return MissingDependency(name=name, required_range=chosen)

    def __contains__(self, name: object) -> bool:
        return name in self._ranges

    def __iter__(self) -> Iterator[MissingDependency]:
        return iter(self.to_list())

    def __len__(self) -> int:
        return len(self._ranges)

    def to_list(self) -> List[MissingDependency]:
        return [self.get(name) for name in self._ranges]


@dataclass
class UpgradeCount:
    """Number of pending upgrades by semver level."""
    major: int = 0
    minor: int = 0
    patch: int = 0
    packages: Dict[str, str] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return self.major + self.minor + self.patch
