"""Read and update a consumer project's package.json."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from .constants import Constants
from .errors import FileNotFoundError, ValidationError  # pylint: disable=redefined-builtin
from .versioning.compare import get_version_and_mode
from .versioning.models import PackageRecord, UpgradeCandidate

logger = logging.getLogger(__name__)


@dataclass
class PackageInfo:
    """Parsed package.json with its dependency sections."""
    path: str
    package_json: Dict[str, Any]
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)

    @property
    def all_dependencies(self) -> Dict[str, str]:
        """devDependencies overlaid by dependencies."""
        merged = dict(self.dev_dependencies)
        merged.update(self.dependencies)
        return merged

    def records(self) -> List[PackageRecord]:
        return to_records(self.all_dependencies)


def to_records(installed: Dict[str, str]) -> List[PackageRecord]:
    """Build immutable PackageRecords from a name -> range map."""
    records = []
    for name in installed:
        version, mode = get_version_and_mode(installed, name)
        records.append(PackageRecord(name=name, installed_version=version, version_range_prefix=mode))
    return records


def read_package_info(path: str = Constants.PACKAGE_JSON_FILE) -> PackageInfo:
    """Load package.json.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValidationError: If it is not a JSON object.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    with open(path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValidationError(f"{path} does not contain a JSON object")

    dependencies = data.get("dependencies") or {}
    dev_dependencies = data.get("devDependencies") or {}
    return PackageInfo(
        path=path,
        package_json=data,
        dependencies=dependencies,
        dev_dependencies=dev_dependencies,
    )


def write_upgrade_version(info: PackageInfo, candidates: Iterable[UpgradeCandidate]) -> None:
    """Write target versions into package.json, keeping each ^/~ prefix.

    Packages only listed under devDependencies stay there; everything else,
    including missing peers, goes to dependencies.
    """
    for candidate in candidates:
        value = f"{candidate.version_mode}{candidate.latest_version}"
        if candidate.package in info.dev_dependencies and candidate.package not in info.dependencies:
            info.dev_dependencies[candidate.package] = value
        else:
            info.dependencies[candidate.package] = value

    if info.dependencies:
        info.package_json["dependencies"] = info.dependencies
    if info.dev_dependencies:
        info.package_json["devDependencies"] = info.dev_dependencies

    with open(info.path, "w", encoding="utf-8") as fh:
        json.dump(info.package_json, fh, indent=2)
    logger.info("Upgrade versions written to %s", info.path)
