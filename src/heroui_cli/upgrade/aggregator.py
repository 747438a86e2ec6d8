"""Merge upgrade candidates from every source into one actionable list."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..versioning.compare import compare_versions, get_update_type
from ..versioning.models import UpgradeCandidate, UpgradeCount


def aggregate(
    direct: Iterable[UpgradeCandidate],
    peer: Iterable[UpgradeCandidate] = (),
    libs: Iterable[UpgradeCandidate] = (),
    missing: Iterable[UpgradeCandidate] = (),
) -> List[UpgradeCandidate]:
    """Deduplicate candidates by package and keep only pending upgrades.

    Sources are concatenated as direct, peer, libs, missing and the first
    entry for a package wins, so an explicitly targeted package always beats
    a peer- or library-derived one. Entries already at their target are
    dropped; unresolved (empty) target versions are kept as-is.
    """
    seen = set()
    result: List[UpgradeCandidate] = []
    for source in (direct, peer, libs, missing):
        for candidate in source:
            if candidate.package in seen:
                continue
            seen.add(candidate.package)
            if not candidate.is_latest:
                result.append(candidate)
    return result


def count_upgrades(candidates: Iterable[UpgradeCandidate]) -> UpgradeCount:
    """Tally upgrades by semver level; missing packages count as major."""
    count = UpgradeCount()
    for candidate in candidates:
        if candidate.is_missing:
            level: Optional[str] = "major"
        else:
            level = get_update_type(candidate.current_version, candidate.latest_version)
        if level is None:
            continue
        setattr(count, level, getattr(count, level) + 1)
        count.packages[candidate.package] = level
    return count


def merge_peer_candidates(candidates: Iterable[UpgradeCandidate]) -> List[UpgradeCandidate]:
    """Keep one candidate per peer package: the one with the highest target.

    Several components can declare the same peer with different ranges; the
    most demanding one decides whether the peer needs an upgrade. Ties keep
    the first entry, and packages stay in order of first appearance.
    """
    merged: Dict[str, UpgradeCandidate] = {}
    for candidate in candidates:
        known = merged.get(candidate.package)
        if known is None or compare_versions(candidate.latest_version, known.latest_version) > 0:
            merged[candidate.package] = candidate
    return list(merged.values())
