"""Upgrade resolution: peer dependencies, aggregation and planning."""

from .aggregator import aggregate, count_upgrades, merge_peer_candidates
from .context import ResolutionContext, VersionStore
from .libs import get_libs_data
from .resolver import resolve_missing_dependencies, resolve_peer_dependencies
from .service import PlanStatus, UpgradePlan, UpgradeService

__all__ = [
    "aggregate",
    "count_upgrades",
    "merge_peer_candidates",
    "ResolutionContext",
    "VersionStore",
    "get_libs_data",
    "resolve_missing_dependencies",
    "resolve_peer_dependencies",
    "PlanStatus",
    "UpgradePlan",
    "UpgradeService",
]
