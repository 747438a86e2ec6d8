"""Upgrade planning: direct components, their peers, libraries and missing deps."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Collection, Dict, List, Optional, Sequence

from ..common.logging_utils import Timer, extra_context
from ..constants import Constants
from ..errors import ComponentNotFoundError
from ..project import to_records
from ..versioning.compare import is_up_to_date
from ..versioning.models import MissingDependencySet, PackageRecord, UpgradeCandidate, UpgradeCount
from .aggregator import aggregate, count_upgrades, merge_peer_candidates
from .context import ResolutionContext, VersionStore
from .libs import get_libs_data
from .resolver import resolve_missing_dependencies, resolve_peer_dependencies

logger = logging.getLogger(__name__)


class PlanStatus(Enum):
    """Outcome of planning an upgrade."""
    READY = "ready"
    UP_TO_DATE = "up_to_date"
    NO_COMPONENTS = "no_components"
    CANCELLED = "cancelled"


@dataclass
class UpgradePlan:
    """Pending upgrades and how planning ended; the CLI layer decides what to print or exit with."""
    status: PlanStatus
    candidates: List[UpgradeCandidate] = field(default_factory=list)
    count: UpgradeCount = field(default_factory=UpgradeCount)

    @property
    def install_specs(self) -> List[str]:
        return [candidate.spec for candidate in self.candidates]


class UpgradeService:
    """Builds an UpgradePlan for one project.

    Registry lookups for the selected components run concurrently; if any of
    them fails the whole plan fails with that error.
    """

    def __init__(self, registry, context: Optional[ResolutionContext] = None,
                 store: Optional[VersionStore] = None):
        self.registry = registry
        self.context = context or ResolutionContext()
        self.store = store or VersionStore(registry, self.context)

    async def direct_candidate(self, record: PackageRecord) -> UpgradeCandidate:
        """Compare one installed component with its channel target."""
        target = await self.store.target_version(record.name)
        peers: Dict[str, str] = {}
        if target:
            peers = await self.registry.get_peer_dependencies(record.name, target)
        return UpgradeCandidate(
            package=record.name,
            current_version=record.installed_version,
            latest_version=target,
            is_latest=is_up_to_date(record.installed_version, target, self.context.channel_tag),
            version_mode=record.version_range_prefix,
            peer_dependencies=peers,
        )

    async def plan(
        self,
        installed: Dict[str, str],
        targets: Optional[Sequence[str]] = None,
        all_packages: bool = False,
        exclude: Collection[str] = (),
        confirm: Optional[Callable[[List[UpgradeCandidate]], bool]] = None,
    ) -> UpgradePlan:
        """Plan upgrades for ``installed`` (package.json name -> range).

        Args:
            installed: All project dependencies.
            targets: Component names or packages to upgrade; all installed
                components when empty.
            all_packages: Also include non-component ``@heroui/*`` libraries.
            exclude: Package names to leave out of the result.
            confirm: Called with the pending list; returning False cancels.

        Raises:
            ComponentNotFoundError: If a target is not an installed package.
            RegistryLookupError: If any version lookup fails.
        """
        heroui = [r for r in to_records(installed) if r.name.startswith(Constants.HEROUI_PREFIX)]
        if not heroui:
            logger.debug("No %s packages installed", Constants.HEROUI_PREFIX)
            return UpgradePlan(status=PlanStatus.NO_COMPONENTS)

        component_packages = set(self.context.component_packages) or {r.name for r in heroui}
        components = [r for r in heroui if r.name in component_packages]
        if targets:
            wanted = self._target_packages(targets, [r.name for r in heroui])
            selected = [r for r in heroui if r.name in wanted]
        else:
            selected = components

        with Timer() as timer:
            direct = list(await asyncio.gather(*(self.direct_candidate(r) for r in selected)))

            missing_set = MissingDependencySet(strict=self.context.strict_peer_versions)
            peer: List[UpgradeCandidate] = []
            for candidate in direct:
                peer.extend(resolve_peer_dependencies(
                    candidate.package,
                    installed,
                    missing_set,
                    candidate.peer_dependencies,
                    self.context.channel_tag,
                ))
            peer = merge_peer_candidates(peer)

            libs: List[UpgradeCandidate] = []
            if all_packages:
                libs = await get_libs_data(installed, component_packages, self.store.target_version)
            missing = await resolve_missing_dependencies(missing_set, self.store.target_version)

        result = [c for c in aggregate(direct, peer, libs, missing) if c.package not in exclude]
        logger.debug(
            "Upgrade plan resolved",
            extra=extra_context(
                event="upgrade_plan",
                component="upgrade_service",
                direct=len(direct),
                peer=len(peer),
                libs=len(libs),
                missing=len(missing),
                pending=len(result),
                duration_ms=timer.duration_ms(),
            ),
        )

        if not result:
            return UpgradePlan(status=PlanStatus.UP_TO_DATE)
        plan = UpgradePlan(status=PlanStatus.READY, candidates=result, count=count_upgrades(result))
        if confirm is not None and not confirm(result):
            plan.status = PlanStatus.CANCELLED
        return plan

    @staticmethod
    def _target_packages(targets: Sequence[str], installed_packages: List[str]) -> List[str]:
        """Map component names (``button``) or packages to installed packages."""
        resolved = []
        for target in targets:
            package = target if target.startswith("@") else f"{Constants.HEROUI_PREFIX}{target}"
            if package not in installed_packages:
                raise ComponentNotFoundError(target)
            resolved.append(package)
        return resolved
