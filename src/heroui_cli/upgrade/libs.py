"""Candidates for ancillary ``@heroui/*`` libraries that are not components."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Collection, Dict, List

from ..constants import Constants
from ..versioning.compare import compare_versions, get_version_and_mode
from ..versioning.models import UpgradeCandidate


async def get_libs_data(
    installed: Dict[str, str],
    component_packages: Collection[str],
    lookup: Callable[[str], Awaitable[str]],
) -> List[UpgradeCandidate]:
    """Compare every installed library package against its channel target.

    Libraries are ``@heroui/`` packages that are not in ``component_packages``
    (e.g. ``@heroui/theme``, ``@heroui/system``).
    """
    libs = [
        name for name in installed
        if name.startswith(Constants.HEROUI_PREFIX) and name not in component_packages
    ]
    if not libs:
        return []

    async def _candidate(lib: str) -> UpgradeCandidate:
        current, mode = get_version_and_mode(installed, lib)
        target = await lookup(lib)
        is_latest = compare_versions(current, target) >= 0
        return UpgradeCandidate(
            package=lib,
            current_version=current,
            latest_version=current if is_latest else target,
            is_latest=is_latest,
            version_mode=mode,
        )

    return list(await asyncio.gather(*(_candidate(lib) for lib in libs)))
