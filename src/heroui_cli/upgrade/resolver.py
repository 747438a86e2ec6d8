"""Peer dependency resolution against a project's installed dependencies."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional

from ..constants import Constants
from ..versioning.compare import VERSION_MODE_REGEX, is_up_to_date, normalize_peer_version
from ..versioning.models import MissingDependencySet, UpgradeCandidate

logger = logging.getLogger(__name__)


def resolve_peer_dependencies(
    package_name: str,
    installed: Dict[str, str],
    missing_set: MissingDependencySet,
    peer_dependencies: Optional[Dict[str, str]],
    channel_tag: Optional[str] = None,
) -> List[UpgradeCandidate]:
    """Compare a component's peer requirements with what is installed.

    Peers absent from ``installed`` are recorded in ``missing_set`` (mutated
    in place so one pass can collect them across many components) and get
    no candidate here.

    Args:
        package_name: Component declaring the peers, for logging.
        installed: Project dependency map, name -> range string.
        missing_set: Collector for absent peers.
        peer_dependencies: name -> required range.
        channel_tag: Active pre-release channel, or None.

    Returns:
        One candidate per installed peer.
    """
    candidates: List[UpgradeCandidate] = []
    for peer_name, required_range in (peer_dependencies or {}).items():
        if peer_name not in installed:
            logger.debug("%s requires missing peer %s@%s", package_name, peer_name, required_range)
            missing_set.add(peer_name, required_range)
            continue

        raw = installed[peer_name]
        mode = VERSION_MODE_REGEX.search(raw)
        current = normalize_peer_version(raw)
        required = normalize_peer_version(required_range)
        candidates.append(
            UpgradeCandidate(
                package=peer_name,
                current_version=current,
                latest_version=required,
                is_latest=is_up_to_date(current, required, channel_tag),
                version_mode=mode.group(1) if mode else "",
            )
        )
    return candidates


async def resolve_missing_dependencies(
    missing_set: MissingDependencySet,
    lookup: Callable[[str], Awaitable[str]],
) -> List[UpgradeCandidate]:
    """Turn collected missing peers into candidates.

    A peer with an empty requirement is resolved through ``lookup`` (the
    channel's cached registry version). Lookups run concurrently; the first
    failure propagates.
    """
    missing = missing_set.to_list()

    async def _target(required_range: str, name: str) -> str:
        if required_range:
            return normalize_peer_version(required_range)
        return await lookup(name)

    targets = await asyncio.gather(*(_target(dep.required_range, dep.name) for dep in missing))
    return [
        UpgradeCandidate(
            package=dep.name,
            current_version=Constants.MISSING_VERSION,
            latest_version=target,
            is_latest=False,
        )
        for dep, target in zip(missing, targets)
    ]
