"""Per-invocation resolution settings and memoized target versions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from ..constants import Constants
from ..versioning.models import VersionChannel


@dataclass(frozen=True)
class ResolutionContext:
    """Settings threaded through resolution, built once per command run."""
    channel: VersionChannel = VersionChannel.LATEST
    debug: bool = False
    no_cache: bool = False
    component_packages: FrozenSet[str] = field(default_factory=frozenset)
    strict_peer_versions: bool = True

    @property
    def channel_tag(self) -> Optional[str]:
        return self.channel.tag


class VersionStore:
    """Memoized target versions, one accessor per known key.

    Each value is resolved at most once per store; the registry client adds
    the on-disk cache underneath.
    """

    def __init__(self, registry, context: ResolutionContext):
        self._registry = registry
        self._context = context
        self._versions: Dict[Tuple[str, VersionChannel], str] = {}

    async def latest_version(self) -> str:
        return await self._resolve(Constants.HERO_UI, VersionChannel.LATEST)

    async def beta_version(self) -> str:
        return await self._resolve(Constants.HERO_UI, VersionChannel.BETA)

    async def canary_version(self) -> str:
        return await self._resolve(Constants.HERO_UI, VersionChannel.CANARY)

    async def cli_latest_version(self) -> str:
        return await self._resolve(Constants.HEROUI_CLI, VersionChannel.LATEST)

    async def target_version(self, package_name: str) -> str:
        """Version of ``package_name`` on the context's channel."""
        return await self._resolve(package_name, self._context.channel)

    async def _resolve(self, package_name: str, channel: VersionChannel) -> str:
        key = (package_name, channel)
        if key not in self._versions:
            self._versions[key] = await self._registry.get_version(package_name, channel)
        return self._versions[key]
