"""NPM registry client: dist-tag versions and peer dependencies."""

from __future__ import annotations

import asyncio
import logging
import urllib.parse
from typing import Any, Dict, List, Optional

import semantic_version

from ..cache.exec_cache import ExecCache
from ..common.http_client import get_json
from ..common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from ..constants import Constants
from ..errors import RegistryLookupError
from ..versioning.models import VersionChannel

logger = logging.getLogger(__name__)

PACKUMENT_HEADERS = {
    "Accept": "application/json"
}


def pick_tagged_version(packument: Dict[str, Any], tag: str) -> str:
    """Select the version published for ``tag`` in a packument.

    Falls back to the highest version string containing the tag, then to
    the ``latest`` dist-tag, then to "".
    """
    dist_tags = packument.get("dist-tags") or {}
    if dist_tags.get(tag):
        return dist_tags[tag]

    tagged: List[semantic_version.Version] = []
    for raw in (packument.get("versions") or {}).keys():
        if tag not in raw:
            continue
        try:
            tagged.append(semantic_version.Version(raw))
        except ValueError:
            continue  # Skip invalid versions
    if tagged:
        tagged.sort(reverse=True)
        return str(tagged[0])

    return dist_tags.get("latest", "")


class NpmRegistryClient:
    """Looks up target versions on the npm registry through an ExecCache.

    Lookup failures raise RegistryLookupError; callers never receive a
    silently defaulted version.
    """

    def __init__(self, cache: Optional[ExecCache] = None, base_url: str = Constants.REGISTRY_URL_NPM):
        self.cache = cache
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._packuments: Dict[str, Dict[str, Any]] = {}

    def package_url(self, package_name: str) -> str:
        """Registry URL for a package; scoped names keep their ``@``."""
        return self.base_url + urllib.parse.quote(package_name, safe="@")

    def fetch_packument(self, package_name: str) -> Dict[str, Any]:
        """Fetch (and memoize for this client) the full package document."""
        if package_name in self._packuments:
            return self._packuments[package_name]

        url = self.package_url(package_name)
        with Timer() as timer:
            status_code, _, data = get_json(url, headers=PACKUMENT_HEADERS)

        if is_debug_enabled(logger):
            logger.debug(
                "Registry lookup",
                extra=extra_context(
                    event="registry_lookup",
                    component="npm_client",
                    status_code=status_code,
                    duration_ms=timer.duration_ms(),
                    target=safe_url(url),
                    package_manager="npm"
                )
            )

        if status_code == 404:
            raise RegistryLookupError(package_name, "package not found")
        if status_code != 200:
            raise RegistryLookupError(package_name, f"registry returned status {status_code}")
        if not isinstance(data, dict):
            raise RegistryLookupError(package_name, "invalid registry response")

        self._packuments[package_name] = data
        return data

    def lookup_version(self, package_name: str, channel: VersionChannel = VersionChannel.LATEST) -> str:
        """Uncached version lookup for a channel."""
        packument = self.fetch_packument(package_name)
        return pick_tagged_version(packument, channel.value)

    def lookup_peer_dependencies(self, package_name: str, version: str) -> Dict[str, str]:
        """Uncached peerDependencies of a published version."""
        packument = self.fetch_packument(package_name)
        manifest = (packument.get("versions") or {}).get(version)
        if manifest is None:
            raise RegistryLookupError(package_name, f"version {version} not published")
        return dict(manifest.get("peerDependencies") or {})

    async def get_latest_version(self, package_name: str) -> str:
        return await self.get_version(package_name, VersionChannel.LATEST)

    async def get_beta_version(self, package_name: str) -> str:
        return await self.get_version(package_name, VersionChannel.BETA)

    async def get_canary_version(self, package_name: str) -> str:
        return await self.get_version(package_name, VersionChannel.CANARY)

    async def get_version(self, package_name: str, channel: VersionChannel) -> str:
        """Channel target version, cached for the cache TTL."""

        def _lookup():
            return asyncio.to_thread(self.lookup_version, package_name, channel)

        if self.cache is None:
            return await _lookup()
        if channel is VersionChannel.LATEST:
            return await self.cache.get_package_version(package_name, lambda _name: _lookup())
        return await self.cache.get_or_compute(f"{package_name}@{channel.value}", _lookup)

    async def get_peer_dependencies(self, package_name: str, version: str) -> Dict[str, str]:
        """peerDependencies of ``package_name@version``, cached for the cache TTL."""

        def _lookup():
            return asyncio.to_thread(self.lookup_peer_dependencies, package_name, version)

        if self.cache is None:
            return await _lookup()
        return await self.cache.get_or_compute(f"{package_name}@{version} peerDependencies", _lookup)
