"""Configuration loading for the CLI core.

Precedence (highest first): explicit overrides passed to build_context,
environment variables, YAML config file, built-in Constants.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, Optional

import yaml

from .cache.exec_cache import ExecCache
from .constants import Constants
from .errors import ValidationError
from .upgrade.context import ResolutionContext
from .versioning.models import VersionChannel

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _default_config_paths() -> Iterable[str]:
    for name in Constants.CONFIG_FILE_NAMES:
        yield os.path.join(os.getcwd(), name)
    for name in Constants.CONFIG_FILE_NAMES:
        yield os.path.join(os.path.expanduser("~"), ".config", "heroui-cli", name)


def _load_yaml_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Read the first available YAML config; {} when none exists.

    An explicit ``path`` that is missing or malformed is an error; default
    locations are skipped silently when absent.
    """
    if path:
        if not os.path.isfile(path):
            raise ValidationError(f"Config file not found: {path}")
        candidates = [path]
    else:
        candidates = [p for p in _default_config_paths() if os.path.isfile(p)]

    for candidate in candidates:
        with open(candidate, "r", encoding="utf-8") as fh:
            try:
                data = yaml.safe_load(fh) or {}
            except yaml.YAMLError as exc:
                raise ValidationError(f"Invalid YAML in {candidate}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValidationError(f"Config file {candidate} must contain a mapping")
        logger.debug("Loaded config from %s", candidate)
        return data
    return {}


def load_config(path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Merge YAML config and environment into a flat settings dict."""
    env = os.environ if environ is None else environ
    file_cfg = _load_yaml_config(path)

    settings: Dict[str, Any] = {
        "channel": VersionChannel.LATEST.value,
        "no_cache": False,
        "debug": False,
        "cache_dir": Constants.CACHE_DIR,
        "cache_ttl": Constants.CACHE_TTL_SEC,
        "registry": Constants.REGISTRY_URL_NPM,
        "component_packages": [],
        "strict_peer_versions": True,
    }
    settings.update({k: v for k, v in file_cfg.items() if k in settings})

    if env.get(Constants.ENV_CHANNEL):
        settings["channel"] = env[Constants.ENV_CHANNEL]
    if env.get(Constants.ENV_NO_CACHE):
        settings["no_cache"] = env[Constants.ENV_NO_CACHE].strip().lower() in _TRUTHY
    if env.get(Constants.ENV_CACHE_DIR):
        settings["cache_dir"] = env[Constants.ENV_CACHE_DIR]
    if env.get(Constants.ENV_REGISTRY):
        settings["registry"] = env[Constants.ENV_REGISTRY]
    return settings


def build_context(settings: Dict[str, Any], **overrides: Any) -> ResolutionContext:
    """Create the per-invocation ResolutionContext."""
    merged = dict(settings)
    merged.update({k: v for k, v in overrides.items() if v is not None})
    try:
        channel = VersionChannel(str(merged.get("channel", "latest")).lower())
    except ValueError as exc:
        raise ValidationError(f"Unknown release channel: {merged.get('channel')}") from exc
    return ResolutionContext(
        channel=channel,
        debug=bool(merged.get("debug", False)),
        no_cache=bool(merged.get("no_cache", False)),
        component_packages=frozenset(merged.get("component_packages") or ()),
        strict_peer_versions=bool(merged.get("strict_peer_versions", True)),
    )


def build_cache(settings: Dict[str, Any]) -> ExecCache:
    """Create and initialize the ExecCache described by ``settings``."""
    cache = ExecCache(
        path=os.path.join(settings.get("cache_dir") or Constants.CACHE_DIR, Constants.CACHE_FILE),
        ttl=int(settings.get("cache_ttl") or Constants.CACHE_TTL_SEC),
    )
    cache.init(disable_cache=bool(settings.get("no_cache", False)))
    return cache
