"""Persistent TTL cache for registry lookups and command output."""

from .exec_cache import CacheEntry, ExecCache, run_command

__all__ = ["CacheEntry", "ExecCache", "run_command"]
