"""Package registry clients."""

from .npm import NpmRegistryClient, pick_tagged_version

__all__ = ["NpmRegistryClient", "pick_tagged_version"]
