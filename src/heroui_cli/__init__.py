"""heroui-cli core: version comparison, upgrade resolution and command cache."""

__version__ = "0.1.0"
