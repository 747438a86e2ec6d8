"""Constants used in the project."""

import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_NPM = "https://registry.npmjs.org/"
    PACKAGE_JSON_FILE = "package.json"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3

    HERO_UI = "@heroui/react"
    HEROUI_CLI = "heroui-cli"
    HEROUI_PREFIX = "@heroui/"
    MISSING_VERSION = "Missing"

    CACHE_TTL_SEC = 30 * 60
    CACHE_DIR = os.path.join(os.path.expanduser("~"), ".heroui-cli")
    CACHE_FILE = "cache.json"

    CONFIG_FILE_NAMES = ["heroui-cli.yml", "heroui-cli.yaml"]
    ENV_NO_CACHE = "HEROUI_CLI_NO_CACHE"
    ENV_CHANNEL = "HEROUI_CLI_CHANNEL"
    ENV_CACHE_DIR = "HEROUI_CLI_CACHE_DIR"
    ENV_REGISTRY = "HEROUI_CLI_REGISTRY"
