"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    LOCK_INCONSISTENCY = 4


class RepositoryKinds(Enum):
    """Kinds of repositories contributing packages to a resolution pool.

    Args:
        Enum (string): Repository kind as used in pool descriptions.
    """

    ROOT = "root"
    PLATFORM = "platform"
    PACKAGE = "package"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    ENV_LOCK_FILE = "COMPOSER_UPSTREAM_LOCK_FILE"
    ENV_ALLOW_HTTP = "COMPOSER_UPSTREAM_LOCK_ALLOW_HTTP"
    ENV_LOG_LEVEL = "UPSTREAM_LOCK_LOG_LEVEL"
    CONFIG_SECTION = "upstream_lock"

    # Platform and runtime markers that are never real installable packages.
    INFRASTRUCTURE_PACKAGES = frozenset({
        "php",
        "hhvm",
        "composer-plugin-api",
        "composer-runtime-api",
    })
    INFRASTRUCTURE_PREFIXES = ("ext-", "lib-")

    ANY_CONSTRAINT = "*"
    LOCK_PACKAGE_SECTIONS = ("packages", "packages-dev")

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for the lock file download
