"""Classification of platform and runtime marker package names."""

from constants import Constants


def is_infrastructure_package(name: str) -> bool:
    """Return True for names that are satisfied by the local platform.

    These are virtual packages used for platform requirements (the language
    runtime, its alternative implementations, the plugin and runtime APIs,
    extensions and system libraries). They are never pinned or overlaid.
    """
    return (
        name in Constants.INFRASTRUCTURE_PACKAGES
        or name.startswith(Constants.INFRASTRUCTURE_PREFIXES)
    )
