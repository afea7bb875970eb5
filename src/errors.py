"""Errors raised while building or applying an upstream lock overlay."""


class UpstreamLockError(Exception):
    """Base class for failures that abort the overlay."""


class LockSourceError(UpstreamLockError):
    """Raised when the upstream lock file cannot be read or retrieved."""


class LockInconsistencyError(UpstreamLockError):
    """Raised when a locked package requires something the lock cannot satisfy."""

    def __init__(self, package: str, target: str):
        self.package = package
        self.target = target
        super().__init__(
            f"Package {package} which was present in the upstream lock file requires "
            f"{target} but it was not found in the upstream lock file. "
            "This indicates the upstream lock file is corrupt."
        )


class InternalConsistencyError(UpstreamLockError):
    """Raised when the provider index names a package the lock does not contain."""

    def __init__(self, provider: str, target: str):
        self.provider = provider
        self.target = target
        super().__init__(
            f"Repository for upstream lock file said {provider} provided {target} "
            "but the repository didn't contain the actual package."
        )
