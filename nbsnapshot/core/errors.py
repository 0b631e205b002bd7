class SnapshotDownloadError(RuntimeError):
    """Base class for failures raised by nbsnapshot itself."""


class ConfigurationError(SnapshotDownloadError):
    """Raised before the browser starts when the invocation cannot run."""


class LoginFailedError(SnapshotDownloadError):
    pass


class SnapshotTimeoutError(SnapshotDownloadError):
    pass
