"""Error taxonomy for the data stream output.

ConfigError      - bad configuration, raised before any cluster call.
BootstrapError   - provisioning of policy/template/stream failed.
ClusterError     - a classified failure coming back from the cluster client.
"""
from typing import Iterable, Optional


class ConfigError(ValueError):
    """Invalid or missing configuration. Always fatal at startup."""

    def __init__(self, message: str, candidate: Optional[str] = None):
        super().__init__(message)
        self.candidate = candidate


class MissingParameter(ConfigError):
    def __init__(self, parameter: str):
        super().__init__(f"'{parameter}' parameter is required")
        self.parameter = parameter


class InvalidType(ConfigError):
    def __init__(self, candidate, parameter: str = "data_stream_name"):
        super().__init__(f"'{parameter}' must be a string: <{candidate!r}>", candidate)


class InvalidCase(ConfigError):
    def __init__(self, candidate: str, parameter: str = "data_stream_name"):
        super().__init__(f"'{parameter}' must be lowercase only: <{candidate}>", candidate)


class InvalidCharacters(ConfigError):
    def __init__(self, candidate: str, forbidden: Iterable[str], parameter: str = "data_stream_name"):
        self.forbidden = tuple(forbidden)
        label = ",".join(self.forbidden)
        super().__init__(
            f"'{parameter}' must not contain invalid characters {label}: <{candidate}>", candidate
        )


class InvalidStart(ConfigError):
    def __init__(self, candidate: str, forbidden_start: Iterable[str], parameter: str = "data_stream_name"):
        self.forbidden_start = tuple(forbidden_start)
        label = ",".join(self.forbidden_start)
        super().__init__(f"'{parameter}' must not start with {label}: <{candidate}>", candidate)


class ReservedName(ConfigError):
    def __init__(self, candidate: str, parameter: str = "data_stream_name"):
        super().__init__(f"'{parameter}' must not be . or ..: <{candidate}>", candidate)


class TooLong(ConfigError):
    def __init__(self, candidate: str, limit: int = 255, parameter: str = "data_stream_name"):
        super().__init__(
            f"'{parameter}' must not be longer than {limit} bytes: <{candidate}>", candidate
        )
        self.limit = limit


class ClusterError(Exception):
    """A cluster call failed. ``status`` is the HTTP status when one was received."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ClusterNotFound(ClusterError):
    pass


class ClusterConflict(ClusterError):
    """The resource already exists."""


class ClusterRequestError(ClusterError):
    pass


class BulkWriteError(ClusterError):
    pass


class BootstrapError(RuntimeError):
    def __init__(self, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.name = name


class UnsupportedCluster(BootstrapError):
    def __init__(self, detected: int, minimum: int):
        super().__init__(
            f"Elasticsearch {minimum} or later is needed for data streams, cluster reports major version {detected}"
        )
        self.detected = detected
        self.minimum = minimum


class CheckFailed(BootstrapError):
    pass


class CreateFailed(BootstrapError):
    pass
