"""
Error types raised by the probe.

Every failure the probe knows how to report is a ``ProbeError``; the entry
point turns it into a one-line notice and a non-zero exit code.
"""


class ProbeError(Exception):
    """Base class for all expected probe failures."""


class ConfigError(ProbeError):
    """Configuration file or override values are invalid."""


class TypeDefinitionsError(ProbeError):
    """The type-definitions document could not be read or parsed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to load type definitions from {path!r}: {reason}")


class ConnectionFailed(ProbeError):
    """The node could not be reached or the client could not be built."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Unable to connect to {url}: {reason}")


class QueryFailed(ProbeError):
    """A storage query failed or returned something undecodable."""

    def __init__(self, item: str, reason: str):
        self.item = item
        self.reason = reason
        super().__init__(f"Storage query {item} failed: {reason}")


class RpcCallFailed(ProbeError):
    """A custom RPC call failed or the node answered with an error."""

    def __init__(self, method: str, reason: str):
        self.method = method
        self.reason = reason
        super().__init__(f"RPC call {method} failed: {reason}")
