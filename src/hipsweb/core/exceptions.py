"""
Exception hierarchy for hipsweb.

Expected data irregularities (dangling references, empty groups, lookup
misses) are never raised; these types cover malformed inputs only.
"""


class HipswebError(Exception):
    """Base class for all hipsweb errors."""


class SnapshotError(HipswebError):
    """The snapshot file is missing, unreadable or has the wrong shape."""

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ConfigError(HipswebError):
    """The settings file could not be parsed or failed validation."""


class NodeNotFoundError(HipswebError):
    """A requested hazard id does not resolve against the loaded snapshot."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Hazard not found: {node_id}")
