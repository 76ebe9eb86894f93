"""Error kinds raised (or warned) by the core-group analysis."""

from typing import Any, Optional


class CoreSNAError(Exception):
    """Base class for every error raised by coresna."""


class MalformedInputError(CoreSNAError, ValueError):
    """A raw edge record could not be read as two node identifiers."""

    def __init__(self, message: str, record: Any = None, position: Optional[int] = None):
        self.record = record
        self.position = position
        where = f" at record {position}" if position is not None else ""
        super().__init__(f"{message}{where}: {record!r}")


class InsufficientNodesError(CoreSNAError, ValueError):
    """More nodes were requested than the graph holds."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"requested top {requested} nodes but the graph only has {available}"
        )


class NonConvergentMetricWarning(UserWarning):
    """Power iteration hit its cap; the returned values are a best estimate."""
