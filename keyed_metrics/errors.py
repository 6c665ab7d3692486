"""Exception types raised by keyed counters and their JSON codec."""

from __future__ import annotations


class MetricsError(Exception):
    """Base class for all keyed-metrics failures."""


class InvalidArgument(MetricsError, ValueError):
    """A required argument was None or otherwise unusable."""


class UnsupportedOperation(MetricsError, RuntimeError):
    """The operation is deliberately not offered by this counter variant."""


class MalformedData(MetricsError, ValueError):
    """Serialized counter data is missing fields or holds unknown values."""
