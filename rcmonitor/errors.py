"""
Exception types raised by rcmonitor.

TransportError and MalformedRecordError are raised per batch or per edit;
PersistenceWarning is non-fatal and only means the next run may repeat
this run's findings.
"""


class RcMonitorError(Exception):
    """Base class for all rcmonitor errors."""


class TransportError(RcMonitorError):
    """Fetching the change feed or a revision pair failed (network or parse)."""


class MalformedRecordError(RcMonitorError):
    """A record or revision response violates an invariant the core relies on."""


class PersistenceWarning(RcMonitorError, UserWarning):
    """The watermark could not be stored; the next run may report duplicates."""


__all__ = [
    'RcMonitorError',
    'TransportError',
    'MalformedRecordError',
    'PersistenceWarning',
]
