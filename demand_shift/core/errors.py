"""Errors raised by the demand shift engine.

A duplicate insert lost to a concurrent generation run is deliberately not
represented here: the persister reports it as zero new recommendations.
"""


class DemandShiftError(Exception):
    pass


class NoPriceDataError(DemandShiftError):
    """The price table is empty, so no slot can be priced."""


class StorageError(DemandShiftError):
    """A read or write against the recommendation store failed."""


class NotFoundError(DemandShiftError):
    pass


class InvalidTransitionError(DemandShiftError):
    """The recommendation's current status does not allow the requested transition."""


class InvalidHourSlotError(DemandShiftError, ValueError):
    pass
