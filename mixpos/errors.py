"""Exception hierarchy for mixpos."""

from __future__ import annotations


class MixposError(Exception):
    """Base class for application errors."""


class PersistenceError(MixposError):
    """A backend write or read could not be completed."""


class LocalStoreError(PersistenceError):
    """The local SQLite cache rejected an operation."""


class RemoteSyncError(PersistenceError):
    """The remote document store rejected a mirrored write."""


class OrderStateError(MixposError):
    """A mutation would break an order or table invariant."""


class InvalidTransitionError(OrderStateError):
    pass


class OrderConflictError(OrderStateError):
    pass


class UnknownOrderError(OrderStateError):
    pass


class UnknownTableError(OrderStateError):
    pass


class EmptyOrderError(OrderStateError):
    pass


class ProductUnavailableError(MixposError):
    """Products priced at zero cannot be ordered."""
