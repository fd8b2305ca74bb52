from __future__ import annotations


class CustomerError(Exception):
    """Base class for customer resource errors."""


class CustomerNotFound(CustomerError):
    def __init__(self, customer_id: object) -> None:
        super().__init__(f"Customer {customer_id!r} not found.")
        self.customer_id = customer_id


class CustomerStorageError(CustomerError):
    """The storage engine failed while reading or writing customers."""


class InvalidRepresentation(CustomerError):
    """Request body could not be turned into a Customer."""


class UnsupportedMediaType(InvalidRepresentation):
    pass
