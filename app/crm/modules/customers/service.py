from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.crm.modules.customers.errors import CustomerNotFound, CustomerStorageError, InvalidRepresentation
from app.crm.modules.customers.merge import ADDRESS_FIELDS, CUSTOMER_FIELDS, merge_customer
from app.crm.modules.customers.models import Address, Customer, find_all_customers

logger = logging.getLogger(__name__)

# Keys beyond this overflow the database drivers before a lookup can miss.
_MAX_KEY = 2**63 - 1


def parse_customer_id(customer_id: str | int) -> int | None:
    """Integer key for `customer_id`, or None when it is not a usable integer."""
    if isinstance(customer_id, int):
        key = customer_id
    else:
        try:
            key = int(str(customer_id).strip())
        except ValueError:
            return None
    if abs(key) > _MAX_KEY:
        return None
    return key


def find_by_id(s: Session, customer_id: str | int) -> Customer | None:
    key = parse_customer_id(customer_id)
    if key is None:
        logger.warning("Couldn't find customer with ID of %s (not an integer)", customer_id)
        return None
    try:
        customer = s.get(Customer, key)
    except SQLAlchemyError as e:
        logger.exception("Error calling find_by_id() for customerId %s", customer_id)
        raise CustomerStorageError(str(e)) from e
    if customer is None:
        logger.warning("Couldn't find customer with ID of %s", customer_id)
    return customer


def list_customers(s: Session) -> list[Customer]:
    try:
        return find_all_customers(s)
    except SQLAlchemyError as e:
        logger.exception("Error calling find_all_customers()")
        raise CustomerStorageError(str(e)) from e


def get_customer(s: Session, customer_id: str | int) -> Customer:
    customer = find_by_id(s, customer_id)
    if customer is None:
        raise CustomerNotFound(customer_id)
    return customer


def validate_customer(customer: Customer) -> list[str]:
    """Validate a new customer representation. Returns list of errors."""
    errors = []
    for f in CUSTOMER_FIELDS:
        value = getattr(customer, f.name)
        if value is not None and not isinstance(value, f.type):
            errors.append(f"Field '{f.name}' must be a string.")
    if customer.address is not None:
        for f in ADDRESS_FIELDS:
            value = getattr(customer.address, f.name)
            if value is not None and not isinstance(value, f.type):
                errors.append(f"Field 'address.{f.name}' must be a string.")
    return errors


def _persist(s: Session, customer: Customer) -> int:
    if customer.address is None:
        customer.address = Address()
    s.add(customer.address)
    s.add(customer)
    s.flush()
    return customer.id


def create_customer(s: Session, customer: Customer) -> Customer:
    """Persist a new customer together with its address; the id comes from storage."""
    errors = validate_customer(customer)
    if errors:
        raise InvalidRepresentation(" ".join(errors))
    # Client-supplied identifiers are never honoured.
    customer.id = None  # type: ignore[assignment]
    if customer.address is not None:
        customer.address.id = None  # type: ignore[assignment]
    try:
        customer_id = _persist(s, customer)
    except SQLAlchemyError as e:
        logger.exception("Error creating customer")
        raise CustomerStorageError(str(e)) from e
    logger.info("Created customer with ID %s", customer_id)
    return customer


def update_customer(s: Session, customer_id: str | int, patch: Customer) -> Customer:
    """
    Apply a partial update: fields present on `patch` overwrite the stored ones,
    absent fields keep their stored value.
    """
    existing = find_by_id(s, customer_id)
    if existing is None:
        raise CustomerNotFound(customer_id)
    changed = merge_customer(existing, patch)
    try:
        _persist(s, existing)
    except SQLAlchemyError as e:
        logger.exception("Error updating customer with ID %s", customer_id)
        raise CustomerStorageError(str(e)) from e
    logger.info("Updated customer with ID %s (changed: %s)", existing.id, ", ".join(changed) or "nothing")
    return existing


def delete_customer(s: Session, customer_id: str | int) -> bool:
    """
    Remove a customer and its address. Returns False when there is no such customer.
    """
    customer = find_by_id(s, customer_id)
    if customer is None:
        return False
    try:
        if customer.address is not None:
            s.delete(customer.address)
        s.delete(customer)
        s.flush()
    except SQLAlchemyError as e:
        logger.exception("Couldn't remove customer with ID %s", customer_id)
        raise CustomerStorageError(str(e)) from e
    logger.info("Removed customer with ID %s", customer_id)
    return True
