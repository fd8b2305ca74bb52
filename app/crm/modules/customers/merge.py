"""
Partial-update (patch) merge for Customer and Address.

Every field that is present (not None) on the incoming object overwrites the stored
value; absent fields keep what is stored. `id` and the `address` reference are not in
any field table, the address goes through its own explicit pass in merge_customer().
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.crm.modules.customers.models import Address, Customer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldCopy:
    name: str
    type: type = str


CUSTOMER_FIELDS: tuple[FieldCopy, ...] = (
    FieldCopy("firstname"),
    FieldCopy("lastname"),
    FieldCopy("email"),
    FieldCopy("phone"),
)

ADDRESS_FIELDS: tuple[FieldCopy, ...] = (
    FieldCopy("number"),
    FieldCopy("street"),
    FieldCopy("city"),
    FieldCopy("province"),
    FieldCopy("zip"),
    FieldCopy("country"),
)


def merge(target: Any, source: Any, fields: tuple[FieldCopy, ...]) -> list[str]:
    """
    Copy present values from `source` onto `target`, field by field.

    Best effort: a field that cannot be copied is logged and skipped, the rest still apply.
    Returns the names of the fields whose value changed.
    """
    if source is None:
        return []
    if not isinstance(source, type(target)):
        logger.warning(
            "Merge skipped: %s cannot be merged into %s",
            type(source).__name__,
            type(target).__name__,
        )
        return []

    changed: list[str] = []
    for f in fields:
        value = getattr(source, f.name, None)
        if value is None:
            continue
        if not isinstance(value, f.type):
            logger.warning(
                "Unable to merge %s.%s: expected %s, got %s",
                type(target).__name__,
                f.name,
                f.type.__name__,
                type(value).__name__,
            )
            continue
        if getattr(target, f.name) == value:
            continue
        try:
            setattr(target, f.name, value)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("Unable to merge %s.%s: %s", type(target).__name__, f.name, e)
            continue
        changed.append(f.name)
    return changed


def merge_address(target: Address, source: Address | None) -> list[str]:
    return merge(target, source, ADDRESS_FIELDS)


def merge_customer(target: Customer, source: Customer) -> list[str]:
    """Merge the address first, then the customer's own fields."""
    changed: list[str] = []
    if source.address is not None:
        if target.address is None:
            target.address = Address()
        changed.extend(f"address.{name}" for name in merge_address(target.address, source.address))
    changed.extend(merge(target, source, CUSTOMER_FIELDS))
    return changed
