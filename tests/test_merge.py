"""
Unit tests for the partial-update merge of Customer and Address.

Tests cover:
- Present fields overwrite, absent (None) fields keep the stored value
- id and the address reference are never copied by the field pass
- Wrong value types are skipped field by field
- Mismatched entity types are a no-op
"""

from app.crm.modules.customers.merge import (
    ADDRESS_FIELDS,
    CUSTOMER_FIELDS,
    FieldCopy,
    merge,
    merge_address,
    merge_customer,
)
from app.crm.modules.customers.models import Address, Customer


def _stored() -> Customer:
    return Customer(
        id=7,
        firstname="Alice",
        lastname="Smith",
        email="alice@example.com",
        phone="555-0100",
        address=Address(id=3, number="12", street="Main St", city="Springfield", zip="12345", country="US"),
    )


class TestMerge:
    """Tests for merge()"""

    def test_present_fields_overwrite(self):
        target = _stored()
        changed = merge(target, Customer(firstname="Alicia", phone="555-0199"), CUSTOMER_FIELDS)
        assert target.firstname == "Alicia"
        assert target.phone == "555-0199"
        assert sorted(changed) == ["firstname", "phone"]

    def test_absent_fields_keep_value(self):
        target = _stored()
        merge(target, Customer(email="new@example.com"), CUSTOMER_FIELDS)
        assert target.firstname == "Alice"
        assert target.lastname == "Smith"
        assert target.email == "new@example.com"

    def test_id_never_copied(self):
        target = _stored()
        merge(target, Customer(id=99, firstname="Bob"), CUSTOMER_FIELDS)
        assert target.id == 7
        assert target.firstname == "Bob"

    def test_equal_values_not_reported(self):
        target = _stored()
        assert merge(target, Customer(firstname="Alice"), CUSTOMER_FIELDS) == []

    def test_wrong_type_skipped_others_applied(self):
        target = _stored()
        changed = merge(target, Customer(firstname=42, lastname="Jones"), CUSTOMER_FIELDS)
        assert target.firstname == "Alice"
        assert target.lastname == "Jones"
        assert changed == ["lastname"]

    def test_mismatched_types_noop(self):
        target = _stored()
        assert merge(target, Address(city="Elsewhere"), ADDRESS_FIELDS) == []
        assert target.address.city == "Springfield"

    def test_none_source_noop(self):
        target = _stored()
        assert merge(target, None, CUSTOMER_FIELDS) == []
        assert target.firstname == "Alice"


class TestMergeCustomer:
    """Tests for merge_customer() / merge_address()"""

    def test_address_merged_through_nested_pass(self):
        target = _stored()
        original_address = target.address
        changed = merge_customer(target, Customer(address=Address(id=55, city="Shelbyville")))
        assert target.address is original_address
        assert target.address.id == 3
        assert target.address.city == "Shelbyville"
        assert target.address.street == "Main St"
        assert changed == ["address.city"]

    def test_patch_without_address_keeps_address(self):
        target = _stored()
        merge_customer(target, Customer(firstname="Alicia"))
        assert target.firstname == "Alicia"
        assert target.address.city == "Springfield"

    def test_missing_target_address_is_created(self):
        target = Customer(firstname="Alice")
        merge_customer(target, Customer(address=Address(city="Springfield")))
        assert target.address is not None
        assert target.address.city == "Springfield"

    def test_merge_address_partial(self):
        target = Address(street="Main St", city="Springfield")
        merge_address(target, Address(province="IL"))
        assert (target.street, target.city, target.province) == ("Main St", "Springfield", "IL")


class _Locked:
    """Record whose firstname refuses writes."""

    def __init__(self, firstname=None, lastname=None):
        self._firstname = firstname
        self.lastname = lastname

    @property
    def firstname(self):
        return self._firstname

    @firstname.setter
    def firstname(self, value):
        raise ValueError("firstname is read-only")


def test_failing_write_skipped_others_applied():
    fields = (FieldCopy("firstname"), FieldCopy("lastname"))
    target = _Locked(firstname="Alice", lastname="Smith")
    changed = merge(target, _Locked(firstname="Bob", lastname="Jones"), fields)
    assert target.firstname == "Alice"
    assert target.lastname == "Jones"
    assert changed == ["lastname"]
