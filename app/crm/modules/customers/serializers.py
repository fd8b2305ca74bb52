"""
JSON / XML representations of Customer.

Documents look like:

    {"id": 1, "firstname": "Alice", ..., "address": {"id": 1, "city": "Springfield", ...}}

    <customer id="1"><firstname>Alice</firstname>...<address id="1"><city>Springfield</city></address></customer>

`id` is written on output and ignored on input: identifiers are assigned by storage.
"""
from __future__ import annotations

import json
import re
import xml.etree.ElementTree as ET
from typing import Any

from app.crm.modules.customers.errors import InvalidRepresentation, UnsupportedMediaType
from app.crm.modules.customers.merge import ADDRESS_FIELDS, CUSTOMER_FIELDS, FieldCopy
from app.crm.modules.customers.models import Address, Customer

JSON = "application/json"
XML = "application/xml"
MEDIA_TYPES = (JSON, XML)

_XML_ALIASES = frozenset({"application/xml", "text/xml"})
_SCALARS = (str, int, float, bool)
# Characters XML 1.0 cannot carry, even escaped.
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


# ---------- Output ----------
def address_to_dict(address: Address | None) -> dict[str, Any] | None:
    if address is None:
        return None
    out: dict[str, Any] = {"id": address.id}
    for f in ADDRESS_FIELDS:
        out[f.name] = getattr(address, f.name)
    return out


def customer_to_dict(customer: Customer) -> dict[str, Any]:
    out: dict[str, Any] = {"id": customer.id}
    for f in CUSTOMER_FIELDS:
        out[f.name] = getattr(customer, f.name)
    out["address"] = address_to_dict(customer.address)
    return out


def _fields_to_xml(parent: ET.Element, obj: Any, fields: tuple[FieldCopy, ...]) -> None:
    for f in fields:
        value = getattr(obj, f.name)
        if value is None:
            continue
        ET.SubElement(parent, f.name).text = str(value)


def _customer_element(customer: Customer) -> ET.Element:
    el = ET.Element("customer")
    if customer.id is not None:
        el.set("id", str(customer.id))
    _fields_to_xml(el, customer, CUSTOMER_FIELDS)
    if customer.address is not None:
        addr = ET.SubElement(el, "address")
        if customer.address.id is not None:
            addr.set("id", str(customer.address.id))
        _fields_to_xml(addr, customer.address, ADDRESS_FIELDS)
    return el


def render(data: Customer | list[Customer], media_type: str) -> str:
    """Render one customer or a list of customers in the given media type."""
    if media_type == XML:
        if isinstance(data, list):
            root = ET.Element("customers")
            root.extend(_customer_element(c) for c in data)
        else:
            root = _customer_element(data)
        return ET.tostring(root, encoding="unicode")
    if isinstance(data, list):
        return json.dumps([customer_to_dict(c) for c in data])
    return json.dumps(customer_to_dict(data))


# ---------- Input ----------
def _pick_fields(data: dict, fields: tuple[FieldCopy, ...], where: str) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for f in fields:
        value = data.get(f.name)
        if value is not None and not isinstance(value, _SCALARS):
            raise InvalidRepresentation(f"Field '{where}{f.name}' must be a scalar value.")
        if isinstance(value, str) and _XML_ILLEGAL.search(value):
            raise InvalidRepresentation(f"Field '{where}{f.name}' contains control characters.")
        values[f.name] = value
    return values


def customer_from_dict(data: Any) -> Customer:
    """
    Build a transient Customer from a decoded JSON document.
    Scalar values are kept as sent; the merge and create paths decide what to accept.
    """
    if not isinstance(data, dict):
        raise InvalidRepresentation("Customer representation must be an object.")
    customer = Customer(**_pick_fields(data, CUSTOMER_FIELDS, ""))
    raw_address = data.get("address")
    if raw_address is not None:
        if not isinstance(raw_address, dict):
            raise InvalidRepresentation("Field 'address' must be an object.")
        customer.address = Address(**_pick_fields(raw_address, ADDRESS_FIELDS, "address."))
    return customer


def _element_fields(el: ET.Element, fields: tuple[FieldCopy, ...]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for f in fields:
        child = el.find(f.name)
        if child is None:
            values[f.name] = None
            continue
        if len(child):
            raise InvalidRepresentation(f"Element <{f.name}> must contain text only.")
        values[f.name] = child.text or ""
    return values


def customer_from_xml(body: bytes | str) -> Customer:
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise InvalidRepresentation(f"Malformed XML: {e}") from e
    if root.tag != "customer":
        raise InvalidRepresentation(f"Expected <customer> root element, got <{root.tag}>.")
    customer = Customer(**_element_fields(root, CUSTOMER_FIELDS))
    addr = root.find("address")
    if addr is not None:
        customer.address = Address(**_element_fields(addr, ADDRESS_FIELDS))
    return customer


def parse(body: bytes, content_type: str | None) -> Customer:
    """Decode a request body according to its Content-Type."""
    mimetype = (content_type or "").split(";", 1)[0].strip().lower()
    if mimetype == JSON:
        try:
            data = json.loads(body or b"null")
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidRepresentation(f"Malformed JSON: {e}") from e
        return customer_from_dict(data)
    if mimetype in _XML_ALIASES:
        return customer_from_xml(body)
    raise UnsupportedMediaType(f"Unsupported media type {mimetype or '(none)'!r}; use {JSON} or {XML}.")
