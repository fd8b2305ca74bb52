"""Tests for JSON/XML customer representations."""
import json
import xml.etree.ElementTree as ET

import pytest

from app.crm.modules.customers.errors import InvalidRepresentation, UnsupportedMediaType
from app.crm.modules.customers.models import Address, Customer
from app.crm.modules.customers.serializers import (
    JSON,
    XML,
    customer_from_dict,
    customer_to_dict,
    parse,
    render,
)


def _customer() -> Customer:
    return Customer(
        id=1,
        firstname="Alice",
        lastname="Smith",
        address=Address(id=2, street="Main St", city="Springfield"),
    )


def test_customer_to_dict_includes_ids_and_address():
    d = customer_to_dict(_customer())
    assert d["id"] == 1
    assert d["firstname"] == "Alice"
    assert d["email"] is None
    assert d["address"]["id"] == 2
    assert d["address"]["city"] == "Springfield"


def test_render_json_list():
    out = json.loads(render([_customer(), Customer(id=5, firstname="Bob")], JSON))
    assert [c["id"] for c in out] == [1, 5]
    assert out[1]["address"] is None


def test_render_xml_single():
    root = ET.fromstring(render(_customer(), XML))
    assert root.tag == "customer"
    assert root.get("id") == "1"
    assert root.findtext("firstname") == "Alice"
    assert root.find("email") is None
    assert root.find("address").get("id") == "2"
    assert root.findtext("address/city") == "Springfield"


def test_render_xml_list():
    root = ET.fromstring(render([_customer()], XML))
    assert root.tag == "customers"
    assert len(root.findall("customer")) == 1


def test_from_dict_ignores_id_and_unknown_keys():
    c = customer_from_dict({"id": 9, "firstname": "Alice", "nickname": "Al", "address": {"id": 4, "city": "X"}})
    assert c.id is None
    assert c.firstname == "Alice"
    assert c.address.id is None
    assert c.address.city == "X"


def test_from_dict_without_address():
    c = customer_from_dict({"lastname": "Smith"})
    assert c.address is None
    assert c.firstname is None


@pytest.mark.parametrize(
    "payload",
    [
        [],
        "Alice",
        {"firstname": {"first": "Alice"}},
        {"address": "Main St"},
        {"address": {"city": ["a", "b"]}},
    ],
)
def test_from_dict_rejects_bad_shapes(payload):
    with pytest.raises(InvalidRepresentation):
        customer_from_dict(payload)


def test_parse_json_with_charset():
    c = parse(b'{"firstname": "Alice"}', "application/json; charset=utf-8")
    assert c.firstname == "Alice"


def test_parse_xml():
    body = b"<customer id='3'><firstname>Bob</firstname><address><city>Paris</city><zip/></address></customer>"
    c = parse(body, "text/xml")
    assert c.id is None
    assert c.firstname == "Bob"
    assert c.lastname is None
    assert c.address.city == "Paris"
    assert c.address.zip == ""


def test_parse_malformed_json():
    with pytest.raises(InvalidRepresentation):
        parse(b"{not json", JSON)


def test_parse_malformed_xml():
    with pytest.raises(InvalidRepresentation):
        parse(b"<customer>", XML)


def test_parse_wrong_xml_root():
    with pytest.raises(InvalidRepresentation):
        parse(b"<address><city>Paris</city></address>", XML)


def test_parse_unsupported_media_type():
    with pytest.raises(UnsupportedMediaType):
        parse(b"firstname=Alice", "application/x-www-form-urlencoded")


@pytest.mark.parametrize("value", ["a\u0001b", "tab\x0bbed", "\ud800"])
def test_from_dict_rejects_xml_illegal_characters(value):
    with pytest.raises(InvalidRepresentation):
        customer_from_dict({"firstname": value})
    with pytest.raises(InvalidRepresentation):
        customer_from_dict({"address": {"city": value}})


def test_from_dict_keeps_tabs_and_newlines():
    c = customer_from_dict({"firstname": "Ann\tMarie\n"})
    assert c.firstname == "Ann\tMarie\n"


@pytest.mark.parametrize(
    "body",
    [
        b"<customer><firstname>Bob<b/>x</firstname></customer>",
        b"<customer><firstname><b>x</b></firstname></customer>",
        b"<customer><address><city><town>Paris</town></city></address></customer>",
    ],
)
def test_parse_xml_rejects_nested_field_elements(body):
    with pytest.raises(InvalidRepresentation):
        parse(body, XML)
