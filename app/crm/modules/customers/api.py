from __future__ import annotations

from flask import Blueprint, Response, abort, current_app, request, url_for

from app.crm.db import db_session, transaction
from app.crm.modules.customers.errors import (
    CustomerNotFound,
    CustomerStorageError,
    InvalidRepresentation,
    UnsupportedMediaType,
)
from app.crm.modules.customers.models import Customer
from app.crm.modules.customers.serializers import MEDIA_TYPES, parse, render
from app.crm.modules.customers.service import (
    create_customer,
    delete_customer,
    get_customer,
    list_customers,
    update_customer,
)

bp = Blueprint("customers", __name__)


def _response_media_type() -> str:
    default = current_app.config.get("DEFAULT_MEDIA_TYPE") or MEDIA_TYPES[0]
    if default not in MEDIA_TYPES:
        default = MEDIA_TYPES[0]
    # Listed default first so that */* resolves to it.
    offered = [default] + [m for m in MEDIA_TYPES if m != default]
    return request.accept_mimetypes.best_match(offered, default=default) or default


def _represent(data: Customer | list[Customer]) -> Response:
    media_type = _response_media_type()
    return Response(render(data, media_type), status=200, mimetype=media_type)


def _request_customer() -> Customer:
    try:
        return parse(request.get_data(), request.content_type)
    except UnsupportedMediaType as e:
        abort(415, description=str(e))
    except InvalidRepresentation as e:
        abort(400, description=str(e))


# ---------- List ----------
@bp.get("/all")
def customers_all():
    s = db_session()
    try:
        customers = list_customers(s)
    except CustomerStorageError:
        abort(500, description="Error finding all customers.")
    return _represent(customers)


# ---------- Get ----------
@bp.get("/<customer_id>")
def customer_get(customer_id: str):
    s = db_session()
    try:
        customer = get_customer(s, customer_id)
    except CustomerNotFound as e:
        abort(404, description=str(e))
    except CustomerStorageError:
        abort(500, description=f"Error finding customer {customer_id}.")
    return _represent(customer)


# ---------- Create ----------
@bp.post("")
def customer_create():
    s = db_session()
    incoming = _request_customer()
    try:
        with transaction(s):
            customer = create_customer(s, incoming)
    except InvalidRepresentation as e:
        abort(400, description=str(e))
    except CustomerStorageError:
        abort(500, description="Error creating customer.")
    resp = Response(status=201)
    resp.headers["Location"] = url_for("customers.customer_get", customer_id=customer.id)
    return resp


# ---------- Update ----------
@bp.put("/<customer_id>")
def customer_update(customer_id: str):
    s = db_session()
    patch = _request_customer()
    try:
        with transaction(s):
            customer = update_customer(s, customer_id, patch)
    except CustomerNotFound as e:
        abort(404, description=str(e))
    except CustomerStorageError:
        abort(500, description=f"Error updating customer {customer_id}.")
    resp = Response(status=303)
    resp.headers["Location"] = url_for("customers.customer_get", customer_id=customer.id)
    return resp


# ---------- Delete ----------
@bp.delete("/<customer_id>")
def customer_delete(customer_id: str):
    s = db_session()
    try:
        with transaction(s):
            delete_customer(s, customer_id)
    except CustomerStorageError:
        abort(500, description=f"Error deleting customer {customer_id}.")
    return Response(status=204)
