import pytest
import sqlalchemy as sa  # type: ignore
from sqlalchemy import orm  # type: ignore

from ....base import Resource

SITE = "http://api.example.com"


class Customer(Resource):
    class Meta:
        site = SITE


@pytest.fixture
def http():
    from ....http_mock import HttpMock

    with HttpMock() as mock:
        yield mock


@pytest.fixture
def Base():
    return orm.declarative_base()


def test_it(http, Base):
    from ..declarative import ResourceReference, belongs_to_resource

    class Invoice(Base):
        __tablename__ = "invoices"

        id = sa.Column(sa.Integer(), primary_key=True)
        customer_id = sa.Column(sa.Integer())

        customer = belongs_to_resource()

    assert isinstance(Invoice.customer, ResourceReference)

    http.get("/customers/3.json", body='{"customer": {"id": 3, "name": "ACME"}}')
    http.get("/customers/5.json", body='{"customer": {"id": 5, "name": "Initech"}}')

    invoice = Invoice(id=1, customer_id=3)
    assert invoice.customer.name == "ACME"
    assert invoice.customer is invoice.customer
    assert len(http.requests) == 1

    invoice.customer_id = 5
    assert invoice.customer.name == "Initech"
    assert len(http.requests) == 2

    invoice.customer_id = None
    assert invoice.customer is None
    assert len(http.requests) == 2


def test_assignment(http, Base):
    from ..declarative import belongs_to_resource

    class Order(Base):
        __tablename__ = "orders"

        id = sa.Column(sa.Integer(), primary_key=True)
        customer_id = sa.Column(sa.Integer())

        customer = belongs_to_resource()

    customer = Customer({"id": 4})
    order = Order(id=1)
    order.customer = customer
    assert order.customer_id == 4
    assert order.customer is customer

    order.customer = None
    assert order.customer_id is None
    assert order.customer is None
    assert http.requests == []


def test_options(http, Base):
    from ..declarative import belongs_to_resource

    class Shipment(Base):
        __tablename__ = "shipments"

        id = sa.Column(sa.Integer(), primary_key=True)
        buyer_ref = sa.Column(sa.Integer())

        buyer = belongs_to_resource(class_name="Customer", foreign_key="buyer_ref")

    http.get("/customers/9.json", body='{"id": 9}')
    assert isinstance(Shipment(id=1, buyer_ref=9).buyer, Customer)


def test_missing_column(Base):
    from ....exceptions import InvalidDeclarationError
    from ..declarative import belongs_to_resource

    class Refund(Base):
        __tablename__ = "refunds"

        id = sa.Column(sa.Integer(), primary_key=True)

        customer = belongs_to_resource()

    with pytest.raises(InvalidDeclarationError):
        Refund(id=1).customer


def test_unresolvable_target(Base):
    from ....exceptions import AssociationTargetNotFoundError
    from ..declarative import belongs_to_resource

    class Receipt(Base):
        __tablename__ = "receipts"

        id = sa.Column(sa.Integer(), primary_key=True)
        issuer_id = sa.Column(sa.Integer())

        issuer = belongs_to_resource()

    with pytest.raises(AssociationTargetNotFoundError) as e:
        Receipt(id=1, issuer_id=2).issuer
    assert e.value.class_name == "Issuer"
