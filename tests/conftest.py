import pytest
from sqlalchemy.orm import sessionmaker

from fastfood.core.database import Base, build_engine
from fastfood.domain import Product
from fastfood.integrations.mock import MockCheckoutGateway
from fastfood.services.orders import OrderService
from fastfood.services.payments import PaymentService
from fastfood.stores.memory import (
    InMemoryDatabase,
    InMemoryOrderItemStore,
    InMemoryOrderStore,
    InMemoryPaymentStore,
    InMemoryProductLookup,
)
import fastfood.models  # noqa: F401
from tests.fixtures_data import CATALOG


@pytest.fixture
def memory_db():
    database = InMemoryDatabase()
    for entry in CATALOG:
        database.add_product(
            Product(id=entry["id"], name=entry["name"], price=entry["price"], category=entry["category"])
        )
    return database


@pytest.fixture
def order_service(memory_db):
    return OrderService(
        orders=InMemoryOrderStore(memory_db),
        items=InMemoryOrderItemStore(memory_db),
        products=InMemoryProductLookup(memory_db),
        uow=memory_db,
    )


@pytest.fixture
def checkout_gateway():
    return MockCheckoutGateway()


@pytest.fixture
def payment_service(memory_db, checkout_gateway):
    return PaymentService(
        payments=InMemoryPaymentStore(memory_db),
        orders=InMemoryOrderStore(memory_db),
        uow=memory_db,
        checkout_gateway=checkout_gateway,
    )


@pytest.fixture
def sqlite_engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(sqlite_engine):
    return sessionmaker(bind=sqlite_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
