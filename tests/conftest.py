import pytest

from medstore.billing import SaleSession
from medstore.data.catalog_repo import CatalogRepository
from medstore.data.ledger_repo import LedgerRepository
from medstore.storage import KeyValueStore


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "localstorage.json"


@pytest.fixture
def store(storage_path):
    return KeyValueStore(storage_path)


@pytest.fixture
def catalog(store):
    return CatalogRepository(store)


@pytest.fixture
def ledger(store):
    return LedgerRepository(store)


@pytest.fixture
def session(catalog, ledger):
    return SaleSession(catalog, ledger)


@pytest.fixture
def med_a(catalog):
    return catalog.create(name="Amoxicillin 250mg", price=10.0, stock=5, category="Capsule")


@pytest.fixture
def med_b(catalog):
    return catalog.create(name="Bandage Roll", price=5.0, stock=3, category="Dressing")
