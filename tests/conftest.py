"""Test configuration and fixtures for shoplist."""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from shoplist.models import Base
from shoplist.services.app_settings import AppSettingsService
from shoplist.services.credentials import Credentials
from shoplist.services.item_store import ShoppingListStore, WishlistStore
from shoplist.services.storage import KeyValueStore


@pytest.fixture
def engine():
    """Create a fresh in-memory database for each test."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session(engine):
    """Create a new database session for a test."""
    session = Session(bind=engine)
    yield session
    session.close()


@pytest.fixture
def storage(session) -> KeyValueStore:
    """Key-value store on the test database."""
    return KeyValueStore(session)


@pytest.fixture
def shopping(storage) -> ShoppingListStore:
    """Empty, loaded shopping list."""
    store = ShoppingListStore(storage)
    store.load()
    return store


@pytest.fixture
def wishlist(storage) -> WishlistStore:
    """Empty, loaded wishlist."""
    store = WishlistStore(storage)
    store.load()
    return store


@pytest.fixture
def credentials(storage) -> Credentials:
    """Credentials with a key configured."""
    creds = Credentials(storage, env_key="")
    creds.set("test-key")
    return creds


@pytest.fixture
def app_settings(storage) -> AppSettingsService:
    """Preferences with defaults loaded."""
    service = AppSettingsService(storage)
    service.load()
    return service
