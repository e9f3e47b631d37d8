import os
import sys
import importlib
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from models import db, Brand, Location, Category, Product, Combo


def load_app(monkeypatch, env=None, config_overrides=None):
    """Build a fresh app after applying ``env``; config classes are re-read."""
    monkeypatch.setenv('APP_ENV', 'testing')
    for key, value in (env or {}).items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)
    import app.config as config
    importlib.reload(config)
    from app import create_app
    config_class = config.get_config_class()
    if config_overrides:
        config_class = type("OverriddenConfig", (config_class,), dict(config_overrides))
    return create_app(config_class)


@pytest.fixture(scope='session')
def app_instance():
    os.environ.setdefault('APP_ENV', 'testing')
    from app import create_app
    app = create_app()
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI='sqlite:///:memory:',
        SQLALCHEMY_TRACK_MODIFICATIONS=False
    )
    return app


@pytest.fixture(scope='function')
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def _reset_shared_state():
    """Apps built with other configs flip the shared limiter and Celery mode."""
    import extensions
    from celery_app import celery_app
    yield
    extensions.limiter.enabled = False
    celery_app.conf.task_always_eager = True


@pytest.fixture
def storefront(app):
    """A brand with one location, three categories, four products and a combo."""
    brand = Brand(
        id="brand-1", name="Pizza Place", currency="dkk",
        bag_fee=Decimal("4"), admin_fee=Decimal("5"), admin_fee_type="fixed",
        vat_percentage=Decimal("25"),
    )
    location = Location(id="loc-1", brand_id="brand-1", name="Centrum", delivery_fee=Decimal("39"))
    closed = Location(id="loc-closed", brand_id="brand-1", name="Closed", is_active=False)
    pizzas = Category(id="cat-pizza", brand_id="brand-1", name="Pizza")
    pastas = Category(id="cat-pasta", brand_id="brand-1", name="Pasta")
    drinks = Category(id="cat-drinks", brand_id="brand-1", name="Drinks")
    db.session.add_all([brand, location, closed, pizzas, pastas, drinks])
    db.session.flush()
    db.session.add_all([
        Product(id="pizza-1", brand_id="brand-1", category_id="cat-pizza", name="Margherita",
                price=Decimal("100"), price_delivery=Decimal("110")),
        Product(id="pasta-1", brand_id="brand-1", category_id="cat-pasta", name="Carbonara",
                price=Decimal("120")),
        Product(id="cola-1", brand_id="brand-1", category_id="cat-drinks", name="Cola",
                price=Decimal("25")),
        Product(id="fanta-1", brand_id="brand-1", category_id="cat-drinks", name="Fanta",
                price=Decimal("25")),
        Combo(id="combo-1", brand_id="brand-1", name="Lunch Combo",
              price_pickup=Decimal("150"), price_delivery=Decimal("165")),
    ])
    db.session.commit()
    return {"brand_id": "brand-1", "location_id": "loc-1"}


@pytest.fixture
def admin_headers(client):
    r = client.post("/__auth/login_stub", json={"email": "admin@example.com", "role": "superadmin"})
    return {"Authorization": f"Bearer {r.get_json()['data']['access']}"}


@pytest.fixture
def qa_headers(client):
    r = client.post("/__auth/login_stub", json={"email": "qa@example.com", "role": "qa"})
    return {"Authorization": f"Bearer {r.get_json()['data']['access']}"}
