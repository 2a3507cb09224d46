import os
import sys
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from models import db
from models.product import Product
from app.version import API_PREFIX


@pytest.fixture(scope='session')
def app_instance():
    os.environ.setdefault('APP_ENV', 'testing')
    os.environ.setdefault('DATABASE_URL', 'sqlite:///:memory:')
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
    import extensions
    extensions.limiter.reset()
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    return app.test_client()


def login(client, user_id=None):
    """Mint a token through the test-only stub; returns (user_id, headers)."""
    payload = {"user_id": user_id} if user_id else {}
    resp = client.post(f"{API_PREFIX}/test_support/__auth/login_stub", json=payload)
    data = resp.get_json()["data"]
    return data["user_id"], {"Authorization": f"Bearer {data['access']}"}


def make_product(name="Neck Pillow", price="100.00", stock=10, category="Comfort"):
    product = Product(name=name, price=Decimal(price), stock=stock, category=category)
    db.session.add(product)
    db.session.commit()
    return product.id
