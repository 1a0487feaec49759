"""Shared fixtures.

Data fixtures create rows inside a short-lived app context and hand back
ids, so request tests never share a context (and Flask-Login's cached
user) with the test body.
"""

from decimal import Decimal

import pytest

from greenshop import create_app
from greenshop.extensions import db
from greenshop.models import User, Product, CartItem
from greenshop.services.stores import ImpactStore

PASSWORD = 'secret123'


def make_user(email='shopper@greenshop.io', full_name='Test Shopper',
              provision=True, bonus=0):
    user = User(email=email, full_name=full_name)
    user.set_password(PASSWORD)
    db.session.add(user)
    if provision:
        ImpactStore().provision(user, bonus_points=bonus)
    db.session.commit()
    return user.id


def make_product(title, price, points=0, co2='0', plastic='0', water='0',
                 category='Kitchen', tags=None, featured=False, available=True):
    product = Product(
        title=title,
        description=f'{title} description',
        price=Decimal(price),
        category=category,
        eco_tags=tags or [],
        green_points=points,
        co2_saved=Decimal(co2),
        plastic_saved=Decimal(plastic),
        water_saved=Decimal(water),
        is_featured=featured,
        is_available=available,
    )
    product.generate_slug()
    db.session.add(product)
    db.session.commit()
    return product.id


def add_to_cart(user_id, product_id, quantity):
    db.session.add(CartItem(user_id=user_id, product_id=product_id, quantity=quantity))
    db.session.commit()


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Push an app context for tests that call services directly."""
    with app.app_context():
        yield app
        db.session.rollback()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user_id(app):
    with app.app_context():
        return make_user()


@pytest.fixture
def product_ids(app):
    """Two products matching the reference checkout: A 500/10pt/1.2kg, B 300/5pt/0.5kg."""
    with app.app_context():
        a = make_product('Bamboo Toothbrush Set', '500', points=10, co2='1.2',
                         plastic='0.08', category='Personal Care',
                         tags=['Plastic-Free', 'Vegan'], featured=True)
        b = make_product('Steel Water Bottle', '300', points=5, co2='0.5',
                         plastic='1.2', water='3', category='Accessories',
                         tags=['Reusable'])
        return a, b


@pytest.fixture
def filled_cart(app, user_id, product_ids):
    a, b = product_ids
    with app.app_context():
        add_to_cart(user_id, a, 2)
        add_to_cart(user_id, b, 1)
    return user_id


@pytest.fixture
def auth_client(client, user_id):
    resp = client.post('/auth/login', json={'email': 'shopper@greenshop.io', 'password': PASSWORD})
    assert resp.status_code == 200
    return client
