from decimal import Decimal

from sqlalchemy.exc import OperationalError

from greenshop.extensions import db, mail
from greenshop.models import CartItem, ImpactStats, Notification, Order
from greenshop.services.stores import OrderLedger

from tests.conftest import PASSWORD, make_product, make_user


# Auth

def test_register_provisions_signup_bonus(client, app):
    resp = client.post('/auth/register', json={
        'full_name': 'New Shopper',
        'email': 'New@GreenShop.io',
        'password': 'leafy123',
        'confirm_password': 'leafy123',
    })

    assert resp.status_code == 201
    assert resp.get_json()['user']['email'] == 'new@greenshop.io'
    with app.app_context():
        stats = ImpactStats.query.one()
        assert stats.green_points == app.config['SIGNUP_BONUS_POINTS']
        assert stats.total_orders == 0

    assert client.get('/auth/me').status_code == 200


def test_register_rejects_duplicate_email(client, user_id):
    resp = client.post('/auth/register', json={
        'full_name': 'Copy',
        'email': 'shopper@greenshop.io',
        'password': 'leafy123',
        'confirm_password': 'leafy123',
    })
    assert resp.status_code == 422
    assert 'email' in resp.get_json()['errors']


def test_register_password_mismatch(client):
    resp = client.post('/auth/register', json={
        'full_name': 'Mismatch',
        'email': 'mismatch@greenshop.io',
        'password': 'leafy123',
        'confirm_password': 'leafy124',
    })
    assert resp.status_code == 422


def test_login_bad_password(client, user_id):
    resp = client.post('/auth/login', json={'email': 'shopper@greenshop.io', 'password': 'wrong-one'})
    assert resp.status_code == 401
    assert resp.get_json()['success'] is False


def test_logout(auth_client):
    assert auth_client.post('/auth/logout').status_code == 200
    assert auth_client.get('/auth/me').status_code == 401


def test_csrf_token_endpoint(client):
    assert client.get('/auth/csrf-token').get_json()['csrf_token']


# Catalog

def test_products_filters(client, product_ids):
    body = client.get('/products').get_json()
    assert body['total'] == 2

    body = client.get('/products?category=accessories').get_json()
    assert [p['title'] for p in body['products']] == ['Steel Water Bottle']

    body = client.get('/products?tags=vegan,zero%20waste').get_json()
    assert [p['title'] for p in body['products']] == ['Bamboo Toothbrush Set']

    body = client.get('/products?q=bottle').get_json()
    assert body['total'] == 1

    body = client.get('/products?sort=price_asc').get_json()
    assert [p['price'] for p in body['products']] == ['300.00', '500.00']


def test_products_hide_unavailable(client, app, product_ids):
    with app.app_context():
        make_product('Retired Straws', '99', available=False)
    assert client.get('/products').get_json()['total'] == 2


def test_product_detail_by_id_and_slug(client, product_ids):
    by_id = client.get(f'/products/{product_ids[0]}').get_json()['product']
    by_slug = client.get(f"/products/{by_id['slug']}").get_json()['product']

    assert by_slug['id'] == product_ids[0]
    assert by_slug['plastic_saved'] == '0.080'
    assert client.get('/products/no-such-thing').status_code == 404


def test_index_lists_featured(client, product_ids):
    body = client.get('/').get_json()
    assert [p['id'] for p in body['featured_products']] == [product_ids[0]]
    assert body['community_impact']['orders'] == 0


def test_categories(client):
    body = client.get('/categories').get_json()
    assert 'Kitchen' in body['categories']
    assert 'Plastic-Free' in body['eco_tags']


# Cart

def test_cart_requires_login(client):
    resp = client.get('/cart/')
    assert resp.status_code == 401
    assert resp.get_json()['success'] is False


def test_cart_add_update_remove(auth_client, product_ids):
    a, b = product_ids

    assert auth_client.post('/cart/add', json={'product_id': a, 'quantity': 2}).status_code == 200
    resp = auth_client.post('/cart/add', json={'product_id': a})
    assert resp.get_json()['cart_count'] == 3

    cart = auth_client.get('/cart/?donation=20').get_json()
    assert len(cart['items']) == 1
    assert Decimal(cart['totals']['total']) == Decimal('1520')
    assert cart['totals']['trees_funded'] == 2

    item_id = cart['items'][0]['id']
    assert auth_client.put('/cart/update', json={'item_id': item_id, 'quantity': 0}).status_code == 422
    resp = auth_client.put('/cart/update', json={'item_id': item_id, 'quantity': 1})
    assert resp.get_json()['cart_count'] == 1

    assert auth_client.delete(f'/cart/remove/{item_id}').status_code == 200
    assert auth_client.get('/cart/count').get_json()['count'] == 0
    assert auth_client.delete(f'/cart/remove/{item_id}').status_code == 404


def test_cart_rejects_unavailable_product(auth_client, app):
    with app.app_context():
        gone = make_product('Old Bag', '10', available=False)
    assert auth_client.post('/cart/add', json={'product_id': gone}).status_code == 404


def test_cart_preview_rejects_odd_donation(auth_client):
    assert auth_client.get('/cart/?donation=5').status_code == 422
    assert auth_client.get('/cart/?donation=1e30').status_code == 422


def test_cart_clear(auth_client, product_ids):
    auth_client.post('/cart/add', json={'product_id': product_ids[0]})
    auth_client.post('/cart/add', json={'product_id': product_ids[1]})

    assert auth_client.post('/cart/clear').status_code == 200
    assert auth_client.get('/cart/count').get_json()['count'] == 0


# Orders

def test_checkout_endpoint(auth_client, app, filled_cart):
    with mail.record_messages() as outbox:
        resp = auth_client.post('/orders/checkout', json={'donation_amount': 20})

    assert resp.status_code == 201
    order = resp.get_json()['order']
    assert Decimal(order['total']) == Decimal('1320')
    assert order['green_points_earned'] == 25
    assert order['cart_cleared'] is True
    assert len(outbox) == 1
    assert order['order_number'] in outbox[0].subject

    with app.app_context():
        assert CartItem.query.count() == 0
        assert Notification.query.filter_by(user_id=filled_cart).count() == 1

    detail = auth_client.get(f"/orders/{order['order_number']}").get_json()['order']
    assert len(detail['items']) == 2

    history = auth_client.get('/orders/').get_json()
    assert history['total'] == 1

    dashboard = auth_client.get('/customer/dashboard').get_json()
    assert dashboard['impact']['total_orders'] == 1
    assert dashboard['impact']['green_points'] == 25
    assert dashboard['cart_count'] == 0
    assert [a['code'] for a in dashboard['achievements']] == ['first_purchase']


def test_checkout_replay_with_idempotency_key(auth_client, app, filled_cart):
    headers = {'Idempotency-Key': 'retry-me'}
    first = auth_client.post('/orders/checkout', json={'donation_amount': 0}, headers=headers)
    again = auth_client.post('/orders/checkout', json={'donation_amount': 0}, headers=headers)

    assert first.status_code == 201
    assert again.status_code == 200
    assert again.get_json()['order']['order_number'] == first.get_json()['order']['order_number']
    with app.app_context():
        assert Order.query.count() == 1


def test_checkout_empty_cart(auth_client):
    resp = auth_client.post('/orders/checkout', json={'donation_amount': 10})
    assert resp.status_code == 422
    assert resp.get_json()['error'] == 'EmptyCartError'


def test_checkout_invalid_donation(auth_client, filled_cart):
    resp = auth_client.post('/orders/checkout', json={'donation_amount': -10})
    assert resp.status_code == 422


def test_checkout_rejects_huge_donation(auth_client, app, filled_cart):
    resp = auth_client.post('/orders/checkout', json={'donation_amount': '1e30'})

    assert resp.status_code == 422
    assert resp.get_json()['error'] == 'InvalidDonationError'
    with app.app_context():
        assert Order.query.count() == 0


def test_checkout_requires_login(client, filled_cart):
    assert client.post('/orders/checkout', json={}).status_code == 401


def test_checkout_partial_reports_order(auth_client, app, filled_cart, monkeypatch):
    def broken(self, order, lines):
        raise OperationalError('stmt', {}, Exception('disk I/O error'))

    monkeypatch.setattr(OrderLedger, 'insert_order_lines', broken)
    resp = auth_client.post('/orders/checkout', json={'donation_amount': 0})

    assert resp.status_code == 202
    body = resp.get_json()
    assert body['order_number']
    assert body['error'] == 'OrderLinePersistError'
    with app.app_context():
        note = Notification.query.one()
        assert 'finalizing' in note.message

    status = auth_client.get(f"/api/order/{body['order_number']}/status").get_json()
    assert status['finalized'] is False
    assert status['stage'] == 'placed'


def test_order_detail_owner_only(client, app, filled_cart):
    with app.app_context():
        make_user(email='nosy@greenshop.io')
    owner = app.test_client()
    owner.post('/auth/login', json={'email': 'shopper@greenshop.io', 'password': PASSWORD})
    number = owner.post('/orders/checkout', json={}).get_json()['order']['order_number']

    client.post('/auth/login', json={'email': 'nosy@greenshop.io', 'password': PASSWORD})
    assert client.get(f'/orders/{number}').status_code == 404
    assert client.get(f'/api/order/{number}/status').status_code == 403


# Customer

def test_profile_and_password(auth_client):
    resp = auth_client.put('/customer/profile', json={'full_name': 'Renamed Shopper'})
    assert resp.get_json()['user']['full_name'] == 'Renamed Shopper'

    resp = auth_client.post('/customer/password', json={
        'current_password': 'not-it',
        'new_password': 'fresh123',
        'confirm_password': 'fresh123',
    })
    assert resp.status_code == 400

    resp = auth_client.post('/customer/password', json={
        'current_password': PASSWORD,
        'new_password': 'fresh123',
        'confirm_password': 'fresh123',
    })
    assert resp.status_code == 200


def test_dashboard_reward_progress(auth_client, app, user_id):
    with app.app_context():
        stats = ImpactStats.query.filter_by(user_id=user_id).one()
        stats.green_points = 150
        db.session.commit()

    rewards = auth_client.get('/customer/dashboard').get_json()['rewards']
    assert [(r['code'], r['unlocked'], r['points_needed']) for r in rewards] == [
        ('discount_10', True, 0),
        ('plant_5_trees', False, 50),
        ('free_product', False, 350),
    ]


def test_notifications_mark_read(auth_client, app, user_id):
    with app.app_context():
        for number in ('GS-1', 'GS-2'):
            db.session.add(Notification.create_order_notification(user_id, number, 'completed'))
        db.session.commit()

    body = auth_client.get('/customer/notifications').get_json()
    assert body['unread_count'] == 2

    auth_client.post('/customer/notifications/mark-read', json={'ids': [body['notifications'][0]['id']]})
    assert auth_client.get('/customer/notifications').get_json()['unread_count'] == 1

    auth_client.post('/customer/notifications/mark-read')
    assert auth_client.get('/customer/notifications').get_json()['unread_count'] == 0


def test_search(client, product_ids):
    assert client.get('/api/search?q=b').get_json()['products'] == []
    titles = [p['title'] for p in client.get('/api/search?q=bamboo').get_json()['products']]
    assert titles == ['Bamboo Toothbrush Set']
