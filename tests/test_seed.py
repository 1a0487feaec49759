import logging

from greenshop.models import ImpactStats, Product, User

from seed_data import PRODUCTS, seed_database


def test_seed_database_once(app, caplog):
    with caplog.at_level(logging.INFO):
        assert seed_database(app) is True
        assert seed_database(app) is False

    with app.app_context():
        assert Product.query.count() == len(PRODUCTS)
        demo = User.query.filter_by(email='demo@greenshop.io').one()
        stats = ImpactStats.query.filter_by(user_id=demo.id).one()
        assert stats.green_points == app.config['SIGNUP_BONUS_POINTS']

    messages = [r.getMessage() for r in caplog.records]
    assert f'Database seeded: {len(PRODUCTS)} products' in messages
    assert 'Database already seeded' in messages
