"""Persistence collaborators used by checkout and the cart routes.

Each write method commits its own transaction and rolls the session back
before re-raising, so a failed step leaves the session usable for a retry.
"""

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from greenshop.extensions import db
from greenshop.models import (CartItem, Order, OrderItem, CheckoutRun,
                              ImpactStats, ImpactIncrement)
from greenshop.services.errors import ConstraintError
from greenshop.services.totals import CartLine


def _commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise


class CartStore:
    """Cart lines keyed by user and product."""

    def list_items(self, user_id):
        return CartItem.query.filter_by(user_id=user_id).order_by(CartItem.id).all()

    def list_by_user(self, user_id):
        """Cart lines priced from the current catalog."""
        return [CartLine.from_item(item) for item in self.list_items(user_id)]

    def get_item(self, user_id, item_id):
        return CartItem.query.filter_by(id=item_id, user_id=user_id).first()

    def add(self, user_id, product_id, quantity=1):
        cart_item = CartItem.query.filter_by(user_id=user_id, product_id=product_id).first()
        if cart_item:
            cart_item.quantity += quantity
        else:
            cart_item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
            db.session.add(cart_item)
        _commit()
        return cart_item

    def update_quantity(self, user_id, item_id, quantity):
        cart_item = self.get_item(user_id, item_id)
        if cart_item is None:
            return None
        cart_item.quantity = quantity
        _commit()
        return cart_item

    def remove_line(self, user_id, item_id):
        cart_item = self.get_item(user_id, item_id)
        if cart_item is None:
            return False
        db.session.delete(cart_item)
        _commit()
        return True

    def clear_by_user(self, user_id, product_ids=None):
        """Delete the user's cart lines, optionally only for ``product_ids``."""
        query = CartItem.query.filter_by(user_id=user_id)
        if product_ids is not None:
            query = query.filter(CartItem.product_id.in_(list(product_ids)))
        try:
            deleted = query.delete(synchronize_session=False)
        except SQLAlchemyError:
            db.session.rollback()
            raise
        _commit()
        return deleted

    def count_items(self, user_id):
        """Total quantity across the user's cart."""
        total = db.session.query(db.func.sum(CartItem.quantity)).filter(
            CartItem.user_id == user_id
        ).scalar()
        return int(total or 0)


class OrderLedger:
    """Append-only record of orders, their lines and checkout progress."""

    def get_run(self, token):
        return CheckoutRun.query.filter_by(token=token).first()

    def insert_order(self, user_id, order_number, token, totals, lines):
        """Commit the order and its progress record together.

        Raises ConstraintError when the order number or token is taken.
        """
        order = Order(
            order_number=order_number,
            checkout_token=token,
            user_id=user_id,
            subtotal=totals.subtotal,
            donation_amount=totals.donation_amount,
            total=totals.total,
            green_points_earned=totals.green_points,
            co2_saved=totals.co2_saved,
            plastic_saved=totals.plastic_saved,
            water_saved=totals.water_saved,
            trees_funded=totals.trees_funded,
            status='completed',
        )
        run = CheckoutRun(
            token=token,
            user_id=user_id,
            order=order,
            stage=CheckoutRun.PLACED,
            lines=[line.snapshot() for line in lines],
        )
        db.session.add(order)
        db.session.add(run)
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise ConstraintError(str(e.orig)) from e
        except SQLAlchemyError:
            db.session.rollback()
            raise
        return order, run

    def insert_order_lines(self, order, lines):
        """Insert lines not yet present for ``order``. Returns how many were added."""
        existing = {
            product_id for (product_id,) in
            db.session.query(OrderItem.product_id).filter(OrderItem.order_id == order.id)
        }
        inserted = 0
        for line in lines:
            if line.product_id in existing:
                continue
            db.session.add(OrderItem(
                order_id=order.id,
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.unit_price,
            ))
            existing.add(line.product_id)
            inserted += 1
        _commit()
        return inserted

    def advance(self, run, stage):
        run.stage = stage
        _commit()
        return run

    def record_failure(self, run, error):
        run.attempts = (run.attempts or 0) + 1
        run.last_error = str(error)[:500]
        _commit()

    def pending_runs(self, limit=100):
        return CheckoutRun.query.filter(
            CheckoutRun.stage != CheckoutRun.COMPLETED
        ).order_by(CheckoutRun.created_at).limit(limit).all()


class ImpactStore:
    """Per-user impact accumulators. Only ever changed by atomic increments."""

    def get(self, user_id):
        return ImpactStats.query.filter_by(user_id=user_id).first()

    def provision(self, user, bonus_points=0):
        """Attach a fresh accumulator to ``user``. The caller commits."""
        stats = ImpactStats(user=user, green_points=bonus_points)
        db.session.add(stats)
        return stats

    def is_applied(self, token):
        return ImpactIncrement.query.filter_by(token=token).first() is not None

    def increment(self, user_id, totals, token):
        """Add one order's totals to the user's accumulator, once per token.

        The counters are updated with ``column = column + delta`` so
        concurrent checkouts for the same user never lose an update.
        Returns the refreshed ImpactStats, or None when the user has none.
        """
        if self.is_applied(token):
            return self.get(user_id)

        db.session.add(ImpactIncrement(
            token=token,
            user_id=user_id,
            green_points=totals.green_points,
            co2_saved=totals.co2_saved,
        ))
        try:
            result = db.session.execute(
                update(ImpactStats)
                .where(ImpactStats.user_id == user_id)
                .values(
                    total_orders=ImpactStats.total_orders + 1,
                    green_points=ImpactStats.green_points + totals.green_points,
                    co2_saved=ImpactStats.co2_saved + totals.co2_saved,
                    plastic_reduced=ImpactStats.plastic_reduced + totals.plastic_saved,
                    water_saved=ImpactStats.water_saved + totals.water_saved,
                    trees_funded=ImpactStats.trees_funded + totals.trees_funded,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.session.rollback()
                return None
            db.session.commit()
        except IntegrityError:
            # Another attempt with the same token committed first.
            db.session.rollback()
        except SQLAlchemyError:
            db.session.rollback()
            raise

        stats = self.get(user_id)
        if stats is not None:
            db.session.refresh(stats)
        return stats
