"""Checkout workflow.

A checkout turns a user's cart into an order and credits the impact the
order earns. It runs as a sequence of dependent writes:

1. insert the order together with its ``CheckoutRun`` (the commit point),
2. insert the order lines,
3. increment the user's impact accumulator,
4. clear the cart.

Nothing is written until the input validates. Once step 1 commits the
order is final; the remaining steps are idempotent (lines keyed by order
and product, the increment keyed by the checkout token, the cart delete
by user) and are retried a bounded number of times. A run that still
cannot finish stays pending and ``reconcile_pending`` completes it later
with the same token.
"""

import time
import uuid
from dataclasses import dataclass, replace

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from greenshop.extensions import db
from greenshop.models import CheckoutRun, Order
from greenshop.services.errors import (
    AccumulatorUpdatePersistError, CartClearError, ConstraintError,
    EmptyCartError, IdempotencyConflictError, MissingAccumulatorError,
    OrderLinePersistError, OrderPersistError, UnauthenticatedError,
)
from greenshop.services.stores import CartStore, ImpactStore, OrderLedger
from greenshop.services.totals import (CartLine, CheckoutTotals,
                                       compute_totals, validate_donation,
                                       validate_lines)
from greenshop.utils.money import D, to_string_money

ORDER_NUMBER_ATTEMPTS = 3


@dataclass(frozen=True)
class OrderReceipt:
    order_id: int
    order_number: str
    total: object
    green_points_earned: int
    co2_saved: object
    cart_cleared: bool = True
    replayed: bool = False

    def to_dict(self):
        return {
            'order_id': self.order_id,
            'order_number': self.order_number,
            'total': to_string_money(self.total),
            'green_points_earned': self.green_points_earned,
            'co2_saved': str(self.co2_saved),
            'cart_cleared': self.cart_cleared,
            'replayed': self.replayed,
        }


def new_checkout_token():
    return uuid.uuid4().hex


def totals_for_order(order):
    """The totals an order was placed with, as recorded on the order."""
    return CheckoutTotals(
        subtotal=D(order.subtotal),
        donation_amount=D(order.donation_amount),
        total=D(order.total),
        green_points=order.green_points_earned,
        co2_saved=D(order.co2_saved),
        plastic_saved=D(order.plastic_saved),
        water_saved=D(order.water_saved),
        trees_funded=order.trees_funded,
    )


class _AccumulatorMissing(Exception):
    pass


class CheckoutWorkflow:
    """Runs checkouts against the cart, order and impact stores.

    Settings default to the app config (``CHECKOUT_FINALIZE_ATTEMPTS``,
    ``CHECKOUT_RETRY_DELAY``, ``DONATION_INCREMENT``, ``TREE_COST``,
    ``ORDER_NUMBER_PREFIX``).
    """

    def __init__(self, carts=None, ledger=None, impact=None,
                 attempts=None, retry_delay=None, sleep=time.sleep):
        cfg = current_app.config
        self.carts = carts or CartStore()
        self.ledger = ledger or OrderLedger()
        self.impact = impact or ImpactStore()
        self.attempts = max(1, attempts if attempts is not None
                            else cfg.get('CHECKOUT_FINALIZE_ATTEMPTS', 3))
        self.retry_delay = (retry_delay if retry_delay is not None
                            else cfg.get('CHECKOUT_RETRY_DELAY', 0.2))
        self.donation_increment = cfg.get('DONATION_INCREMENT', 10)
        self.tree_cost = cfg.get('TREE_COST', 10)
        self.order_prefix = cfg.get('ORDER_NUMBER_PREFIX', 'GS')
        self.sleep = sleep
        self.log = current_app.logger

    # -- entry points -----------------------------------------------------

    def checkout_cart(self, user_id, donation_amount, token=None):
        """Read the user's cart and check it out."""
        if not user_id:
            raise UnauthenticatedError()
        if token and self.ledger.get_run(token) is not None:
            return self.checkout(user_id, [], donation_amount, token=token)
        return self.checkout(user_id, self.carts.list_by_user(user_id),
                             donation_amount, token=token)

    def checkout(self, user_id, cart_lines, donation_amount, token=None):
        """Place an order for ``cart_lines`` and return an OrderReceipt.

        Passing a token that was already used resumes that checkout instead
        of placing a second order.
        """
        if not user_id:
            raise UnauthenticatedError()

        if token:
            run = self.ledger.get_run(token)
            if run is not None:
                return self._replay(run, user_id)

        cart_lines = list(cart_lines or [])
        if not cart_lines:
            raise EmptyCartError()
        validate_lines(cart_lines)
        donation = validate_donation(donation_amount, self.donation_increment)
        totals = compute_totals(cart_lines, donation, self.tree_cost)

        token = token or new_checkout_token()
        run = self._place_order(user_id, token, totals, cart_lines)
        self.log.info('checkout %s: order %s placed for user %s (total %s)',
                      token, run.order.order_number, user_id, totals.total)
        return self.finalize(run)

    def finalize(self, run, resumed=False):
        """Drive a committed run to completion from its recorded stage."""
        order = run.order
        lines = [CartLine.from_snapshot(data) for data in run.lines]
        totals = totals_for_order(order)

        if run.stage == CheckoutRun.PLACED:
            self._retry(run, OrderLinePersistError, 'order lines',
                        lambda: self.ledger.insert_order_lines(order, lines),
                        CheckoutRun.LINES_SAVED)

        if run.stage == CheckoutRun.LINES_SAVED:
            self._apply_impact(run, order, totals)

        cart_cleared = True
        if run.stage == CheckoutRun.REWARDED:
            # A resumed run only removes what this order bought.
            product_ids = [line.product_id for line in lines] if resumed else None
            try:
                self._retry(run, CartClearError, 'cart clear',
                            lambda: self.carts.clear_by_user(run.user_id, product_ids),
                            CheckoutRun.COMPLETED)
            except CartClearError:
                cart_cleared = False
                self.log.warning('checkout %s: cart for user %s not cleared; left for reconciliation',
                                 run.token, run.user_id)

        if run.is_complete:
            self.log.info('checkout %s: order %s completed', run.token, order.order_number)

        return OrderReceipt(
            order_id=order.id,
            order_number=order.order_number,
            total=totals.total,
            green_points_earned=totals.green_points,
            co2_saved=totals.co2_saved,
            cart_cleared=cart_cleared,
        )

    # -- steps ------------------------------------------------------------

    def _place_order(self, user_id, token, totals, lines):
        for _ in range(ORDER_NUMBER_ATTEMPTS):
            order_number = Order.generate_order_number(self.order_prefix)
            try:
                _, run = self.ledger.insert_order(user_id, order_number, token, totals, lines)
                return run
            except ConstraintError as e:
                existing = self.ledger.get_run(token)
                if existing is not None:
                    # A concurrent request with the same token committed first.
                    if existing.user_id != user_id:
                        raise IdempotencyConflictError() from e
                    return existing
                self.log.warning('checkout %s: order number %s collided, regenerating',
                                 token, order_number)
            except SQLAlchemyError as e:
                self.log.error('checkout %s: order insert failed: %s', token, e)
                raise OrderPersistError() from e
        raise OrderPersistError()

    def _apply_impact(self, run, order, totals):
        def increment():
            if self.impact.get(run.user_id) is None:
                raise _AccumulatorMissing()
            if self.impact.increment(run.user_id, totals, run.token) is None:
                raise _AccumulatorMissing()

        try:
            self._retry(run, AccumulatorUpdatePersistError, 'impact increment',
                        increment, CheckoutRun.REWARDED)
        except _AccumulatorMissing:
            self._note_failure(run, 'impact accumulator missing')
            self.log.error('checkout %s: no impact accumulator for user %s; order %s left at %s',
                           run.token, run.user_id, order.order_number, run.stage)
            raise MissingAccumulatorError(order.id, order.order_number)

    def _replay(self, run, user_id):
        if run.user_id != user_id:
            raise IdempotencyConflictError()
        self.log.info('checkout %s: replaying from stage %s', run.token, run.stage)
        return replace(self.finalize(run, resumed=True), replayed=True)

    # -- helpers ----------------------------------------------------------

    def _retry(self, run, error_cls, label, action, next_stage):
        """Run ``action`` then advance ``run``; retry both on database errors."""
        last_error = None
        for attempt in range(1, self.attempts + 1):
            try:
                action()
                self.ledger.advance(run, next_stage)
                return
            except SQLAlchemyError as e:
                db.session.rollback()
                last_error = e
                self.log.warning('checkout %s: %s failed (attempt %d/%d): %s',
                                 run.token, label, attempt, self.attempts, e)
                if attempt < self.attempts and self.retry_delay:
                    self.sleep(self.retry_delay * attempt)

        self._note_failure(run, f'{label}: {last_error}')
        order = run.order
        self.log.error('checkout %s: %s gave up after %d attempts; order %s pending',
                       run.token, label, self.attempts, order.order_number)
        raise error_cls(order.id, order.order_number) from last_error

    def _note_failure(self, run, message):
        try:
            self.ledger.record_failure(run, message)
        except SQLAlchemyError as e:
            db.session.rollback()
            self.log.error('checkout %s: could not record failure: %s', run.token, e)


_UNFINISHED = (OrderLinePersistError, AccumulatorUpdatePersistError,
               MissingAccumulatorError)


def reconcile_pending(workflow=None, limit=100):
    """Finish checkout runs that stopped after their order was placed.

    Returns ``(completed, still_pending)`` counts.
    """
    workflow = workflow or CheckoutWorkflow()
    completed = pending = 0
    for run in workflow.ledger.pending_runs(limit=limit):
        try:
            workflow.finalize(run, resumed=True)
        except _UNFINISHED as e:
            workflow.log.error('reconcile: run %s still pending: %s', run.token, e)
        if run.is_complete:
            completed += 1
        else:
            pending += 1
    return completed, pending

