"""Business services: checkout workflow, stores, totals and rewards."""

from .checkout import CheckoutWorkflow, OrderReceipt, reconcile_pending
from .stores import CartStore, ImpactStore, OrderLedger
from .totals import CartLine, CheckoutTotals, compute_totals, validate_donation

__all__ = [
    'CheckoutWorkflow',
    'OrderReceipt',
    'reconcile_pending',
    'CartStore',
    'ImpactStore',
    'OrderLedger',
    'CartLine',
    'CheckoutTotals',
    'compute_totals',
    'validate_donation',
]
