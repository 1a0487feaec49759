"""Checkout error taxonomy.

Validation errors are raised before anything is written. Persistence
errors before the order commit leave no trace. Once the order exists,
failures are reported as partial checkouts that carry the order so the
caller can show "order placed" and reconciliation can finish the run.
"""


class CheckoutError(Exception):
    """Base class for checkout failures."""
    status_code = 400
    message = 'Checkout failed.'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self):
        return {'success': False, 'message': self.message, 'error': type(self).__name__}


# Validation

class UnauthenticatedError(CheckoutError):
    status_code = 401
    message = 'Please log in to check out.'


class EmptyCartError(CheckoutError):
    status_code = 422
    message = 'Your cart is empty.'


class InvalidDonationError(CheckoutError):
    status_code = 422
    message = 'Invalid donation amount.'


class InvalidCartError(CheckoutError):
    status_code = 422
    message = 'Your cart contains an invalid line.'


class IdempotencyConflictError(CheckoutError):
    status_code = 409
    message = 'This checkout key belongs to another checkout.'


# Before the commit point

class OrderPersistError(CheckoutError):
    status_code = 503
    message = 'Checkout failed, your cart is unchanged. Please try again.'


class ConstraintError(Exception):
    """Raised by the ledger when an order violates a unique constraint."""


# After the commit point

class PostCommitError(CheckoutError):
    """A failure after the order was committed. Carries the order."""

    def __init__(self, order_id, order_number, message=None):
        super().__init__(message)
        self.order_id = order_id
        self.order_number = order_number

    def to_dict(self):
        data = super().to_dict()
        data.update({'order_id': self.order_id, 'order_number': self.order_number})
        return data


class PartialCheckoutError(PostCommitError):
    status_code = 202
    message = 'Order placed, finalizing rewards.'


class OrderLinePersistError(PartialCheckoutError):
    pass


class AccumulatorUpdatePersistError(PartialCheckoutError):
    pass


class MissingAccumulatorError(PostCommitError):
    status_code = 500
    message = 'Order placed, but your impact record is missing. Support has been notified.'


class CartClearError(PostCommitError):
    """Non-fatal: the order is complete but the cart still holds its lines."""
    status_code = 200
    message = 'Order placed, but your cart could not be cleared.'
