"""Order routes."""

from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from greenshop.extensions import db
from greenshop.forms.checkout import CheckoutForm
from greenshop.models import Order, Notification
from greenshop.routes import form_errors
from greenshop.services.checkout import CheckoutWorkflow
from greenshop.services.errors import CheckoutError, PartialCheckoutError
from greenshop.services.mailer import send_order_confirmation

orders_bp = Blueprint('orders', __name__)


def _notify(order_number, status):
    db.session.add(Notification.create_order_notification(
        current_user.id, order_number, status
    ))
    db.session.commit()


@orders_bp.errorhandler(CheckoutError)
def checkout_failed(error):
    """Report checkout failures. Partial checkouts still carry the order."""
    if isinstance(error, PartialCheckoutError):
        _notify(error.order_number, 'finalizing')
    return jsonify(error.to_dict()), error.status_code


@orders_bp.route('/checkout', methods=['POST'])
@login_required
def checkout():
    """Place an order for the current cart.

    Clients may send an ``Idempotency-Key`` header; repeating a request
    with the same key returns the original order.
    """
    form = CheckoutForm()
    if not form.validate_on_submit():
        return jsonify(form_errors(form)), 422

    token = request.headers.get('Idempotency-Key') or None
    receipt = CheckoutWorkflow().checkout_cart(
        current_user.id,
        form.donation_amount.data,
        token=token
    )

    if receipt.replayed:
        return jsonify({'success': True, 'order': receipt.to_dict()})

    _notify(receipt.order_number, 'completed')
    send_order_confirmation(current_user, receipt)

    message = 'Order placed successfully!'
    if not receipt.cart_cleared:
        message = 'Order placed successfully! Some items may still show in your cart.'
    return jsonify({'success': True, 'message': message, 'order': receipt.to_dict()}), 201


@orders_bp.route('/')
@login_required
def order_history():
    """Order history."""
    page = request.args.get('page', 1, type=int)

    orders_query = Order.query.filter_by(
        user_id=current_user.id
    ).order_by(Order.created_at.desc(), Order.id.desc())

    pagination = orders_query.paginate(
        page=page,
        per_page=current_app.config.get('ITEMS_PER_PAGE', 12),
        error_out=False
    )

    return jsonify({
        'orders': [o.to_dict(with_items=True) for o in pagination.items],
        'page': page,
        'total': pagination.total,
    })


@orders_bp.route('/<order_number>')
@login_required
def order_detail(order_number):
    """Order details."""
    order = Order.query.filter_by(
        order_number=order_number,
        user_id=current_user.id
    ).first_or_404()
    return jsonify({'order': order.to_dict(with_items=True)})
