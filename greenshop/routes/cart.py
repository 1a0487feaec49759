"""Cart routes."""

from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from greenshop.extensions import db
from greenshop.forms.checkout import AddToCartForm, UpdateCartForm
from greenshop.models import Product
from greenshop.routes import form_errors
from greenshop.services.errors import InvalidDonationError
from greenshop.services.stores import CartStore
from greenshop.services.totals import compute_totals, validate_donation

cart_bp = Blueprint('cart', __name__)


@cart_bp.route('/')
@login_required
def view_cart():
    """View shopping cart with a totals preview for the chosen donation."""
    store = CartStore()
    donation = request.args.get('donation', current_app.config['DEFAULT_DONATION'])
    try:
        donation = validate_donation(donation, current_app.config['DONATION_INCREMENT'])
    except InvalidDonationError as e:
        return jsonify(e.to_dict()), e.status_code

    items = store.list_items(current_user.id)
    totals = compute_totals(
        store.list_by_user(current_user.id),
        donation,
        current_app.config['TREE_COST']
    )
    return jsonify({
        'items': [item.to_dict() for item in items],
        'cart_count': sum(item.quantity for item in items),
        'totals': totals.to_dict(),
    })


@cart_bp.route('/add', methods=['POST'])
@login_required
def add_to_cart():
    """Add product to cart."""
    form = AddToCartForm()
    if not form.validate_on_submit():
        return jsonify(form_errors(form)), 422

    product = db.session.get(Product, form.product_id.data)
    if not product or not product.is_available:
        return jsonify({'success': False, 'message': 'Product not available'}), 404

    store = CartStore()
    store.add(current_user.id, product.id, form.quantity.data or 1)
    return jsonify({
        'success': True,
        'message': f'{product.title} added to cart',
        'cart_count': store.count_items(current_user.id)
    })


@cart_bp.route('/update', methods=['PUT'])
@login_required
def update_cart():
    """Update cart item quantity."""
    form = UpdateCartForm()
    if not form.validate_on_submit():
        return jsonify(form_errors(form)), 422

    store = CartStore()
    cart_item = store.update_quantity(current_user.id, form.item_id.data, form.quantity.data)
    if cart_item is None:
        return jsonify({'success': False, 'message': 'Item not found'}), 404

    return jsonify({
        'success': True,
        'message': 'Cart updated.',
        'item': cart_item.to_dict(),
        'cart_count': store.count_items(current_user.id)
    })


@cart_bp.route('/remove/<int:item_id>', methods=['DELETE'])
@login_required
def remove_from_cart(item_id):
    """Remove item from cart."""
    store = CartStore()
    if not store.remove_line(current_user.id, item_id):
        return jsonify({'success': False, 'message': 'Item not found'}), 404
    return jsonify({
        'success': True,
        'message': 'Item removed from cart.',
        'cart_count': store.count_items(current_user.id)
    })


@cart_bp.route('/clear', methods=['POST'])
@login_required
def clear_cart():
    """Clear all items from cart."""
    CartStore().clear_by_user(current_user.id)
    return jsonify({'success': True, 'message': 'Cart cleared.', 'cart_count': 0})


@cart_bp.route('/count')
@login_required
def cart_count():
    """Get cart item count."""
    return jsonify({'count': CartStore().count_items(current_user.id)})
