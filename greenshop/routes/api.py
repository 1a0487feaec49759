"""JSON API endpoints for AJAX operations."""

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from greenshop.models import Product, Order

api_bp = Blueprint('api', __name__)


@api_bp.route('/search')
def search():
    """Quick product search for the header search box."""
    query = request.args.get('q', '')

    if len(query) < 2:
        return jsonify({'products': []})

    products = Product.query.filter(
        Product.is_available == True,  # noqa: E712
        Product.title.ilike(f'%{query}%')
    ).order_by(Product.title).limit(10).all()

    return jsonify({
        'products': [{
            'id': p.id,
            'title': p.title,
            'slug': p.slug,
            'price': str(p.price),
            'image': p.image,
            'category': p.category
        } for p in products]
    })


@api_bp.route('/order/<order_number>/status')
@login_required
def order_status(order_number):
    """Checkout progress for an order, for polling after a partial checkout."""
    order = Order.query.filter_by(order_number=order_number).first()

    if not order:
        return jsonify({'success': False, 'message': 'Order not found'}), 404

    if order.user_id != current_user.id:
        return jsonify({'success': False, 'message': 'Access denied'}), 403

    run = order.run
    return jsonify({
        'success': True,
        'order_number': order.order_number,
        'status': order.status,
        'stage': run.stage if run else None,
        'finalized': run.is_complete if run else True,
    })
