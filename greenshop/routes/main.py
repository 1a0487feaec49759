"""Catalog routes."""

from flask import Blueprint, jsonify, request, current_app, abort
from sqlalchemy import or_, func
from greenshop.extensions import db
from greenshop.models import Product, ImpactStats

main_bp = Blueprint('main', __name__)

CATEGORIES = ['Kitchen', 'Personal Care', 'Accessories', 'Electronics', 'Stationery']
ECO_TAGS = ['Plastic-Free', 'Biodegradable', 'Vegan', 'Reusable', 'Zero Waste', 'Organic',
            'Fair Trade', 'Renewable Energy', 'Zero Emissions', 'Recycled']


@main_bp.route('/')
def index():
    """Homepage: featured products and community impact."""
    featured = Product.query.filter_by(
        is_available=True,
        is_featured=True
    ).order_by(Product.created_at.desc()).limit(8).all()

    totals = db.session.query(
        func.coalesce(func.sum(ImpactStats.co2_saved), 0),
        func.coalesce(func.sum(ImpactStats.total_orders), 0),
        func.coalesce(func.sum(ImpactStats.trees_funded), 0),
    ).one()

    return jsonify({
        'featured_products': [p.to_dict() for p in featured],
        'community_impact': {
            'co2_saved': str(totals[0]),
            'orders': int(totals[1]),
            'trees_funded': int(totals[2]),
        }
    })


@main_bp.route('/categories')
def categories():
    """Filter options for the product list."""
    return jsonify({'categories': ['all'] + CATEGORIES, 'eco_tags': ECO_TAGS})


@main_bp.route('/products')
def products():
    """List products with category, eco tag and text filters."""
    page = request.args.get('page', 1, type=int)
    category = request.args.get('category', 'all')
    search = request.args.get('q', '').strip()
    tags = [t.strip() for t in request.args.get('tags', '').split(',') if t.strip()]
    sort = request.args.get('sort', 'newest')

    # Base query
    query = Product.query.filter_by(is_available=True)

    # Filter by category
    if category and category.lower() != 'all':
        query = query.filter(func.lower(Product.category) == category.lower())

    # Search
    if search:
        query = query.filter(
            or_(
                Product.title.ilike(f'%{search}%'),
                Product.description.ilike(f'%{search}%'),
                Product.category.ilike(f'%{search}%')
            )
        )

    # Sort
    if sort == 'price_asc':
        query = query.order_by(Product.price.asc())
    elif sort == 'price_desc':
        query = query.order_by(Product.price.desc())
    elif sort == 'impact':
        query = query.order_by(Product.co2_saved.desc())
    else:
        query = query.order_by(Product.created_at.desc(), Product.id.desc())

    per_page = current_app.config.get('ITEMS_PER_PAGE', 12)

    # Eco tags live in a JSON list, so they are matched after loading.
    if tags:
        matched = [p for p in query.all() if any(p.has_tag(t) for t in tags)]
        total = len(matched)
        items = matched[(page - 1) * per_page:page * per_page]
    else:
        pagination = query.paginate(page=page, per_page=per_page, error_out=False)
        total = pagination.total
        items = pagination.items

    return jsonify({
        'products': [p.to_dict() for p in items],
        'page': page,
        'per_page': per_page,
        'total': total,
    })


@main_bp.route('/products/<ref>')
def product_detail(ref):
    """Product page, by id or slug."""
    if ref.isdigit():
        product = db.session.get(Product, int(ref))
    else:
        product = Product.query.filter_by(slug=ref).first()
    if product is None:
        abort(404)
    return jsonify({'product': product.to_dict(detail=True)})
