"""Routes package - register all blueprints."""

from flask import Flask


def register_blueprints(app: Flask):
    """Register all blueprints with the application."""
    from .auth import auth_bp
    from .main import main_bp
    from .customer import customer_bp
    from .cart import cart_bp
    from .orders import orders_bp
    from .api import api_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(main_bp)
    app.register_blueprint(customer_bp, url_prefix='/customer')
    app.register_blueprint(cart_bp, url_prefix='/cart')
    app.register_blueprint(orders_bp, url_prefix='/orders')
    app.register_blueprint(api_bp, url_prefix='/api')


def form_errors(form):
    """Flatten WTForms errors into one response body."""
    return {
        'success': False,
        'message': 'Please correct the highlighted fields.',
        'errors': {name: list(errors) for name, errors in form.errors.items()},
    }
