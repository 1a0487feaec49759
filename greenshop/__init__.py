"""Flask application factory."""

import os
from flask import Flask, jsonify
from flask_wtf.csrf import CSRFError
from .config import config
from .extensions import db, migrate, login_manager, bcrypt, csrf, mail


def create_app(config_name=None):
    """Create and configure the Flask application."""
    if config_name is None:
        config_name = os.environ.get('FLASK_CONFIG', 'development')

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    bcrypt.init_app(app)
    csrf.init_app(app)
    mail.init_app(app)

    # SQLite database lives in the instance folder
    os.makedirs(app.instance_path, exist_ok=True)

    # Register blueprints
    from .routes import register_blueprints
    register_blueprints(app)

    from .cli import register_cli
    register_cli(app)

    # User loader for Flask-Login
    from .models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'message': 'Please log in to continue.'}), 401

    # Error handlers
    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'success': False, 'message': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({'success': False, 'message': 'Method not allowed'}), 405

    @app.errorhandler(CSRFError)
    def csrf_error(error):
        return jsonify({'success': False, 'message': error.description}), 400

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.exception('unhandled error: %s', error)
        return jsonify({'success': False, 'message': 'Something went wrong'}), 500

    return app
