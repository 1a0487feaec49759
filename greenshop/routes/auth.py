"""Authentication routes."""

from flask import Blueprint, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf
from greenshop.extensions import db
from greenshop.models import User
from greenshop.forms.auth import LoginForm, RegistrationForm
from greenshop.routes import form_errors
from greenshop.services.stores import ImpactStore

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/csrf-token')
def csrf_token():
    """Token for the X-CSRFToken header on state-changing requests."""
    return jsonify({'csrf_token': generate_csrf()})


@auth_bp.route('/login', methods=['POST'])
def login():
    """User login."""
    if current_user.is_authenticated:
        return jsonify({'success': True, 'user': current_user.to_dict()})

    form = LoginForm()
    if not form.validate_on_submit():
        return jsonify(form_errors(form)), 422

    user = User.query.filter_by(email=form.email.data.lower()).first()
    if not user or not user.check_password(form.password.data):
        return jsonify({'success': False, 'message': 'Invalid email or password.'}), 401
    if not user.is_active:
        return jsonify({
            'success': False,
            'message': 'Your account has been deactivated. Please contact support.'
        }), 403

    login_user(user, remember=form.remember.data)
    current_app.logger.info('user %s logged in', user.id)
    return jsonify({
        'success': True,
        'message': f'Welcome back, {user.full_name}!',
        'user': user.to_dict()
    })


@auth_bp.route('/register', methods=['POST'])
def register():
    """Shopper registration. Provisions the impact accumulator with the signup bonus."""
    form = RegistrationForm()
    if not form.validate_on_submit():
        return jsonify(form_errors(form)), 422

    user = User(
        email=form.email.data.lower(),
        full_name=form.full_name.data.strip(),
    )
    user.set_password(form.password.data)
    db.session.add(user)

    bonus = current_app.config['SIGNUP_BONUS_POINTS']
    ImpactStore().provision(user, bonus_points=bonus)
    db.session.commit()

    login_user(user)
    current_app.logger.info('user %s registered', user.id)
    return jsonify({
        'success': True,
        'message': f"Account created successfully! You've earned {bonus} bonus green points.",
        'user': user.to_dict()
    }), 201


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """User logout."""
    logout_user()
    return jsonify({'success': True, 'message': 'You have been logged out.'})


@auth_bp.route('/me')
@login_required
def me():
    return jsonify({'success': True, 'user': current_user.to_dict()})
