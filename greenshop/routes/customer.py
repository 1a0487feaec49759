"""Customer routes."""

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user
from greenshop.extensions import db
from greenshop.forms.auth import ProfileForm, ChangePasswordForm
from greenshop.models import Order, Notification
from greenshop.routes import form_errors
from greenshop.services.rewards import reward_progress, earned_achievements
from greenshop.services.stores import CartStore, ImpactStore

customer_bp = Blueprint('customer', __name__)


@customer_bp.route('/dashboard')
@login_required
def dashboard():
    """Impact dashboard: accumulated impact, rewards and achievements."""
    stats = ImpactStore().get(current_user.id)

    recent_orders = Order.query.filter_by(
        user_id=current_user.id
    ).order_by(Order.created_at.desc(), Order.id.desc()).limit(5).all()

    unread_notifications = Notification.query.filter_by(
        user_id=current_user.id,
        is_read=False
    ).count()

    return jsonify({
        'user': current_user.to_dict(),
        'impact': stats.to_dict() if stats else None,
        'rewards': reward_progress(stats.green_points if stats else 0),
        'achievements': earned_achievements(stats),
        'recent_orders': [o.to_dict() for o in recent_orders],
        'cart_count': CartStore().count_items(current_user.id),
        'unread_notifications': unread_notifications,
    })


@customer_bp.route('/profile', methods=['PUT'])
@login_required
def profile():
    """Customer profile management."""
    form = ProfileForm()
    if not form.validate_on_submit():
        return jsonify(form_errors(form)), 422

    current_user.full_name = form.full_name.data.strip()
    db.session.commit()
    return jsonify({
        'success': True,
        'message': 'Profile updated successfully!',
        'user': current_user.to_dict()
    })


@customer_bp.route('/password', methods=['POST'])
@login_required
def change_password():
    form = ChangePasswordForm()
    if not form.validate_on_submit():
        return jsonify(form_errors(form)), 422

    if not current_user.check_password(form.current_password.data):
        return jsonify({'success': False, 'message': 'Current password is incorrect.'}), 400

    current_user.set_password(form.new_password.data)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Password changed successfully!'})


@customer_bp.route('/notifications')
@login_required
def notifications():
    """View all notifications."""
    page = request.args.get('page', 1, type=int)

    notifications_query = Notification.query.filter_by(
        user_id=current_user.id
    ).order_by(Notification.created_at.desc(), Notification.id.desc())

    pagination = notifications_query.paginate(page=page, per_page=20, error_out=False)

    unread_count = Notification.query.filter_by(
        user_id=current_user.id,
        is_read=False
    ).count()

    return jsonify({
        'notifications': [n.to_dict() for n in pagination.items],
        'unread_count': unread_count,
        'page': page,
        'total': pagination.total,
    })


@customer_bp.route('/notifications/mark-read', methods=['POST'])
@login_required
def mark_notifications_read():
    """Mark notifications as read, all of them when no ids are given."""
    data = request.get_json(silent=True) or {}
    notification_ids = data.get('ids', [])

    query = Notification.query.filter_by(user_id=current_user.id, is_read=False)
    if notification_ids:
        query = query.filter(Notification.id.in_(notification_ids))
    query.update({'is_read': True}, synchronize_session=False)

    db.session.commit()
    return jsonify({'success': True})
