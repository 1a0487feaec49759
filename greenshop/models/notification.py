"""Notification model."""

from datetime import datetime
from greenshop.extensions import db


class Notification(db.Model):
    """User notifications."""
    __tablename__ = 'notifications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(50), default='system')  # order, reward, system
    link = db.Column(db.String(255))
    is_read = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @staticmethod
    def create_order_notification(user_id, order_number, status):
        """Create an order status notification."""
        status_messages = {
            'completed': 'Your order has been placed successfully!',
            'finalizing': 'Your order is placed. We are still finalizing your rewards.',
        }
        message = status_messages.get(status, f'Order status updated to: {status}')
        return Notification(
            user_id=user_id,
            title=f'Order {order_number}',
            message=message,
            type='order',
            link=f'/orders/{order_number}'
        )

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'message': self.message,
            'type': self.type,
            'link': self.link,
            'is_read': self.is_read,
            'created_at': self.created_at.isoformat(),
        }

    def __repr__(self):
        return f'<Notification {self.title}>'
