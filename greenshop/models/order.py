"""Order models."""

from datetime import datetime
import uuid
from greenshop.extensions import db


class Order(db.Model):
    """Placed order. Written once at checkout and never updated."""
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(50), unique=True, nullable=False, index=True)
    checkout_token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    # Pricing
    subtotal = db.Column(db.Numeric(12, 2), nullable=False)
    donation_amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    total = db.Column(db.Numeric(12, 2), nullable=False)

    # Impact earned
    green_points_earned = db.Column(db.Integer, nullable=False, default=0)
    co2_saved = db.Column(db.Numeric(12, 3), nullable=False, default=0)
    plastic_saved = db.Column(db.Numeric(12, 3), nullable=False, default=0)
    water_saved = db.Column(db.Numeric(12, 3), nullable=False, default=0)
    trees_funded = db.Column(db.Integer, nullable=False, default=0)

    # Status
    status = db.Column(db.String(20), nullable=False, default='completed')

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    # Relationships
    items = db.relationship('OrderItem', backref='order', lazy='dynamic', cascade='all, delete-orphan')
    run = db.relationship('CheckoutRun', backref='order', uselist=False)

    @staticmethod
    def generate_order_number(prefix='GS'):
        """Generate a unique order number."""
        date = datetime.utcnow().strftime('%Y%m%d')
        unique_id = uuid.uuid4().hex[:10].upper()
        return f'{prefix}-{date}-{unique_id}'

    def to_dict(self, with_items=False):
        data = {
            'id': self.id,
            'order_number': self.order_number,
            'status': self.status,
            'subtotal': str(self.subtotal),
            'donation_amount': str(self.donation_amount),
            'total': str(self.total),
            'green_points_earned': self.green_points_earned,
            'co2_saved': str(self.co2_saved),
            'plastic_saved': str(self.plastic_saved),
            'water_saved': str(self.water_saved),
            'trees_funded': self.trees_funded,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if with_items:
            data['items'] = [item.to_dict() for item in self.items.order_by(OrderItem.id)]
        return data

    def __repr__(self):
        return f'<Order {self.order_number}>'


class OrderItem(db.Model):
    """Order line with the unit price snapshotted at checkout."""
    __tablename__ = 'order_items'
    __table_args__ = (
        db.UniqueConstraint('order_id', 'product_id', name='uq_order_items_order_product'),
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Numeric(12, 2), nullable=False)

    def to_dict(self):
        return {
            'product_id': self.product_id,
            'title': self.product.title if self.product else None,
            'image': self.product.image if self.product else None,
            'quantity': self.quantity,
            'price': str(self.price),
        }

    def __repr__(self):
        return f'<OrderItem {self.product_id} x {self.quantity}>'


class CheckoutRun(db.Model):
    """Progress of one checkout after its order was committed.

    Created in the same transaction as the order. ``lines`` keeps the cart
    snapshot so a resumed run writes exactly what was priced.
    """
    __tablename__ = 'checkout_runs'

    PLACED = 'placed'
    LINES_SAVED = 'lines_saved'
    REWARDED = 'rewarded'
    COMPLETED = 'completed'

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False, unique=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    stage = db.Column(db.String(20), nullable=False, default=PLACED, index=True)
    lines = db.Column(db.JSON, nullable=False)
    attempts = db.Column(db.Integer, nullable=False, default=0)
    last_error = db.Column(db.String(500))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_complete(self):
        return self.stage == self.COMPLETED

    def __repr__(self):
        return f'<CheckoutRun {self.token} {self.stage}>'
