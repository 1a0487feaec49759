"""Cart model."""

from datetime import datetime
from greenshop.extensions import db


class CartItem(db.Model):
    """Shopping cart line, one per (user, product)."""
    __tablename__ = 'cart_items'
    __table_args__ = (
        db.UniqueConstraint('user_id', 'product_id', name='uq_cart_items_user_product'),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey('products.id'), nullable=False)
    quantity = db.Column(db.Integer, default=1, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def subtotal(self):
        """Calculate subtotal for this cart item."""
        if self.product:
            return self.product.price * self.quantity
        return 0

    def to_dict(self):
        return {
            'id': self.id,
            'product_id': self.product_id,
            'quantity': self.quantity,
            'subtotal': str(self.subtotal),
            'product': self.product.to_dict() if self.product else None,
        }

    def __repr__(self):
        return f'<CartItem {self.product_id} x {self.quantity}>'
