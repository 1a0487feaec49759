"""Impact accumulator models."""

from datetime import datetime
from decimal import Decimal
from greenshop.extensions import db


class ImpactStats(db.Model):
    """Per-user running totals of orders, green points and resources saved."""
    __tablename__ = 'impact_stats'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, unique=True)
    total_orders = db.Column(db.Integer, nullable=False, default=0)
    green_points = db.Column(db.Integer, nullable=False, default=0)
    co2_saved = db.Column(db.Numeric(14, 3), nullable=False, default=Decimal('0'))
    plastic_reduced = db.Column(db.Numeric(14, 3), nullable=False, default=Decimal('0'))
    water_saved = db.Column(db.Numeric(14, 3), nullable=False, default=Decimal('0'))
    trees_funded = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'total_orders': self.total_orders,
            'green_points': self.green_points,
            'co2_saved': str(self.co2_saved),
            'plastic_reduced': str(self.plastic_reduced),
            'water_saved': str(self.water_saved),
            'trees_funded': self.trees_funded,
        }

    def __repr__(self):
        return f'<ImpactStats user={self.user_id} points={self.green_points}>'


class ImpactIncrement(db.Model):
    """Applied accumulator increment, unique per checkout token."""
    __tablename__ = 'impact_increments'

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    green_points = db.Column(db.Integer, nullable=False, default=0)
    co2_saved = db.Column(db.Numeric(12, 3), nullable=False, default=Decimal('0'))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<ImpactIncrement {self.token}>'
