"""Product model."""

from datetime import datetime
from decimal import Decimal
from slugify import slugify
from greenshop.extensions import db


class Product(db.Model):
    """Eco-friendly catalog product and the impact one unit of it carries."""
    __tablename__ = 'products'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(150), nullable=False)
    slug = db.Column(db.String(170), unique=True, index=True)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(12, 2), nullable=False)
    image = db.Column(db.String(255))
    category = db.Column(db.String(60), nullable=False, index=True)
    eco_tags = db.Column(db.JSON, default=list)
    vendor = db.Column(db.String(120))
    is_verified = db.Column(db.Boolean, default=False)
    is_featured = db.Column(db.Boolean, default=False)
    is_available = db.Column(db.Boolean, default=True)

    # Per-unit impact
    green_points = db.Column(db.Integer, nullable=False, default=0)
    co2_saved = db.Column(db.Numeric(12, 3), nullable=False, default=Decimal('0'))  # kg
    plastic_saved = db.Column(db.Numeric(12, 3), nullable=False, default=Decimal('0'))  # kg
    water_saved = db.Column(db.Numeric(12, 3), nullable=False, default=Decimal('0'))  # litres

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    cart_items = db.relationship('CartItem', backref='product', lazy='dynamic')
    order_items = db.relationship('OrderItem', backref='product', lazy='dynamic')

    def generate_slug(self):
        """Generate a unique slug for the product."""
        base_slug = slugify(self.title) if self.title else 'product'
        slug = base_slug
        counter = 1
        while Product.query.filter_by(slug=slug).first() is not None:
            slug = f"{base_slug}-{counter}"
            counter += 1
        self.slug = slug

    def has_tag(self, tag):
        return tag.lower() in {t.lower() for t in (self.eco_tags or [])}

    def to_dict(self, detail=False):
        data = {
            'id': self.id,
            'title': self.title,
            'slug': self.slug,
            'price': str(self.price),
            'image': self.image,
            'category': self.category,
            'eco_tags': list(self.eco_tags or []),
            'is_verified': self.is_verified,
            'co2_saved': str(self.co2_saved),
            'green_points': self.green_points,
        }
        if detail:
            data.update({
                'description': self.description,
                'vendor': self.vendor,
                'plastic_saved': str(self.plastic_saved),
                'water_saved': str(self.water_saved),
                'is_available': self.is_available,
            })
        return data

    def __repr__(self):
        return f'<Product {self.title}>'
