"""Seed script to populate database with sample data."""

from decimal import Decimal

from greenshop import create_app
from greenshop.extensions import db
from greenshop.models import User, Product
from greenshop.services.stores import ImpactStore


PRODUCTS = [
    {'title': 'Bamboo Toothbrush Set', 'price': '299', 'category': 'Personal Care', 'image': 'bamboo-toothbrush.jpg',
     'eco_tags': ['Plastic-Free', 'Biodegradable', 'Vegan'], 'co2_saved': '0.5', 'plastic_saved': '0.08',
     'water_saved': '0', 'green_points': 15, 'is_featured': True,
     'description': 'Pack of four toothbrushes with compostable bamboo handles and charcoal bristles.'},
    {'title': 'Stainless Steel Water Bottle', 'price': '899', 'category': 'Accessories', 'image': 'water-bottle.jpg',
     'eco_tags': ['Reusable', 'Zero Waste'], 'co2_saved': '2.5', 'plastic_saved': '1.2',
     'water_saved': '3', 'green_points': 40, 'is_featured': True,
     'description': 'Double-walled bottle that replaces hundreds of single-use plastic bottles.'},
    {'title': 'Organic Cotton Tote Bag', 'price': '349', 'category': 'Accessories', 'image': 'cotton-tote.jpg',
     'eco_tags': ['Organic', 'Reusable', 'Fair Trade'], 'co2_saved': '1.2', 'plastic_saved': '0.5',
     'water_saved': '0', 'green_points': 20, 'is_featured': True,
     'description': 'Sturdy everyday tote woven from certified organic cotton.'},
    {'title': 'Beeswax Food Wraps', 'price': '449', 'category': 'Kitchen', 'image': 'beeswax-wraps.jpg',
     'eco_tags': ['Plastic-Free', 'Reusable', 'Biodegradable'], 'co2_saved': '0.8', 'plastic_saved': '0.6',
     'water_saved': '0', 'green_points': 25, 'is_featured': True,
     'description': 'Washable wraps that keep food fresh without cling film.'},
    {'title': 'Portable Solar Charger', 'price': '2499', 'category': 'Electronics', 'image': 'solar-charger.jpg',
     'eco_tags': ['Renewable Energy', 'Zero Emissions'], 'co2_saved': '15', 'plastic_saved': '0',
     'water_saved': '0', 'green_points': 100, 'is_featured': True,
     'description': 'Foldable 21W panel that charges phones and tablets from sunlight.'},
    {'title': 'Recycled Paper Notebook', 'price': '199', 'category': 'Stationery', 'image': 'recycled-notebook.jpg',
     'eco_tags': ['Recycled', 'Plastic-Free'], 'co2_saved': '0.4', 'plastic_saved': '0',
     'water_saved': '10', 'green_points': 10,
     'description': 'A5 notebook made from 100% post-consumer recycled paper.'},
    {'title': 'Natural Cork Yoga Mat', 'price': '1899', 'category': 'Accessories', 'image': 'yoga-mat.jpg',
     'eco_tags': ['Biodegradable', 'Vegan'], 'co2_saved': '3', 'plastic_saved': '1.5',
     'water_saved': '0', 'green_points': 60,
     'description': 'Non-slip cork and natural rubber mat, free of PVC.'},
    {'title': 'Bamboo Cutlery Travel Kit', 'price': '399', 'category': 'Kitchen', 'image': 'bamboo-cutlery.jpg',
     'eco_tags': ['Reusable', 'Plastic-Free', 'Zero Waste'], 'co2_saved': '0.7', 'plastic_saved': '0.4',
     'water_saved': '0', 'green_points': 20,
     'description': 'Fork, knife, spoon, chopsticks and straw in a cotton pouch.'},
    {'title': 'Organic Cotton Bedding Set', 'price': '3499', 'category': 'Personal Care', 'image': 'cotton-bedding.jpg',
     'eco_tags': ['Organic', 'Fair Trade'], 'co2_saved': '6', 'plastic_saved': '0',
     'water_saved': '2000', 'green_points': 120,
     'description': 'Breathable percale sheets grown without synthetic pesticides.'},
    {'title': 'Compostable Phone Case', 'price': '799', 'category': 'Electronics', 'image': 'phone-case.jpg',
     'eco_tags': ['Biodegradable', 'Plastic-Free'], 'co2_saved': '0.9', 'plastic_saved': '0.05',
     'water_saved': '0', 'green_points': 30,
     'description': 'Plant-based phone case that breaks down in home compost.'},
    {'title': 'Reusable Coffee Cup', 'price': '549', 'category': 'Kitchen', 'image': 'coffee-cup.jpg',
     'eco_tags': ['Reusable', 'Zero Waste'], 'co2_saved': '1.1', 'plastic_saved': '0.7',
     'water_saved': '0', 'green_points': 25,
     'description': 'Leak-proof cup with a silicone lid for takeaway coffee.'},
    {'title': 'Hemp Backpack', 'price': '2199', 'category': 'Accessories', 'image': 'hemp-backpack.jpg',
     'eco_tags': ['Vegan', 'Organic'], 'co2_saved': '4', 'plastic_saved': '0',
     'water_saved': '500', 'green_points': 80,
     'description': 'Durable daypack sewn from hemp canvas.'},
    {'title': 'Plant-Based Laundry Detergent', 'price': '499', 'category': 'Personal Care', 'image': 'laundry-detergent.jpg',
     'eco_tags': ['Biodegradable', 'Vegan', 'Plastic-Free'], 'co2_saved': '1.5', 'plastic_saved': '0.3',
     'water_saved': '0', 'green_points': 30,
     'description': 'Concentrated detergent sheets in a paper sleeve.'},
    {'title': 'Solar Garden Lights', 'price': '1299', 'category': 'Electronics', 'image': 'solar-lights.jpg',
     'eco_tags': ['Renewable Energy', 'Zero Emissions'], 'co2_saved': '8', 'plastic_saved': '0',
     'water_saved': '0', 'green_points': 70,
     'description': 'Set of six stake lights that charge during the day.'},
    {'title': 'Stainless Steel Straws', 'price': '249', 'category': 'Kitchen', 'image': 'steel-straws.jpg',
     'eco_tags': ['Reusable', 'Zero Waste', 'Plastic-Free'], 'co2_saved': '0.3', 'plastic_saved': '0.25',
     'water_saved': '0', 'green_points': 10,
     'description': 'Four straws with a cleaning brush.'},
    {'title': 'Bamboo Pen Set', 'price': '179', 'category': 'Stationery', 'image': 'bamboo-pens.jpg',
     'eco_tags': ['Plastic-Free', 'Recycled'], 'co2_saved': '0.2', 'plastic_saved': '0.03',
     'water_saved': '0', 'green_points': 5,
     'description': 'Refillable ballpoint pens with bamboo barrels.'},
]


def seed_database(app=None):
    """Seed the database with sample data."""
    app = app or create_app()
    log = app.logger

    with app.app_context():
        # Create tables
        db.create_all()

        # Check if already seeded
        if User.query.filter_by(email='demo@greenshop.io').first():
            log.info('Database already seeded')
            return False

        log.info('Seeding database...')

        for product_data in PRODUCTS:
            product = Product(
                title=product_data['title'],
                description=product_data['description'],
                price=Decimal(product_data['price']),
                image=product_data['image'],
                category=product_data['category'],
                eco_tags=product_data['eco_tags'],
                vendor='GreenShop Partners',
                is_verified=True,
                is_featured=product_data.get('is_featured', False),
                is_available=True,
                green_points=product_data['green_points'],
                co2_saved=Decimal(product_data['co2_saved']),
                plastic_saved=Decimal(product_data['plastic_saved']),
                water_saved=Decimal(product_data['water_saved']),
            )
            product.generate_slug()
            db.session.add(product)

        # Demo shopper with a provisioned impact record
        demo = User(email='demo@greenshop.io', full_name='Demo Shopper')
        demo.set_password('green123')
        db.session.add(demo)
        ImpactStore().provision(demo, bonus_points=app.config['SIGNUP_BONUS_POINTS'])

        db.session.commit()
        log.info('Database seeded: %d products', len(PRODUCTS))
        log.info('Test account: demo@greenshop.io / green123')
        return True


if __name__ == '__main__':
    seed_database()
