"""
Database Initialization Script
Run this script to create the tables and seed the default unit prices
"""

import os

from canledger import create_app
from canledger.models import db
from canledger.services.price_service import seed_default_prices


def init_database():
    """Initialize database with default data"""
    app = create_app(os.environ.get('FLASK_ENV', 'development'))

    with app.app_context():
        print("Creating database tables...")
        db.create_all()

        price, created = seed_default_prices()
        if created:
            print("✓ Default prices created")
        else:
            print("- Active prices already configured")
        print(f"  shop: {price.shop_price}  monthly: {price.monthly_price}  order: {price.order_price}")

        print("\n" + "=" * 50)
        print("Database initialization completed successfully!")
        print("=" * 50)
        print("\nUpdate prices any time with POST /api/settings/prices")


if __name__ == '__main__':
    init_database()
