"""
Price Service
Append-only unit price history with exactly one active row
"""

import logging
from datetime import datetime
from flask import current_app

from canledger.models import db, Price
from canledger.utils.helpers import parse_amount

logger = logging.getLogger(__name__)


def update_prices(shop, monthly, order):
    """
    Deactivate the current prices and insert a new active row.

    Args:
        shop, monthly, order: Unit prices per customer type

    Returns:
        Price: The new active row
    """
    shop_price = parse_amount(shop, 'shop')
    monthly_price = parse_amount(monthly, 'monthly')
    order_price = parse_amount(order, 'order')

    try:
        Price.query.filter_by(is_active=True).update({'is_active': False})
        price = Price(
            shop_price=shop_price,
            monthly_price=monthly_price,
            order_price=order_price,
            effective_from=datetime.utcnow(),
            is_active=True
        )
        db.session.add(price)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(f"Prices updated: shop={shop_price} monthly={monthly_price} order={order_price}")
    return price


def seed_default_prices():
    """
    Create the first active price row from configuration if none exists.

    Returns:
        tuple: (Price, created)
    """
    price = Price.get_active()
    if price:
        return price, False

    price = update_prices(
        current_app.config['DEFAULT_SHOP_PRICE'],
        current_app.config['DEFAULT_MONTHLY_PRICE'],
        current_app.config['DEFAULT_ORDER_PRICE'],
    )
    return price, True


def price_history():
    """All price rows, newest first"""
    return Price.query.order_by(Price.effective_from.desc(), Price.id.desc()).all()
