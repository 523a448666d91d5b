"""
Dashboard Routes
Headline counters for the dashboard screen
"""

from datetime import date
from flask import Blueprint
from sqlalchemy import func

from canledger.models import db, Customer, DailyUpdate, Order
from canledger.services.ledger_service import current_holding_status
from canledger.utils.cache import cache_dashboard

bp = Blueprint('dashboard', __name__)


@bp.route('/', methods=['GET'])
@cache_dashboard()
def index():
    """Dashboard statistics"""
    today = date.today()

    pending_orders = Order.query.filter_by(order_status='pending').count()
    monthly_customers = Customer.query.filter_by(customer_type='monthly').count()
    shop_customers = Customer.query.filter_by(customer_type='shop').count()

    delivered_today, collected_today = db.session.query(
        func.coalesce(func.sum(DailyUpdate.delivered_qty), 0),
        func.coalesce(func.sum(DailyUpdate.collected_qty), 0)
    ).filter(DailyUpdate.date == today).one()

    pending_cans = sum(row['holding_status'] for row in current_holding_status())

    return {
        'OrdersTotal': pending_orders,
        'totalMonthlyCustomers': monthly_customers,
        'shopCustomersTotal': shop_customers,
        'pendingCansTotal': pending_cans,
        'cansDeliveredToday': int(delivered_today),
        'cansCollectedToday': int(collected_today),
    }
