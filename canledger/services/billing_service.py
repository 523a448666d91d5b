"""
Billing Service
Rolls ledger entries up into monthly bills and persists bill batches
"""

import logging
from collections import OrderedDict

from canledger.errors import ValidationError, NotFoundError
from canledger.models import db, Customer, DailyUpdate, MonthlyBill
from canledger.services.ledger_service import require_active_price
from canledger.utils.helpers import (
    month_bounds, parse_month, parse_quantity, parse_amount, parse_bool, parse_id
)

logger = logging.getLogger(__name__)

REQUIRED_BILL_FIELDS = ('customer_id', 'bill_month', 'bill_amount', 'total_cans', 'delivery_days')


def summarize_entries(entries):
    """
    Total cans delivered and number of delivery days.

    Args:
        entries: Iterable of objects with date and delivered_qty

    Returns:
        tuple: (total_cans, delivery_days)
    """
    total = 0
    days = set()
    for entry in entries:
        total += entry.delivered_qty or 0
        if (entry.delivered_qty or 0) > 0:
            days.add(entry.date)
    return total, len(days)


def build_monthly_bill(customer, entries, price, month, saved_bill=None):
    """
    Bill figures for one customer; a pure function of its ledger rows.

    Returns:
        dict: Bill row as returned by the monthly-bills endpoint
    """
    total_cans, delivery_days = summarize_entries(entries)
    unit_price = price.price_for(customer.customer_type)
    return {
        'customer_id': customer.id,
        'name': customer.name,
        'phone_number': customer.phone_number,
        'customer_type': customer.customer_type,
        'bill_month': month,
        'total_cans_delivered': total_cans,
        'total_delivery_days': delivery_days,
        'price_per_can': float(unit_price),
        'bill_amount': float(unit_price * total_cans),
        'paid_status': bool(saved_bill.paid_status) if saved_bill else False,
        'sent_status': bool(saved_bill.sent_status) if saved_bill else False,
    }


def monthly_bills(month):
    """
    Monthly aggregation for every customer with deliveries in the month.

    Customers with zero delivered cans are omitted; rows are ordered by name.
    """
    month = parse_month(month)
    price = require_active_price()
    first_day, last_day = month_bounds(month)

    rows = db.session.query(Customer, DailyUpdate).join(
        DailyUpdate, DailyUpdate.customer_id == Customer.id
    ).filter(
        DailyUpdate.date >= first_day,
        DailyUpdate.date <= last_day
    ).order_by(Customer.name, Customer.id, DailyUpdate.date).all()

    grouped = OrderedDict()
    for customer, entry in rows:
        grouped.setdefault(customer.id, (customer, []))[1].append(entry)

    saved = {
        bill.customer_id: bill
        for bill in MonthlyBill.query.filter_by(bill_month=month).all()
    }

    bills = []
    for customer_id, (customer, entries) in grouped.items():
        bill = build_monthly_bill(customer, entries, price, month, saved.get(customer_id))
        if bill['total_cans_delivered'] > 0:
            bills.append(bill)
    return bills


def validate_bills(bills):
    """
    Validate a whole batch before anything is written.

    Returns:
        list: Normalized bill dicts

    Raises:
        ValidationError: If the batch is empty or any bill misses a field
        NotFoundError: If a bill references an unknown customer
    """
    if not bills or not isinstance(bills, list):
        raise ValidationError('No bills data provided.')

    normalized = []
    for bill in bills:
        if not isinstance(bill, dict):
            raise ValidationError('Each bill must be an object.')
        missing = [f for f in REQUIRED_BILL_FIELDS if bill.get(f) in (None, '')]
        if missing:
            raise ValidationError(
                f"Missing required bill data ({', '.join(missing)}) for customer_id: "
                f"{bill.get('customer_id')}, month: {bill.get('bill_month')}."
            )
        normalized.append({
            'customer_id': parse_id(bill['customer_id']),
            'bill_month': parse_month(bill['bill_month'], 'bill_month'),
            'bill_amount': parse_amount(bill['bill_amount'], 'bill_amount'),
            'total_cans': parse_quantity(bill['total_cans'], 'total_cans'),
            'delivery_days': parse_quantity(bill['delivery_days'], 'delivery_days'),
            'paid_status': parse_bool(bill.get('paid_status', False)),
            'sent_status': parse_bool(bill.get('sent_status', False)),
        })

    customer_ids = {b['customer_id'] for b in normalized}
    known = {
        row.id for row in db.session.query(Customer.id).filter(Customer.id.in_(customer_ids)).all()
    }
    unknown = sorted(customer_ids - known)
    if unknown:
        raise NotFoundError(f"Customer not found: {', '.join(str(c) for c in unknown)}")

    return normalized


def save_monthly_bills(bills):
    """
    Upsert a batch of bills keyed by (customer, month) in one transaction.

    Returns:
        int: Number of bills written
    """
    normalized = validate_bills(bills)

    try:
        for data in normalized:
            bill = MonthlyBill.query.filter_by(
                customer_id=data['customer_id'],
                bill_month=data['bill_month']
            ).first()
            if bill is None:
                bill = MonthlyBill(customer_id=data['customer_id'], bill_month=data['bill_month'])
                db.session.add(bill)
            bill.bill_amount = data['bill_amount']
            bill.total_cans = data['total_cans']
            bill.delivery_days = data['delivery_days']
            bill.paid_status = data['paid_status']
            bill.sent_status = data['sent_status']
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(f"Saved {len(normalized)} monthly bills")
    return len(normalized)


def saved_bills(month):
    """Persisted bills for a month, ordered by customer name"""
    month = parse_month(month)
    return MonthlyBill.query.join(Customer).filter(
        MonthlyBill.bill_month == month
    ).order_by(Customer.name).all()

