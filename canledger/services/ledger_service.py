"""
Ledger Service
Maintains the per-customer running can balance ("holding status")

Each DailyUpdate row stores the balance after that day:

    holding[d] = holding[previous entry] + delivered[d] - collected[d]

The opening balance (no earlier entry) is 0, or the customer's baseline
can_qty when OPENING_BALANCE_FROM_CAN_QTY is enabled. Writes re-chain every
later entry of the same customer inside the same transaction, so the
relation holds across the whole history after any insert, edit or delete.
"""

import logging
from flask import current_app
from sqlalchemy import func

from canledger.errors import ValidationError, NotFoundError
from canledger.models import db, Customer, DailyUpdate, Price
from canledger.utils.cache import invalidate_dashboard
from canledger.utils.helpers import month_bounds, previous_day

logger = logging.getLogger(__name__)


def compute_holding(previous_holding, delivered_qty, collected_qty):
    """
    Holding status after one day's movement.

    Raises:
        ValidationError: If more cans are collected than the customer holds
    """
    available = previous_holding + delivered_qty
    if collected_qty > available:
        raise ValidationError(
            f'Collected quantity ({collected_qty}) exceeds cans held '
            f'({previous_holding}) plus delivered ({delivered_qty})'
        )
    return available - collected_qty


def rechain(entries, opening_holding):
    """
    Recompute holding_status for date-ordered entries starting from a balance.

    Args:
        entries: DailyUpdate rows of one customer, ascending by date
        opening_holding: Balance before the first entry

    Returns:
        int: Balance after the last entry
    """
    holding = opening_holding
    for entry in entries:
        try:
            holding = compute_holding(holding, entry.delivered_qty, entry.collected_qty)
        except ValidationError:
            raise ValidationError(
                f'Change would leave a negative can balance on {entry.date.isoformat()}'
            )
        entry.holding_status = holding
    return holding


def opening_balance(customer):
    """Balance before a customer's first ledger entry"""
    if current_app.config.get('OPENING_BALANCE_FROM_CAN_QTY'):
        return customer.can_qty or 0
    return 0


def lock_customer(customer_id):
    """Load the customer row FOR UPDATE (no-op locking on SQLite)"""
    customer = db.session.query(Customer).filter(
        Customer.id == customer_id
    ).with_for_update().first()
    if not customer:
        raise NotFoundError(f'Customer {customer_id} not found')
    return customer


def _previous_entry(customer_id, on_date):
    """Most recent entry strictly before on_date"""
    return DailyUpdate.query.filter(
        DailyUpdate.customer_id == customer_id,
        DailyUpdate.date < on_date
    ).order_by(DailyUpdate.date.desc()).first()


def _later_entries(customer_id, on_date):
    return DailyUpdate.query.filter(
        DailyUpdate.customer_id == customer_id,
        DailyUpdate.date > on_date
    ).order_by(DailyUpdate.date.asc()).all()


def previous_holding(customer, on_date):
    """Balance carried into on_date"""
    previous = _previous_entry(customer.id, on_date)
    if previous:
        return previous.holding_status
    return opening_balance(customer)


def rechain_customer(customer):
    """
    Recompute a customer's whole history from its opening balance.

    Does not commit; the caller owns the transaction.

    Raises:
        ValidationError: If any day would end with a negative balance
    """
    entries = DailyUpdate.query.filter_by(
        customer_id=customer.id
    ).order_by(DailyUpdate.date.asc()).all()
    return rechain(entries, opening_balance(customer))


def record_daily_update(customer_id, on_date, delivered_qty, collected_qty, notes=None):
    """
    Insert or overwrite the entry for (customer, date) and re-chain later days.

    Args:
        customer_id: Customer primary key
        on_date: date of the movement
        delivered_qty: Non-negative cans delivered
        collected_qty: Non-negative cans collected
        notes: Optional free text

    Returns:
        tuple: (DailyUpdate, created)
    """
    try:
        customer = lock_customer(customer_id)

        carried = previous_holding(customer, on_date)
        holding = compute_holding(carried, delivered_qty, collected_qty)

        entry = DailyUpdate.query.filter_by(customer_id=customer.id, date=on_date).first()
        created = entry is None
        if created:
            entry = DailyUpdate(customer_id=customer.id, date=on_date)
            db.session.add(entry)

        entry.delivered_qty = delivered_qty
        entry.collected_qty = collected_qty
        entry.holding_status = holding
        entry.notes = notes

        later = _later_entries(customer.id, on_date)
        rechain(later, holding)

        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    invalidate_dashboard()
    logger.info(
        f"Daily update {'created' if created else 'updated'} for customer {customer_id} "
        f"on {on_date}: holding={entry.holding_status}, re-chained {len(later)} later entries"
    )
    return entry, created


def delete_daily_update(update_id):
    """Delete one entry and re-chain the customer's later days"""
    try:
        entry = db.session.get(DailyUpdate, update_id)
        if not entry:
            raise NotFoundError(f'Daily update with ID {update_id} not found')

        customer = lock_customer(entry.customer_id)
        on_date = entry.date
        carried = previous_holding(customer, on_date)

        db.session.delete(entry)
        db.session.flush()

        rechain(_later_entries(customer.id, on_date), carried)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    invalidate_dashboard()
    logger.info(f"Daily update {update_id} deleted")


def list_daily_updates(on_date):
    """All entries recorded for a date"""
    return DailyUpdate.query.filter_by(date=on_date).order_by(DailyUpdate.customer_id).all()


def current_holding_status():
    """
    Latest holding status of every customer.

    Returns:
        list: dicts with customer fields, holding_status and the entry date
              (holding 0 and date None for customers without entries)
    """
    latest = db.session.query(
        DailyUpdate.customer_id.label('customer_id'),
        func.max(DailyUpdate.date).label('last_date')
    ).group_by(DailyUpdate.customer_id).subquery()

    rows = db.session.query(Customer, DailyUpdate).outerjoin(
        latest, latest.c.customer_id == Customer.id
    ).outerjoin(
        DailyUpdate,
        (DailyUpdate.customer_id == Customer.id) & (DailyUpdate.date == latest.c.last_date)
    ).order_by(Customer.name).all()

    return [{
        'customer_id': customer.id,
        'name': customer.name,
        'phone_number': customer.phone_number,
        'customer_type': customer.customer_type,
        'holding_status': entry.holding_status if entry else 0,
        'date': entry.date.isoformat() if entry else None,
    } for customer, entry in rows]


def next_day_collection(reference_date):
    """
    Customers holding cans at the end of the day before reference_date.

    Returns:
        list: dicts with customer_id, name, phone_number and holding_status (> 0)
    """
    day_before = previous_day(reference_date)

    rows = db.session.query(Customer, DailyUpdate).join(
        DailyUpdate, DailyUpdate.customer_id == Customer.id
    ).filter(
        DailyUpdate.date == day_before,
        DailyUpdate.holding_status > 0
    ).order_by(Customer.name).all()

    return [{
        'customer_id': customer.id,
        'name': customer.name,
        'phone_number': customer.phone_number,
        'holding_status': entry.holding_status,
    } for customer, entry in rows]


def require_active_price():
    price = Price.get_active()
    if not price:
        raise ValidationError('No active prices found')
    return price


def month_entries(customer_id, month):
    """A customer's entries within a YYYY-MM month, ascending by date"""
    first_day, last_day = month_bounds(month)
    return DailyUpdate.query.filter(
        DailyUpdate.customer_id == customer_id,
        DailyUpdate.date >= first_day,
        DailyUpdate.date <= last_day
    ).order_by(DailyUpdate.date.asc()).all()


def customer_month_entries(customer_id, month):
    """
    A customer, its unit price and its entries for one month.

    Returns:
        tuple: (customer, unit_price, entries)
    """
    price = require_active_price()
    customer = db.session.get(Customer, customer_id)
    if not customer:
        raise NotFoundError('Customer not found')

    return customer, price.price_for(customer.customer_type), month_entries(customer.id, month)


def customer_month_ledger(customer_id, month):
    """
    Ledger rows for one customer and month, each priced at the customer's rate.

    Returns:
        tuple: (customer, unit_price, rows)
    """
    customer, unit_price, entries = customer_month_entries(customer_id, month)
    rows = []
    for entry in entries:
        row = entry.to_dict()
        row['amount'] = float(entry.delivered_qty * unit_price)
        rows.append(row)
    return customer, unit_price, rows
