"""
Helper Utilities
Common parsing and formatting functions used across the application
"""

import calendar
from datetime import datetime, date, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from flask import current_app

from canledger.errors import ValidationError


DATE_FORMAT = '%Y-%m-%d'
MONTH_FORMAT = '%Y-%m'


def parse_date(value, field='date'):
    """
    Parse a YYYY-MM-DD string

    Args:
        value: Date string (a date object is passed through)
        field: Field name used in the error message

    Returns:
        date: Parsed date

    Raises:
        ValidationError: If the value is missing or malformed
    """
    if isinstance(value, date):
        return value
    if not value:
        raise ValidationError(f'{field} is required')
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f'{field} must be in YYYY-MM-DD format')


def parse_optional_date(value, field='date'):
    """Parse a YYYY-MM-DD string, returning None for empty values"""
    if value in (None, ''):
        return None
    return parse_date(value, field)


def parse_month(value, field='month'):
    """
    Validate a YYYY-MM string

    Returns:
        str: Normalized month string
    """
    if not value:
        raise ValidationError(f'{field} parameter (YYYY-MM) is required')
    try:
        return datetime.strptime(str(value).strip(), MONTH_FORMAT).strftime(MONTH_FORMAT)
    except ValueError:
        raise ValidationError(f'{field} must be in YYYY-MM format')


def month_bounds(month):
    """
    First and last day of a YYYY-MM month

    Returns:
        tuple: (first_day, last_day)
    """
    year, month_num = (int(part) for part in parse_month(month).split('-'))
    last = calendar.monthrange(year, month_num)[1]
    return date(year, month_num, 1), date(year, month_num, last)


def month_label(month):
    """'2024-05' -> 'May 2024'"""
    first_day, _ = month_bounds(month)
    return first_day.strftime('%B %Y')


def previous_day(value):
    """Day before the given date"""
    return parse_date(value) - timedelta(days=1)


def parse_id(value, field='customer_id'):
    """
    Parse a record identifier

    Accepts ints and digit strings; booleans and fractional numbers are rejected.

    Raises:
        ValidationError: If the value is not a positive whole number
    """
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer')
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f'{field} must be an integer')
        value = int(value)
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationError(f'{field} must be an integer')
    if number <= 0:
        raise ValidationError(f'{field} must be a positive integer')
    return number


def parse_quantity(value, field, default=0):
    """
    Parse a non-negative whole-number quantity

    Raises:
        ValidationError: If the value is not an integer or is negative
    """
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a whole number')
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationError(f'{field} must be a whole number')
    if number < 0:
        raise ValidationError(f'{field} cannot be negative')
    return number


def parse_amount(value, field, default=None):
    """Parse a non-negative money amount into Decimal"""
    if value is None or value == '':
        if default is None:
            raise ValidationError(f'{field} is required')
        return Decimal(str(default))
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number')
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f'{field} must be a number')
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f'{field} must be a non-negative number')
    return amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


def parse_bool(value):
    """Interpret JSON/form truthy values ('1', 'true', 1, True)"""
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def require_fields(data, *fields):
    """Raise ValidationError naming every missing field"""
    missing = [f for f in fields if data.get(f) in (None, '')]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def format_currency(amount):
    """Format amount as currency"""
    symbol = current_app.config.get('CURRENCY_SYMBOL', 'Rs.')
    return f"{symbol} {float(amount or 0):,.2f}"
