"""
Daily Update Routes
Record deliveries/collections per customer per day and query the can ledger
"""

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from canledger.errors import ValidationError
from canledger.services import ledger_service, billing_service
from canledger.utils.error_logger import log_error
from canledger.utils.helpers import parse_date, parse_month, parse_quantity, parse_id

bp = Blueprint('daily_updates', __name__)

# Older web screens read next-day collections from /api/daily-can-status
status_bp = Blueprint('daily_can_status', __name__)


@bp.route('/', methods=['GET'])
def index():
    """Entries recorded for a date"""
    if not request.args.get('date'):
        raise ValidationError('Date parameter is required')
    on_date = parse_date(request.args.get('date'))

    entries = ledger_service.list_daily_updates(on_date)
    return jsonify([e.to_dict() for e in entries])


@bp.route('/', methods=['POST'])
def save_daily_update():
    """Record a day's delivery/collection (update in place if the day exists)"""
    data = request.get_json(silent=True) or {}

    if data.get('customer_id') in (None, '') or not data.get('date'):
        raise ValidationError('Customer ID and date are required')

    customer_id = parse_id(data['customer_id'])
    on_date = parse_date(data['date'])
    delivered_qty = parse_quantity(data.get('delivered_qty'), 'delivered_qty')
    collected_qty = parse_quantity(data.get('collected_qty'), 'collected_qty')
    notes = (data.get('notes') or '').strip() or None

    try:
        entry, created = ledger_service.record_daily_update(
            customer_id, on_date, delivered_qty, collected_qty, notes
        )
    except SQLAlchemyError as e:
        current_app.logger.error(f"Error saving/updating daily update: {e}")
        log_error(e)
        return jsonify({'error': 'Failed to save/update daily update'}), 500

    if created:
        return jsonify(entry.to_dict()), 201
    return jsonify({
        'message': f'Daily update for customer {customer_id} on {on_date.isoformat()} updated successfully',
        'update': entry.to_dict()
    })


@bp.route('/current-status', methods=['GET'])
def current_status():
    """Latest holding status for all customers"""
    return jsonify(ledger_service.current_holding_status())


@bp.route('/next-collection', methods=['GET'])
@status_bp.route('/next-collection', methods=['GET'])
def next_collection():
    """Customers with cans outstanding at the end of the previous day"""
    if not request.args.get('date'):
        raise ValidationError('Date parameter is required')
    on_date = parse_date(request.args.get('date'))
    return jsonify(ledger_service.next_day_collection(on_date))


@bp.route('/<int:update_id>', methods=['DELETE'])
def delete_daily_update(update_id):
    """Delete an entry; later entries of the customer are re-chained"""
    try:
        ledger_service.delete_daily_update(update_id)
    except SQLAlchemyError as e:
        current_app.logger.error(f"Error deleting daily update with ID {update_id}: {e}")
        log_error(e)
        return jsonify({'error': 'Failed to delete daily update'}), 500

    return jsonify({'message': f'Daily update with ID {update_id} deleted successfully'})


@bp.route('/ledger', methods=['GET'])
def customer_ledger():
    """A customer's entries for a month, each priced at the customer's rate"""
    if not request.args.get('customer_id') or not request.args.get('month'):
        raise ValidationError('Customer ID and month are required')

    customer_id = parse_id(request.args.get('customer_id'))
    month = parse_month(request.args.get('month'))

    _, _, rows = ledger_service.customer_month_ledger(customer_id, month)
    return jsonify(rows)


@bp.route('/monthly-bills', methods=['GET'])
def monthly_bills():
    """Monthly billing summary computed from the ledger"""
    month = parse_month(request.args.get('month'))
    return jsonify(billing_service.monthly_bills(month))
