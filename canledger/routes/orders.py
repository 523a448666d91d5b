"""
Order Routes
One-off delivery orders and their PDF receipts
"""

from flask import Blueprint, request, jsonify, current_app, send_file
from sqlalchemy.exc import SQLAlchemyError

from canledger.errors import ValidationError, NotFoundError
from canledger.models import db, Order, ORDER_STATUSES
from canledger.services.ledger_service import require_active_price
from canledger.utils.cache import invalidate_dashboard
from canledger.utils.error_logger import log_error
from canledger.utils.helpers import (
    require_fields, parse_date, parse_optional_date, parse_quantity, parse_amount
)
from canledger.utils.pdf_utils import generate_order_receipt_pdf

bp = Blueprint('orders', __name__)

REQUIRED_ORDER_FIELDS = (
    'order_date', 'customer_name', 'customer_phone', 'customer_address',
    'can_qty', 'delivery_date', 'delivery_time', 'order_status'
)


def _get_order(order_id):
    order = db.session.get(Order, order_id)
    if not order:
        raise NotFoundError('Order not found')
    return order


def _apply_order_fields(order, data):
    """Validate a full set of order fields and copy them onto the order"""
    require_fields(data, *REQUIRED_ORDER_FIELDS)

    can_qty = parse_quantity(data['can_qty'], 'can_qty')
    if can_qty <= 0:
        raise ValidationError('Can Quantity must be greater than 0')

    collected_qty = parse_quantity(data.get('collected_qty'), 'collected_qty')
    if collected_qty > can_qty:
        raise ValidationError('Collected Quantity cannot exceed delivered quantity')

    collection_date = parse_optional_date(data.get('collection_date'), 'collection_date')
    if collected_qty > 0 and not collection_date:
        raise ValidationError('Collection Date is required if cans are collected')

    order_status = str(data['order_status']).strip().lower()
    if order_status not in ORDER_STATUSES:
        raise ValidationError(f"order_status must be one of: {', '.join(ORDER_STATUSES)}")

    order.order_date = parse_date(data['order_date'], 'order_date')
    order.customer_name = str(data['customer_name']).strip()
    order.customer_phone = str(data['customer_phone']).strip()
    order.customer_address = str(data['customer_address']).strip()
    order.delivery_amount = parse_amount(data.get('delivery_amount'), 'delivery_amount', default=0)
    order.can_qty = can_qty
    order.collected_qty = collected_qty
    order.collection_date = collection_date
    order.delivery_date = parse_date(data['delivery_date'], 'delivery_date')
    order.delivery_time = str(data['delivery_time']).strip()
    order.order_status = order_status
    order.notes = (data.get('notes') or '').strip() or None


@bp.route('/', methods=['GET'])
def index():
    """List orders, newest first, optionally filtered by status"""
    query = Order.query
    status = request.args.get('status', '').strip()
    if status:
        query = query.filter(Order.order_status == status)
    orders = query.order_by(Order.order_date.desc(), Order.id.desc()).all()
    return jsonify([o.to_dict() for o in orders])


@bp.route('/<int:order_id>', methods=['GET'])
def view_order(order_id):
    return jsonify(_get_order(order_id).to_dict())


@bp.route('/', methods=['POST'])
def create_order():
    """Create a new order"""
    data = request.get_json(silent=True) or {}

    order = Order()
    _apply_order_fields(order, data)

    try:
        db.session.add(order)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error creating order: {e}")
        log_error(e)
        return jsonify({'error': 'Failed to create order'}), 500

    invalidate_dashboard()
    return jsonify(order.to_dict()), 201


@bp.route('/<int:order_id>', methods=['PUT'])
def update_order(order_id):
    """Update an order; fields missing from the body keep their current value"""
    order = _get_order(order_id)
    data = dict(order.to_dict(), **(request.get_json(silent=True) or {}))
    _apply_order_fields(order, data)

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating order with ID {order_id}: {e}")
        log_error(e)
        return jsonify({'error': 'Failed to update order'}), 500

    invalidate_dashboard()
    return jsonify(order.to_dict())


@bp.route('/<int:order_id>', methods=['DELETE'])
def delete_order(order_id):
    """Delete an order"""
    order = _get_order(order_id)

    try:
        db.session.delete(order)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error deleting order with ID {order_id}: {e}")
        log_error(e)
        return jsonify({'error': 'Failed to delete order'}), 500

    invalidate_dashboard()
    return jsonify({'message': f'Order with ID {order_id} deleted successfully'})


@bp.route('/<int:order_id>/receipt', methods=['GET'])
def order_receipt(order_id):
    """PDF receipt priced at the active order price"""
    order = _get_order(order_id)
    price = require_active_price()

    pdf = generate_order_receipt_pdf(order, price.price_for('order'))
    safe_name = ''.join(ch for ch in order.customer_name if ch.isalnum() or ch == ' ').strip().replace(' ', '-')
    return send_file(
        pdf,
        mimetype='application/pdf',
        as_attachment=request.args.get('download', '1') != '0',
        download_name=f'order-receipt-{safe_name or order.id}.pdf'
    )
