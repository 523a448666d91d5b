"""
Customer Management Routes
Handles customer create, read and update (customers are never hard-deleted)
"""

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from canledger.errors import ValidationError, NotFoundError
from canledger.models import db, Customer, CUSTOMER_TYPES
from canledger.services import ledger_service
from canledger.utils.cache import invalidate_dashboard
from canledger.utils.error_logger import log_error
from canledger.utils.helpers import require_fields, parse_quantity, parse_amount

bp = Blueprint('customers', __name__)


def _apply_customer_fields(customer, data):
    """Validate request data and copy it onto a customer"""
    require_fields(data, 'name', 'phone_number', 'address', 'customer_type')

    customer_type = str(data['customer_type']).strip().lower()
    if customer_type not in CUSTOMER_TYPES:
        raise ValidationError(f"customer_type must be one of: {', '.join(CUSTOMER_TYPES)}")

    customer.name = str(data['name']).strip()
    customer.phone_number = str(data['phone_number']).strip()
    customer.alternate_number = (str(data.get('alternate_number') or '').strip() or None)
    customer.address = str(data['address']).strip()
    customer.customer_type = customer_type
    customer.can_qty = parse_quantity(data.get('can_qty'), 'can_qty')
    customer.advance_amount = parse_amount(data.get('advance_amount'), 'advance_amount', default=0)


@bp.route('/', methods=['GET'])
def index():
    """List customers, optionally filtered by type or search text"""
    query = Customer.query

    customer_type = request.args.get('customer_type', '').strip()
    if customer_type:
        query = query.filter(Customer.customer_type == customer_type)

    search = request.args.get('search', '').strip()
    if search:
        query = query.filter(
            db.or_(
                Customer.name.ilike(f'%{search}%'),
                Customer.phone_number.ilike(f'%{search}%'),
                Customer.address.ilike(f'%{search}%')
            )
        )

    customers = query.order_by(Customer.name).all()
    return jsonify([c.to_dict() for c in customers])


@bp.route('/<int:customer_id>', methods=['GET'])
def view_customer(customer_id):
    """Get one customer"""
    customer = db.session.get(Customer, customer_id)
    if not customer:
        raise NotFoundError('Customer not found')
    return jsonify(customer.to_dict())


@bp.route('/', methods=['POST'])
def add_customer():
    """Add new customer"""
    data = request.get_json(silent=True) or {}

    customer = Customer()
    _apply_customer_fields(customer, data)

    try:
        db.session.add(customer)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error adding customer: {e}")
        log_error(e)
        return jsonify({'error': 'Failed to add customer'}), 500

    invalidate_dashboard()
    current_app.logger.info(f"Customer {customer.name} added (id={customer.id})")
    return jsonify({
        'message': 'Customer added successfully',
        'customer_id': customer.id,
        'customer': customer.to_dict()
    }), 201


@bp.route('/<int:customer_id>', methods=['PUT'])
def edit_customer(customer_id):
    """Update an existing customer"""
    customer = ledger_service.lock_customer(customer_id)
    previous_can_qty = customer.can_qty

    data = request.get_json(silent=True) or {}
    _apply_customer_fields(customer, data)

    # can_qty is the opening balance when the flag is on
    if current_app.config.get('OPENING_BALANCE_FROM_CAN_QTY') and customer.can_qty != previous_can_qty:
        ledger_service.rechain_customer(customer)

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Error updating customer {customer_id}: {e}")
        log_error(e)
        return jsonify({'error': 'Failed to update customer'}), 500

    invalidate_dashboard()
    return jsonify({
        'message': 'Customer updated successfully',
        'customer_id': customer.id,
        'customer': customer.to_dict()
    })
