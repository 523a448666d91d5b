"""
Billing Routes
Save monthly bills, list saved bills, ledger PDF cards and bill exports
"""

from flask import Blueprint, request, jsonify, current_app, send_file
from sqlalchemy.exc import SQLAlchemyError

from canledger.errors import ValidationError
from canledger.models import MonthlyBill
from canledger.services import billing_service, ledger_service
from canledger.utils.error_logger import log_error
from canledger.utils.export import export_monthly_bills
from canledger.utils.helpers import parse_month, month_label, parse_id
from canledger.utils.pdf_utils import generate_ledger_pdf

bp = Blueprint('bills', __name__)


@bp.route('/save-monthly-bills', methods=['POST'])
def save_monthly_bills():
    """Upsert a batch of monthly bills in one transaction"""
    data = request.get_json(silent=True) or {}

    try:
        saved = billing_service.save_monthly_bills(data.get('bills'))
    except SQLAlchemyError as e:
        current_app.logger.error(f"Error saving bills to database: {e}")
        log_error(e)
        return jsonify({'message': 'Failed to save bills to database.', 'error': 'Database error'}), 500

    return jsonify({'message': 'Bills saved successfully!', 'saved': saved})


@bp.route('/', methods=['GET'])
def index():
    """Saved bills for a month"""
    month = parse_month(request.args.get('month'))
    bills = billing_service.saved_bills(month)
    return jsonify([
        dict(b.to_dict(), name=b.customer.name, customer_type=b.customer.customer_type)
        for b in bills
    ])


@bp.route('/ledger-pdf', methods=['GET'])
def ledger_pdf():
    """Printable monthly ledger card for one customer"""
    if not request.args.get('customer_id') or not request.args.get('month'):
        raise ValidationError('Customer ID and month are required')
    customer_id = parse_id(request.args.get('customer_id'))
    month = parse_month(request.args.get('month'))

    customer, unit_price, entries = ledger_service.customer_month_entries(customer_id, month)
    bill = MonthlyBill.query.filter_by(customer_id=customer.id, bill_month=month).first()

    pdf = generate_ledger_pdf(
        customer,
        month_label(month),
        entries,
        unit_price,
        paid_status=bool(bill and bill.paid_status)
    )
    safe_name = ''.join(ch for ch in customer.name if ch.isalnum() or ch == ' ').strip().replace(' ', '-')
    return send_file(
        pdf,
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f'ledger-{safe_name or customer.id}-{month}.pdf'
    )


@bp.route('/export', methods=['GET'])
def export_bills():
    """Monthly bill summary as Excel (default) or CSV"""
    month = parse_month(request.args.get('month'))
    format_type = request.args.get('format', 'excel').lower()
    if format_type not in ('excel', 'csv'):
        raise ValidationError("format must be 'excel' or 'csv'")

    bills = billing_service.monthly_bills(month)
    output, filename, mimetype = export_monthly_bills(bills, month, format_type)
    return send_file(output, mimetype=mimetype, as_attachment=True, download_name=filename)
