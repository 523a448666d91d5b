"""
Settings Routes
Unit price management
"""

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from canledger.models import Price
from canledger.services import price_service
from canledger.utils.error_logger import log_error

bp = Blueprint('settings', __name__)


@bp.route('/prices', methods=['GET'])
def get_prices():
    """Current active prices (list form, empty when none are set)"""
    price = Price.get_active()
    return jsonify([price.to_dict()] if price else [])


@bp.route('/prices', methods=['POST'])
def update_prices():
    """Replace the active prices; the previous row is kept as history"""
    data = request.get_json(silent=True) or {}

    try:
        price = price_service.update_prices(data.get('shop'), data.get('monthly'), data.get('order'))
    except SQLAlchemyError as e:
        current_app.logger.error(f"Error updating prices: {e}")
        log_error(e)
        return jsonify({'error': 'Failed to update prices'}), 500

    return jsonify({'message': 'Prices updated successfully', 'price': price.to_dict()})


@bp.route('/prices/history', methods=['GET'])
def prices_history():
    """Every price row, newest first"""
    return jsonify([p.to_dict() for p in price_service.price_history()])
