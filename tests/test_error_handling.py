"""
Tests for application error handling and utilities

Covers:
1. JSON error responses for domain, HTTP and unexpected errors
2. Error log persistence and request data redaction
3. Parsing helpers
4. Application factory settings

Run with: pytest tests/test_error_handling.py -v
"""

import json
import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import patch

from canledger import create_app
from canledger.errors import ValidationError
from canledger.models import ErrorLog
from canledger.utils import helpers
from canledger.utils.error_logger import _sanitize_data


class TestErrorResponses:
    """Tests for the registered error handlers"""

    def test_unknown_route_is_json_404(self, client):
        """HTTP errors are rendered as JSON"""
        response = client.get('/api/nowhere')
        assert response.status_code == 404
        assert 'error' in response.get_json()

    def test_unexpected_error_is_logged(self, client, init_database):
        """Unhandled exceptions return a generic 500 and an error log row"""
        with patch('canledger.services.ledger_service.current_holding_status',
                   side_effect=RuntimeError('boom')):
            response = client.get('/api/daily-updates/current-status?password=hunter2')

        assert response.status_code == 500
        assert response.get_json() == {'error': 'Internal server error'}

        log = ErrorLog.query.one()
        assert log.error_type == 'RuntimeError'
        assert log.error_message == 'boom'
        assert log.request_method == 'GET'
        assert log.endpoint == 'daily_updates.current_status'
        assert json.loads(log.request_data)['args']['password'] == '[REDACTED]'

    def test_health(self, client):
        """The health check answers without touching the ledger"""
        response = client.get('/health')
        assert response.status_code == 200
        assert response.get_json() == {'ok': True}

    def test_trailing_slash_is_optional(self, client, init_database):
        """Collection routes answer with or without a trailing slash"""
        assert client.get('/api/customers').status_code == 200
        assert client.get('/api/customers/').status_code == 200


class TestSanitizeData:
    """Tests for request data redaction"""

    def test_sensitive_keys_redacted(self):
        """Keys that look like secrets are masked at any depth"""
        data = _sanitize_data({'api_key': 'abc', 'nested': {'Password': 'x', 'name': 'ok'}})
        assert data == {'api_key': '[REDACTED]', 'nested': {'Password': '[REDACTED]', 'name': 'ok'}}

    def test_long_values_truncated(self):
        """Values are cut to 500 characters"""
        assert len(_sanitize_data({'notes': 'a' * 900})['notes']) == 500


class TestHelpers:
    """Tests for parsing helpers"""

    def test_parse_date(self):
        assert helpers.parse_date('2024-02-29') == date(2024, 2, 29)
        with pytest.raises(ValidationError):
            helpers.parse_date('2024-02-30')
        with pytest.raises(ValidationError):
            helpers.parse_date('')

    def test_parse_month_normalizes(self):
        """Single-digit months are zero padded"""
        assert helpers.parse_month('2024-5') == '2024-05'
        with pytest.raises(ValidationError):
            helpers.parse_month('2024-13')

    def test_month_bounds_handles_leap_years(self):
        assert helpers.month_bounds('2024-02') == (date(2024, 2, 1), date(2024, 2, 29))
        assert helpers.month_bounds('2023-02')[1] == date(2023, 2, 28)

    def test_previous_day_crosses_month(self):
        assert helpers.previous_day('2024-03-01') == date(2024, 2, 29)

    def test_parse_quantity(self):
        assert helpers.parse_quantity('7', 'qty') == 7
        assert helpers.parse_quantity(None, 'qty') == 0
        with pytest.raises(ValidationError):
            helpers.parse_quantity(-1, 'qty')

    def test_parse_amount(self):
        assert helpers.parse_amount('12.345', 'amount') == Decimal('12.35')
        assert helpers.parse_amount(None, 'amount', default=0) == Decimal('0')
        with pytest.raises(ValidationError):
            helpers.parse_amount(None, 'amount')
        with pytest.raises(ValidationError):
            helpers.parse_amount('NaN', 'amount')

    def test_parse_amount_rounds_half_up(self):
        """Money rounds half up, not to even"""
        assert helpers.parse_amount('0.125', 'amount') == Decimal('0.13')
        assert helpers.parse_amount('2.5', 'amount') == Decimal('2.50')
        assert helpers.parse_amount('12.345', 'amount') == Decimal('12.35')

    def test_parse_id(self):
        assert helpers.parse_id('7') == 7
        assert helpers.parse_id(3.0) == 3
        for value in (True, False, 1.5, 'abc', 0, -2, None):
            with pytest.raises(ValidationError):
                helpers.parse_id(value)

    def test_parse_bool(self):
        assert helpers.parse_bool('true') is True
        assert helpers.parse_bool('0') is False
        assert helpers.parse_bool(1) is True


class TestAppFactory:
    """Tests for create_app"""

    def test_production_requires_secret_key(self, monkeypatch):
        """The placeholder secret is refused in production"""
        from config import ProductionConfig
        monkeypatch.setattr(ProductionConfig, 'SECRET_KEY', 'dev-secret-key-change-in-production')
        with pytest.raises(ValueError):
            create_app('production')

    def test_testing_config(self, fresh_app):
        """Testing uses an in-memory database and no cache"""
        assert fresh_app.config['TESTING'] is True
        assert fresh_app.config['CACHE_TYPE'] == 'NullCache'
        assert fresh_app.config['RATELIMIT_ENABLED'] is False
