"""
Tests for Settings Routes

Covers /api/settings/prices and the price service.

Run with: pytest tests/test_settings_routes.py -v
"""

from canledger.models import Price
from canledger.services import price_service


class TestPrices:
    """Tests for price reads and updates"""

    def test_get_active_prices(self, client, init_database):
        """The active row is returned as a one-item list"""
        response = client.get('/api/settings/prices')
        assert response.status_code == 200
        prices = response.get_json()
        assert len(prices) == 1
        assert prices[0]['shop_price'] == 20.0
        assert prices[0]['monthly_price'] == 25.0
        assert prices[0]['order_price'] == 30.0

    def test_get_prices_when_none(self, client):
        """No price rows yields an empty list"""
        response = client.get('/api/settings/prices')
        assert response.status_code == 200
        assert response.get_json() == []

    def test_update_keeps_single_active_row(self, client, init_database):
        """Updating deactivates the previous row and keeps it as history"""
        response = client.post('/api/settings/prices', json={'shop': 22, 'monthly': 27, 'order': 35})
        assert response.status_code == 200
        assert response.get_json()['price']['shop_price'] == 22.0

        client.post('/api/settings/prices', json={'shop': 23, 'monthly': 28, 'order': 36})

        assert Price.query.filter_by(is_active=True).count() == 1
        assert Price.query.count() == 3
        assert client.get('/api/settings/prices').get_json()[0]['order_price'] == 36.0

    def test_price_history_newest_first(self, client, init_database):
        """History lists every row, newest first"""
        client.post('/api/settings/prices', json={'shop': 22, 'monthly': 27, 'order': 35})

        history = client.get('/api/settings/prices/history').get_json()
        assert len(history) == 2
        assert history[0]['is_active'] is True
        assert history[0]['shop_price'] == 22.0
        assert history[1]['is_active'] is False

    def test_update_requires_all_prices(self, client, init_database):
        """shop, monthly and order are all required"""
        response = client.post('/api/settings/prices', json={'shop': 22, 'monthly': 27})
        assert response.status_code == 400
        assert Price.query.count() == 1

    def test_update_rejects_negative(self, client, init_database):
        """Prices cannot be negative"""
        response = client.post('/api/settings/prices', json={'shop': -1, 'monthly': 27, 'order': 35})
        assert response.status_code == 400

    def test_new_price_applies_to_bills(self, client, init_database):
        """Monthly bills use the active price at query time"""
        client.post('/api/daily-updates', json={
            'customer_id': init_database['shop'], 'date': '2024-05-01', 'delivered_qty': 2
        })
        client.post('/api/settings/prices', json={'shop': 22, 'monthly': 27, 'order': 35})

        bills = client.get('/api/daily-updates/monthly-bills?month=2024-05').get_json()
        assert bills[0]['bill_amount'] == 44.0


class TestSeedPrices:
    """Tests for default price seeding"""

    def test_seed_creates_defaults(self, fresh_app):
        """Seeding an empty table uses configured defaults"""
        with fresh_app.app_context():
            price, created = price_service.seed_default_prices()
            assert created is True
            assert float(price.monthly_price) == fresh_app.config['DEFAULT_MONTHLY_PRICE']

    def test_seed_keeps_existing(self, fresh_app, init_database):
        """Seeding never replaces configured prices"""
        with fresh_app.app_context():
            price, created = price_service.seed_default_prices()
            assert created is False
            assert float(price.shop_price) == 20.0
            assert Price.query.count() == 1

    def test_cli_seed_prices(self, fresh_app):
        """The seed-prices command reports the active row"""
        runner = fresh_app.test_cli_runner()
        result = runner.invoke(args=['seed-prices'])
        assert result.exit_code == 0
        assert 'Created active prices' in result.output
