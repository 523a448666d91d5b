"""
Tests for Customer Routes

Covers /api/customers:
1. Listing with type and search filters
2. Viewing one customer
3. Creating and updating customers with validation

Run with: pytest tests/test_customers_routes.py -v
"""

import pytest

from canledger.models import db, Customer, DailyUpdate
from conftest import post_update


def _payload(**overrides):
    data = {
        'name': 'Farhan Ali',
        'phone_number': '9876511111',
        'address': '7 Gandhi Chowk',
        'customer_type': 'shop',
        'can_qty': 4,
        'advance_amount': '250.50',
    }
    data.update(overrides)
    return data


class TestCustomerList:
    """Tests for GET /api/customers"""

    def test_list_all_ordered_by_name(self, client, init_database):
        """All customers are returned alphabetically"""
        response = client.get('/api/customers')
        assert response.status_code == 200
        names = [c['name'] for c in response.get_json()]
        assert names == ['Asha Traders', 'Bharat Sharma', 'Chetan Rao', 'Devika']

    def test_filter_by_type(self, client, init_database):
        """customer_type narrows the list"""
        response = client.get('/api/customers?customer_type=monthly')
        names = [c['name'] for c in response.get_json()]
        assert names == ['Bharat Sharma', 'Chetan Rao']

    def test_search_by_phone(self, client, init_database):
        """search matches phone numbers"""
        response = client.get('/api/customers?search=500004')
        customers = response.get_json()
        assert len(customers) == 1
        assert customers[0]['name'] == 'Devika'

    def test_list_empty(self, client):
        """An empty database returns an empty list"""
        response = client.get('/api/customers')
        assert response.status_code == 200
        assert response.get_json() == []


class TestCustomerView:
    """Tests for GET /api/customers/<id>"""

    def test_view_customer(self, client, init_database):
        """A customer is returned with its fields"""
        response = client.get(f"/api/customers/{init_database['monthly']}")
        assert response.status_code == 200
        data = response.get_json()
        assert data['customer_id'] == init_database['monthly']
        assert data['alternate_number'] == '9876500099'
        assert data['advance_amount'] == 500.0

    def test_view_missing(self, client, init_database):
        """Unknown ids return 404"""
        response = client.get('/api/customers/9999')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'Customer not found'


class TestCustomerCreate:
    """Tests for POST /api/customers"""

    def test_create_customer(self, client, init_database):
        """A valid payload creates a customer"""
        response = client.post('/api/customers', json=_payload())
        assert response.status_code == 201
        data = response.get_json()
        assert data['message'] == 'Customer added successfully'

        customer = db.session.get(Customer, data['customer_id'])
        assert customer.name == 'Farhan Ali'
        assert customer.can_qty == 4
        assert float(customer.advance_amount) == 250.5

    @pytest.mark.parametrize('field', ['name', 'phone_number', 'address', 'customer_type'])
    def test_required_fields(self, client, init_database, field):
        """Each required field is enforced"""
        response = client.post('/api/customers', json=_payload(**{field: ''}))
        assert response.status_code == 400
        assert field in response.get_json()['error']

    def test_invalid_type(self, client, init_database):
        """Only shop, monthly and order types are accepted"""
        response = client.post('/api/customers', json=_payload(customer_type='wholesale'))
        assert response.status_code == 400

    def test_negative_can_qty(self, client, init_database):
        """can_qty cannot be negative"""
        response = client.post('/api/customers', json=_payload(can_qty=-2))
        assert response.status_code == 400


class TestCustomerUpdate:
    """Tests for PUT /api/customers/<id>"""

    def test_update_customer(self, client, init_database):
        """Fields are replaced by the payload"""
        response = client.put(
            f"/api/customers/{init_database['shop']}",
            json=_payload(name='Asha Traders & Sons', customer_type='monthly')
        )
        assert response.status_code == 200
        assert response.get_json()['customer']['customer_type'] == 'monthly'

        customer = db.session.get(Customer, init_database['shop'])
        assert customer.name == 'Asha Traders & Sons'

    def test_update_missing(self, client, init_database):
        """Updating an unknown id returns 404"""
        response = client.put('/api/customers/9999', json=_payload())
        assert response.status_code == 404

    def test_no_delete_route(self, client, init_database):
        """Customers cannot be deleted through the API"""
        response = client.delete(f"/api/customers/{init_database['shop']}")
        assert response.status_code == 405


class TestCustomerOpeningBalance:
    """Tests for can_qty edits when it seeds the opening balance"""

    def _holdings(self, customer_id):
        rows = DailyUpdate.query.filter_by(customer_id=customer_id).order_by(DailyUpdate.date).all()
        return [(r.date.isoformat(), r.holding_status) for r in rows]

    def _edit_baseline(self, client, customer_id, can_qty):
        return client.put(f'/api/customers/{customer_id}', json=_payload(
            name='Chetan Rao', phone_number='9876500003', address='88 Nai Abadi',
            customer_type='monthly', can_qty=can_qty, advance_amount=0
        ))

    def test_can_qty_edit_rechains_ledger(self, fresh_app, client, init_database):
        """Changing can_qty shifts every stored holding by the difference"""
        fresh_app.config['OPENING_BALANCE_FROM_CAN_QTY'] = True
        customer_id = init_database['baseline']
        post_update(client, customer_id, '2024-05-01', delivered=2)
        post_update(client, customer_id, '2024-05-02', delivered=1)
        assert self._holdings(customer_id) == [('2024-05-01', 5), ('2024-05-02', 6)]

        response = self._edit_baseline(client, customer_id, 10)
        assert response.status_code == 200
        assert self._holdings(customer_id) == [('2024-05-01', 12), ('2024-05-02', 13)]

    def test_can_qty_edit_that_breaks_ledger_is_rejected(self, fresh_app, client, init_database):
        """Lowering can_qty below what was already collected changes nothing"""
        fresh_app.config['OPENING_BALANCE_FROM_CAN_QTY'] = True
        customer_id = init_database['baseline']
        post_update(client, customer_id, '2024-05-01', collected=3)

        response = self._edit_baseline(client, customer_id, 1)
        assert response.status_code == 400
        assert '2024-05-01' in response.get_json()['error']

        assert db.session.get(Customer, customer_id).can_qty == 3
        assert self._holdings(customer_id) == [('2024-05-01', 0)]

    def test_can_qty_edit_ignored_without_flag(self, client, init_database):
        """With the flag off stored holdings do not depend on can_qty"""
        customer_id = init_database['baseline']
        post_update(client, customer_id, '2024-05-01', delivered=2)

        response = self._edit_baseline(client, customer_id, 10)
        assert response.status_code == 200
        assert self._holdings(customer_id) == [('2024-05-01', 2)]
