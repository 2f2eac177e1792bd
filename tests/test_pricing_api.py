import json
from datetime import date, timedelta

from storefront.models.enums import MembershipTier


class TestPricingAPI:

    def test_health(self, client):
        response = client.get('/api/health')
        assert response.status_code == 200
        assert json.loads(response.data)['data']['status'] == 'ok'

    def test_anonymous_tour_price(self, client, tour):
        response = client.get(f'/api/pricing/tours/{tour.id}')
        assert response.status_code == 200
        data = json.loads(response.data)['data']

        assert data['breakdown']['finalTotal'] == 105000.0
        assert data['breakdown']['isDiscountApplied'] is False
        assert data['breakdown']['reason'] == "not a member or plan has no benefits"
        assert data['configVersion'] == 'v1'

    def test_member_tour_price_for_party(self, client, tour, make_user, auth_headers):
        user = make_user(tier=MembershipTier.PLUS, used_km=2000)

        response = client.get(f'/api/pricing/tours/{tour.id}?pax=2', headers=auth_headers(user))
        assert response.status_code == 200
        data = json.loads(response.data)['data']

        assert data['breakdown']['discountAmount'] == 6250.0
        assert data['breakdown']['finalTotal'] == 98750.0
        assert data['totalAmount'] == 197500.0

    def test_invalid_pax(self, client, tour):
        response = client.get(f'/api/pricing/tours/{tour.id}?pax=0')
        assert response.status_code == 422

    def test_unknown_tour(self, client):
        response = client.get('/api/pricing/tours/nope')
        assert response.status_code == 404

    def test_tour_catalog(self, client, tour):
        response = client.get('/api/pricing/tours')
        assert response.status_code == 200
        items = json.loads(response.data)['data']
        assert [item['tour']['id'] for item in items] == [tour.id]

    def test_space_price(self, client, space, make_user, auth_headers):
        user = make_user(tier=MembershipTier.ELITE, space_uses=3)

        response = client.get(f'/api/pricing/spaces/{space.id}', headers=auth_headers(user))
        assert response.status_code == 200
        breakdown = json.loads(response.data)['data']['breakdown']

        assert breakdown['finalPrice'] == 60000.0
        assert breakdown['remainingUses'] == 0
        assert breakdown['decorationPerk'] == 'Decoración Premium'

    def test_refund_quote(self, client):
        scheduled = (date.today() + timedelta(days=30)).isoformat()
        response = client.post('/api/pricing/refund-quote', json={
            'scheduledDate': scheduled,
            'amountPaid': 100000
        })
        assert response.status_code == 200
        data = json.loads(response.data)['data']

        assert data['percentage'] == 100
        assert data['amount'] == 100000.0
        assert data['noticeThresholdHours'] == 72

    def test_refund_quote_past_date(self, client):
        scheduled = (date.today() - timedelta(days=1)).isoformat()
        response = client.post('/api/pricing/refund-quote', json={
            'scheduledDate': scheduled,
            'amountPaid': 100000
        })
        data = json.loads(response.data)['data']
        assert data['percentage'] == 50
        assert data['amount'] == 50000.0

    def test_refund_quote_validation(self, client):
        response = client.post('/api/pricing/refund-quote', json={'amountPaid': 'lots'})
        assert response.status_code == 422
        errors = json.loads(response.data)['errors']
        assert set(errors) == {'scheduledDate', 'amountPaid'}

    def test_refund_quote_malformed_date(self, client):
        response = client.post('/api/pricing/refund-quote', json={
            'scheduledDate': '31/12/2026',
            'amountPaid': 1000
        })
        assert response.status_code == 422

    def test_stored_invalid_config_gives_support_message(self, client, tour, db):
        from storefront.models import Settings
        Settings.set_value('cancellation_hours', -1, data_type='int')

        response = client.get(f'/api/pricing/tours/{tour.id}')

        assert response.status_code == 500
        data = json.loads(response.data)
        assert data['error'] == 'CONFIGURATION_ERROR'
        assert 'contact support' in data['message']
