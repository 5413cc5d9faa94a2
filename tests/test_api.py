"""
HTTP tests for the order, coupon and analytics endpoints
"""
from decimal import Decimal
from unittest.mock import patch

import pytest

from apps.coupons.models import Coupon
from apps.orders.models import Order
from tests.factories import CouponFactory, OrderFactory, ProductFactory

pytestmark = pytest.mark.django_db


def order_payload(customer_info, product, quantity=2, **extra):
    payload = {
        'customer_info': customer_info,
        'items': [{'product_id': product.pk, 'quantity': quantity}],
        'delivery_area': 'inside_zone',
    }
    payload.update(extra)
    return payload


class TestOrderEndpoints:

    def test_guest_checkout(self, api_client, customer_info, sample_product):
        response = api_client.post('/api/orders/create', order_payload(customer_info, sample_product), format='json')

        assert response.status_code == 201
        body = response.json()
        assert body['code'] == 201
        assert Decimal(str(body['data']['subtotal'])) == Decimal('160.00')
        assert Decimal(str(body['data']['total_amount'])) == Decimal('220.00')
        assert body['data']['user'] is None
        assert len(body['data']['items']) == 1

    def test_checkout_with_coupon(self, api_client, customer, customer_info, sample_product):
        CouponFactory(code='WELCOME', discount_percentage=Decimal('25'))
        api_client.force_authenticate(user=customer)

        response = api_client.post(
            '/api/orders/create',
            order_payload(customer_info, sample_product, coupon_code='welcome'),
            format='json',
        )

        assert response.status_code == 201
        data = response.json()['data']
        assert data['coupon_code'] == 'WELCOME'
        assert Decimal(str(data['discount_amount'])) == Decimal('40.00')
        assert data['user'] == customer.pk

    def test_invalid_payload(self, api_client, customer_info, sample_product):
        payload = order_payload(customer_info, sample_product, quantity=0)
        response = api_client.post('/api/orders/create', payload, format='json')

        assert response.status_code == 400
        assert 'items' in response.json()['errors']

    def test_unknown_product_is_validation_error(self, api_client, customer_info):
        payload = {
            'customer_info': customer_info,
            'items': [{'product_id': 424242, 'quantity': 1}],
        }
        response = api_client.post('/api/orders/create', payload, format='json')

        assert response.status_code == 400
        assert response.json()['errors']['type'] == 'validation_error'

    def test_out_of_stock(self, api_client, customer_info):
        product = ProductFactory(inventory=1)
        response = api_client.post('/api/orders/create', order_payload(customer_info, product, 2), format='json')

        assert response.status_code == 400
        assert response.json()['errors']['type'] == 'insufficient_stock'
        assert not Order.objects.exists()

    def test_exhausted_coupon_is_conflict(self, api_client, customer_info, sample_product):
        CouponFactory(code='SOLDOUT', usage_limit=1, used_count=1)
        response = api_client.post(
            '/api/orders/create',
            order_payload(customer_info, sample_product, coupon_code='SOLDOUT'),
            format='json',
        )

        assert response.status_code == 409
        assert response.json()['errors']['type'] == 'coupon_exhausted'

    def test_store_timeout_is_retryable(self, api_client, customer_info, sample_product):
        from django.db import OperationalError
        with patch('apps.orders.services.order_service.PricingService.price_cart',
                   side_effect=OperationalError('database is locked')):
            response = api_client.post(
                '/api/orders/create', order_payload(customer_info, sample_product), format='json',
            )

        assert response.status_code == 503
        assert response['Retry-After']
        assert response.json()['errors']['type'] == 'unavailable'

    def test_my_orders_requires_login(self, api_client):
        assert api_client.get('/api/orders/my').status_code == 401

    def test_my_orders(self, api_client, customer, customer_info, sample_product):
        api_client.force_authenticate(user=customer)
        api_client.post('/api/orders/create', order_payload(customer_info, sample_product), format='json')
        OrderFactory()

        response = api_client.get('/api/orders/my')

        assert response.status_code == 200
        assert len(response.json()['data']) == 1


class TestAdminOrderEndpoints:

    def test_requires_staff(self, api_client, customer):
        api_client.force_authenticate(user=customer)
        assert api_client.get('/api/orders/admin/all').status_code == 403

    def test_list_and_detail(self, staff_client):
        order = OrderFactory(shipping_name='Tanvir Hasan')
        OrderFactory(shipping_name='Someone Else')

        response = staff_client.get('/api/orders/admin/all', {'search': 'tanvir'})
        body = response.json()['data']
        assert body['pagination']['total'] == 1
        assert body['orders'][0]['order_number'] == order.order_number

        response = staff_client.get(f'/api/orders/admin/{order.pk}')
        assert response.status_code == 200
        assert response.json()['data']['shipping_name'] == 'Tanvir Hasan'

    def test_missing_order(self, staff_client):
        response = staff_client.get('/api/orders/admin/999999')
        assert response.status_code == 404

    def test_status_flow(self, staff_client):
        order = OrderFactory()
        url = f'/api/orders/admin/{order.pk}/status'

        assert staff_client.put(url, {'status': 'shipping'}, format='json').status_code == 200
        assert staff_client.put(url, {'status': 'delivered'}, format='json').status_code == 200

        response = staff_client.put(url, {'status': 'pending'}, format='json')
        assert response.status_code == 409
        assert response.json()['errors']['type'] == 'invalid_transition'
        order.refresh_from_db()
        assert order.fulfillment_status == 'delivered'

    def test_payment_and_refund(self, staff_client):
        order = OrderFactory()
        staff_client.put(f'/api/orders/admin/{order.pk}/payment-status', {'payment_status': 'paid'}, format='json')

        url = f'/api/orders/admin/{order.pk}/refund'
        response = staff_client.post(url, {'amount': '120.00', 'reason': 'Wrong size'}, format='json')
        assert response.status_code == 200
        assert response.json()['data']['payment_status'] == 'refunded'

        # A repeated refund request succeeds without changing anything
        response = staff_client.post(url, {'amount': '50.00'}, format='json')
        assert response.status_code == 200
        assert Decimal(str(response.json()['data']['refund_amount'])) == Decimal('120.00')

    def test_invoice(self, staff_client):
        order = OrderFactory()
        response = staff_client.get(f'/api/orders/admin/{order.pk}/invoice')
        data = response.json()['data']
        assert data['order_number'] == order.order_number
        assert Decimal(str(data['total_amount'])) == Decimal('500.00')


class TestCouponEndpoints:

    def test_validate(self, api_client):
        CouponFactory(code='TAKA50', discount_percentage=None, discount_amount=Decimal('50'))
        response = api_client.post('/api/coupons/validate', {'code': 'taka50', 'subtotal': '300.00'}, format='json')

        assert response.status_code == 200
        assert Decimal(str(response.json()['data']['discount'])) == Decimal('50.00')

    def test_validate_unknown(self, api_client):
        response = api_client.post('/api/coupons/validate', {'code': 'NOPE', 'subtotal': '300.00'}, format='json')
        assert response.status_code == 404

    def test_validate_below_minimum(self, api_client):
        CouponFactory(code='MIN1000', min_purchase_amount=Decimal('1000'))
        response = api_client.post('/api/coupons/validate', {'code': 'MIN1000', 'subtotal': '300.00'}, format='json')
        assert response.status_code == 400
        assert response.json()['errors']['type'] == 'coupon_invalid'

    def test_redeem_on_own_order(self, api_client, customer, customer_info, sample_product):
        CouponFactory(code='LATER', discount_percentage=Decimal('10'))
        api_client.force_authenticate(user=customer)
        created = api_client.post('/api/orders/create', order_payload(customer_info, sample_product), format='json')
        order_id = created.json()['data']['id']

        response = api_client.post('/api/coupons/redeem', {'code': 'LATER', 'order_id': order_id}, format='json')

        assert response.status_code == 200
        data = response.json()['data']
        assert Decimal(str(data['discount_amount'])) == Decimal('16.00')
        assert data['coupon_usage']['user'] == customer.pk
        assert data['coupon_usage']['order_number'] == data['order_number']
        assert Coupon.objects.get(code='LATER').used_count == 1

    def test_redeem_on_guest_order_is_not_found(self, api_client, customer, customer_info, sample_product):
        CouponFactory(code='FLAT50', discount_percentage=None, discount_amount=Decimal('50'))
        created = api_client.post('/api/orders/create', order_payload(customer_info, sample_product), format='json')
        order_id = created.json()['data']['id']

        api_client.force_authenticate(user=customer)
        response = api_client.post('/api/coupons/redeem', {'code': 'FLAT50', 'order_id': order_id}, format='json')

        assert response.status_code == 404
        order = Order.objects.get(pk=order_id)
        assert order.total_amount == Decimal('220.00')
        assert order.coupon_id is None
        assert Coupon.objects.get(code='FLAT50').used_count == 0

    def test_admin_crud(self, staff_client):
        response = staff_client.post(
            '/api/coupons/', {'code': 'new-year', 'discount_percentage': '15', 'usage_limit': 100}, format='json',
        )
        assert response.status_code == 201
        coupon_id = response.json()['data']['id']
        assert response.json()['data']['code'] == 'NEW-YEAR'

        response = staff_client.post('/api/coupons/', {'code': 'NEW-YEAR', 'discount_amount': '5'}, format='json')
        assert response.status_code == 409

        response = staff_client.put(f'/api/coupons/{coupon_id}', {'is_active': False}, format='json')
        assert response.json()['data']['is_active'] is False

        response = staff_client.get('/api/coupons/')
        assert response.json()['data']['pagination']['total'] == 1

        response = staff_client.get(f'/api/coupons/{coupon_id}')
        assert response.json()['data']['usages'] == []

        assert staff_client.delete(f'/api/coupons/{coupon_id}').status_code == 200
        assert not Coupon.objects.exists()

    def test_admin_rejects_two_modes(self, staff_client):
        response = staff_client.post(
            '/api/coupons/', {'code': 'BOTH', 'discount_percentage': '15', 'discount_amount': '5'}, format='json',
        )
        assert response.status_code == 400


class TestAnalyticsEndpoints:

    def test_requires_staff(self, api_client, customer):
        api_client.force_authenticate(user=customer)
        assert api_client.get('/api/analytics/revenue').status_code == 403

    def test_revenue(self, staff_client):
        response = staff_client.get('/api/analytics/revenue', {
            'start': '2024-01-01', 'end': '2024-01-03', 'dense': 'true',
        })
        assert response.status_code == 200
        assert [b['period'] for b in response.json()['data']['trend']] == ['2024-01-01', '2024-01-02', '2024-01-03']

    def test_bad_dates(self, staff_client):
        response = staff_client.get('/api/analytics/revenue', {'start': 'yesterday'})
        assert response.status_code == 400

    def test_bad_granularity(self, staff_client):
        response = staff_client.get('/api/analytics/revenue', {'granularity': 'hour'})
        assert response.status_code == 400

    def test_other_reports(self, staff_client):
        assert staff_client.get('/api/analytics/top-products').status_code == 200
        assert staff_client.get('/api/analytics/dashboard', {'period': 7}).status_code == 200
        response = staff_client.get('/api/analytics/inventory')
        assert response.status_code == 200
        assert 'low_stock' in response.json()['data']


def test_health_check(client):
    response = client.get('/api/health/')
    assert response.status_code == 200
    assert response.json()['status'] == 'healthy'


def test_token_login_then_my_orders(api_client, customer):
    customer.set_password('s3cret-pass')
    customer.save()

    response = api_client.post(
        '/api/auth/token/', {'username': customer.username, 'password': 's3cret-pass'}, format='json',
    )
    assert response.status_code == 200

    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.json()['access']}")
    assert api_client.get('/api/orders/my').status_code == 200
