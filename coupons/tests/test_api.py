from datetime import timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from tests.factories import make_coupon, make_user
from coupons.models import Coupon, CouponUsage


class ValidateCouponApiTests(APITestCase):
    url = '/coupons/validate/'

    def setUp(self):
        self.user = make_user('buyer')
        self.client.force_authenticate(self.user)

    def test_valid_coupon(self):
        make_coupon(code='SUMMER20', value='20', description='Summer sale')
        response = self.client.post(self.url, {'code': 'summer20', 'cartTotal': '100.00'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        coupon = response.data['coupon']
        self.assertEqual(coupon['code'], 'SUMMER20')
        self.assertEqual(coupon['type'], 'percentage')
        self.assertEqual(coupon['value'], Decimal('20'))
        self.assertEqual(coupon['discount'], Decimal('20.00'))
        self.assertEqual(coupon['description'], 'Summer sale')
        self.assertFalse(CouponUsage.objects.exists())

    def test_expired_coupon(self):
        now = timezone.now()
        make_coupon(startDate=now - timedelta(days=5), endDate=now - timedelta(days=1))
        response = self.client.post(self.url, {'code': 'SAVE10', 'cartTotal': '100'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['code'], 'coupon_expired')

    def test_minimum_purchase_message(self):
        make_coupon(minPurchase='75')
        response = self.client.post(self.url, {'code': 'SAVE10', 'cartTotal': '20'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'minimum_purchase_not_met')
        self.assertIn('75.00', response.data['message'])

    def test_user_limit(self):
        coupon = make_coupon(userLimit=1)
        CouponUsage.objects.create(coupon=coupon, user=self.user)
        response = self.client.post(self.url, {'code': 'SAVE10', 'cartTotal': '100'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'user_limit_reached')

    def test_unknown_code(self):
        response = self.client.post(self.url, {'code': 'GHOST', 'cartTotal': '100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_coupon')

    def test_missing_cart_total(self):
        response = self.client.post(self.url, {'code': 'SAVE10'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('cartTotal', response.data['errors'])

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        response = self.client.post(self.url, {'code': 'SAVE10', 'cartTotal': '100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class CouponAdminApiTests(APITestCase):
    def setUp(self):
        self.admin = make_user('admin', role='admin')
        self.customer = make_user('customer')
        self.client.force_authenticate(self.admin)

    def coupon_data(self, **extra):
        now = timezone.now()
        data = {
            'code': 'welcome15',
            'type': 'percentage',
            'value': '15',
            'description': 'Welcome offer',
            'startDate': now.isoformat(),
            'endDate': (now + timedelta(days=7)).isoformat(),
        }
        data.update(extra)
        return data

    def test_create_normalizes_code(self):
        response = self.client.post('/coupons/', self.coupon_data(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        coupon = Coupon.objects.get()
        self.assertEqual(coupon.code, 'WELCOME15')
        self.assertEqual(coupon.createdBy, self.admin)
        self.assertEqual(response.data['usageCount'], 0)

    def test_duplicate_code_any_case(self):
        make_coupon(code='WELCOME15')
        response = self.client.post('/coupons/', self.coupon_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('code', response.data['errors'])

    def test_percentage_above_hundred_rejected(self):
        response = self.client.post('/coupons/', self.coupon_data(value='120'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('value', response.data['errors'])

    def test_end_before_start_rejected(self):
        now = timezone.now()
        data = self.coupon_data(startDate=now.isoformat(), endDate=(now - timedelta(days=1)).isoformat())
        response = self.client.post('/coupons/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('endDate', response.data['errors'])

    def test_customers_cannot_manage_coupons(self):
        self.client.force_authenticate(self.customer)
        self.assertEqual(self.client.get('/coupons/').status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.post('/coupons/', self.coupon_data(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_partial_update(self):
        coupon = make_coupon()
        response = self.client.put(f'/coupons/{coupon.pk}/', {'maxDiscount': '5.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        coupon.refresh_from_db()
        self.assertEqual(coupon.maxDiscount, Decimal('5.00'))

    def test_delete_only_deactivates(self):
        coupon = make_coupon()
        response = self.client.delete(f'/coupons/{coupon.pk}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        coupon.refresh_from_db()
        self.assertFalse(coupon.isActive)

    def test_missing_coupon(self):
        response = self.client.get('/coupons/999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['message'], 'Coupon not found')

    def test_incomplete_coupon_rejected(self):
        data = self.coupon_data()
        del data['endDate']
        response = self.client.post('/coupons/', data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('endDate', response.data['errors'])
        self.assertFalse(Coupon.objects.exists())

    def test_invalid_partial_update(self):
        coupon = make_coupon()
        response = self.client.put(f'/coupons/{coupon.pk}/', {'value': '0'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('value', response.data['errors'])

    def test_active_coupons_are_public(self):
        now = timezone.now()
        make_coupon(code='LIVE')
        make_coupon(code='OFF', isActive=False)
        make_coupon(code='OLD', startDate=now - timedelta(days=9), endDate=now - timedelta(days=2))
        self.client.force_authenticate(None)

        response = self.client.get('/coupons/active/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['code'] for c in response.data], ['LIVE'])
