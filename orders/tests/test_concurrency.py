import threading
from unittest import mock

from django.db import connection
from django.test import TransactionTestCase

from tests.factories import make_coupon, make_product, make_user, order_payload
from coupons.exceptions import UsageLimitReached
from coupons.models import CouponUsage
from orders.exceptions import InsufficientStock
from orders.models import Order
from orders.services import create_order


class ConcurrentCheckoutTests(TransactionTestCase):
    """Checkouts racing on separate connections, as two requests would."""

    def setUp(self):
        patcher = mock.patch('orders.services.enqueue_order_confirmation')
        patcher.start()
        self.addCleanup(patcher.stop)

    def race(self, *attempts):
        barrier = threading.Barrier(len(attempts))
        results = []
        lock = threading.Lock()

        def run(user, payload):
            try:
                barrier.wait()
                create_order(user, payload)
                outcome = 'ok'
            except (InsufficientStock, UsageLimitReached) as e:
                outcome = type(e).__name__
            finally:
                connection.close()
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=run, args=attempt) for attempt in attempts]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)
        return sorted(results)

    def test_last_unit_sold_once(self):
        product = make_product(stock=1)
        alice, bob = make_user('alice'), make_user('bob')

        results = self.race(
            (alice, order_payload((product, 1))),
            (bob, order_payload((product, 1))),
        )

        self.assertEqual(results, ['InsufficientStock', 'ok'])
        product.refresh_from_db()
        self.assertEqual(product.stock, 0)
        self.assertEqual(Order.objects.count(), 1)

    def test_coupon_usage_limit_not_exceeded(self):
        product = make_product(stock=10)
        coupon = make_coupon(usageLimit=1, userLimit=None)
        alice, bob = make_user('alice'), make_user('bob')

        results = self.race(
            (alice, order_payload((product, 1), couponCode='SAVE10')),
            (bob, order_payload((product, 1), couponCode='SAVE10')),
        )

        self.assertEqual(results, ['UsageLimitReached', 'ok'])
        self.assertEqual(CouponUsage.objects.filter(coupon=coupon).count(), 1)
        product.refresh_from_db()
        self.assertEqual(product.stock, 9)
