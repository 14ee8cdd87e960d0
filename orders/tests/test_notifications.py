from unittest import mock

from django.core import mail
from django.test import TestCase

from tests.factories import make_product, make_user, order_payload
from orders.notifications import build_confirmation, enqueue_order_confirmation, send_order_confirmation
from orders.services import create_order


class OrderConfirmationTests(TestCase):
    def setUp(self):
        self.user = make_user('buyer', first_name='Asha', last_name='Gurung')
        self.order = create_order(self.user, order_payload((make_product('Mug', price='8.00'), 2)))

    def test_build_confirmation(self):
        job = build_confirmation(self.order)
        self.assertEqual(job['order_id'], self.order.pk)
        self.assertEqual(job['recipient'], 'buyer@example.com')
        self.assertIn(self.order.orderNumber, job['subject'])
        self.assertIn('Dear Asha Gurung', job['message'])
        self.assertIn('2 x Mug', job['message'])
        self.assertIn('Total: 16.00', job['message'])

    def test_send(self):
        send_order_confirmation(build_confirmation(self.order))
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['buyer@example.com'])

    def test_send_failure_is_logged(self):
        with mock.patch('orders.notifications.send_mail', side_effect=ConnectionRefusedError('smtp down')):
            with self.assertLogs('orders.notifications', level='ERROR'):
                send_order_confirmation(build_confirmation(self.order))

    def test_enqueue_runs_in_background(self):
        future = enqueue_order_confirmation(self.order)
        future.result(timeout=10)
        self.assertEqual(len(mail.outbox), 1)

    def test_enqueue_failure_is_swallowed(self):
        executor = mock.Mock()
        executor.submit.side_effect = RuntimeError('cannot schedule new futures after shutdown')
        with mock.patch('orders.notifications.get_executor', return_value=executor):
            with self.assertLogs('orders.notifications', level='ERROR'):
                self.assertIsNone(enqueue_order_confirmation(self.order))
