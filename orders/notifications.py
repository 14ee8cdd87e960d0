"""
Order confirmation notifications.

Jobs run on a small background pool after the order transaction commits.
Nothing here may fail an order: errors are logged and dropped.
"""
import logging
from concurrent.futures import ThreadPoolExecutor

from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)

_executor = None


def get_executor():
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(
            max_workers=settings.ORDER_NOTIFICATION_WORKERS,
            thread_name_prefix='order-notifications'
        )
    return _executor


def build_confirmation(order):
    """Everything the job needs, so the worker never touches the database."""
    name = order.user.get_full_name() or order.user.username
    lines = [
        f"Dear {name},",
        "",
        f"Your order {order.orderNumber} has been placed successfully.",
        "",
    ]
    for item in order.items:
        lines.append(f"  {item['quantity']} x {item['name']}  {item['lineTotal']}")
    lines += [
        "",
        f"Subtotal: {order.subtotal}",
        f"Shipping: {order.shippingCost}",
        f"Tax: {order.tax}",
        f"Discount: -{order.discount}",
        f"Total: {order.total} {settings.CURRENCY}",
        "",
        "Thank you for shopping with us!",
    ]
    return {
        'order_id': order.pk,
        'subject': f"Order Confirmation - {order.orderNumber}",
        'message': "\n".join(lines),
        'recipient': order.user.email,
    }


def send_order_confirmation(job):
    try:
        send_mail(
            subject=job['subject'],
            message=job['message'],
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[job['recipient']],
            fail_silently=False,
        )
        logger.info("Order confirmation sent for order %s", job['order_id'])
    except Exception:
        logger.exception("Failed to send order confirmation for order %s", job['order_id'])


def enqueue_order_confirmation(order):
    """Submit one confirmation job for ``order``. Returns the future, or None."""
    try:
        job = build_confirmation(order)
        return get_executor().submit(send_order_confirmation, job)
    except Exception:
        logger.exception("Could not enqueue order confirmation for order %s", order.pk)
        return None
