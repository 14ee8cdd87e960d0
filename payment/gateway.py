"""
Client for the payment gateway collaborator.

Orders only keep the intent reference the gateway hands back; charging,
webhooks and refunds are handled by the gateway itself.
"""
import logging

import requests
from django.conf import settings

from backend.money import quantize

logger = logging.getLogger(__name__)


def create_payment_intent(order):
    """Ask the gateway for a payment intent covering ``order.total``.

    Returns ``{"id": ..., "clientSecret": ...}`` or None when the gateway is
    not configured or the request fails.
    """
    url = settings.PAYMENT_GATEWAY_URL
    if not url:
        return None

    # minor units, like the gateway expects
    amount = int(quantize(order.total) * 100)
    headers = {
        'Authorization': f'Key {settings.PAYMENT_GATEWAY_SECRET_KEY}',
        'Content-Type': 'application/json',
    }
    payload = {
        'amount': amount,
        'currency': settings.CURRENCY,
        'purchase_order_id': order.orderNumber,
        'customer_info': {
            'name': order.user.get_full_name() or order.user.username,
            'email': order.user.email,
        },
    }

    try:
        response = requests.post(url, headers=headers, json=payload, timeout=settings.PAYMENT_GATEWAY_TIMEOUT)
        response.raise_for_status()
        data = response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error("Payment intent failed for order %s: %s", order.orderNumber, e)
        return None

    intent_id = data.get('id')
    if not intent_id:
        logger.error("Payment gateway returned no intent id for order %s: %s", order.orderNumber, data)
        return None
    return {'id': intent_id, 'clientSecret': data.get('client_secret')}
