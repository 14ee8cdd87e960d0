"""
Order workflow: checkout and status changes.

``create_order`` runs every write of a checkout (order row, status history,
stock decrements, coupon usage) in one transaction, so a failed checkout
leaves no trace. Status only ever changes through ``update_status``.
"""
import logging
import secrets
from collections import defaultdict
from functools import partial

from django.db import transaction
from django.utils import timezone

from backend.money import ZERO, quantize, to_decimal
from coupons.discounts import calculate_discount, record_usage, validate_coupon
from coupons.models import Coupon
from payment.gateway import create_payment_intent
from products.inventory import get_stock, lock_products, release_stock, reserve_stock
from products.models import Product

from .exceptions import (
    EmptyOrder,
    InsufficientStock,
    InvalidPaymentTransition,
    InvalidTransition,
    InvalidVariant,
    OrderNotCancellable,
    ProductUnavailable,
)
from .models import Order, OrderStatus, OrderStatusHistory, PaymentStatus
from .notifications import enqueue_order_confirmation
from .workflow import can_transition, can_transition_payment

logger = logging.getLogger(__name__)


def generate_order_number():
    while True:
        number = f"ORD-{timezone.now():%Y%m%d}-{secrets.token_hex(3).upper()}"
        if not Order.objects.filter(orderNumber=number).exists():
            return number


def _snapshot_items(items, products):
    """Price each line from the locked catalog rows and check stock.

    Quantities for the same product and size are summed before the stock
    check, so splitting a request over several lines cannot oversell.
    """
    lines = []
    requested = defaultdict(int)
    for item in items:
        product = products.get(int(item['productId']))
        if product is None or not product.isAvailable:
            raise ProductUnavailable(f"Product {item['productId']} is not available.")

        variant = item.get('variant') or None
        if not product.has_sizes:
            variant = None
        elif not variant or not product.sizes.filter(size=variant).exists():
            raise InvalidVariant(f"Select a valid size for {product.name}.")

        quantity = int(item['quantity'])
        requested[(product.pk, variant)] += quantity
        available = get_stock(product, variant)
        if requested[(product.pk, variant)] > available:
            raise InsufficientStock(
                f"Insufficient stock for {product.name}: requested "
                f"{requested[(product.pk, variant)]}, available {available}."
            )

        # stored as strings, JSONField cannot hold Decimals
        lines.append({
            'productId': product.pk,
            'name': product.name,
            'price': str(product.price),
            'quantity': quantity,
            'variant': variant,
            'image': product.image,
            'lineTotal': str(quantize(product.price * quantity)),
        })
    return lines


def create_order(user, order_data):
    items = order_data.get('items') or []
    if not items:
        raise EmptyOrder()

    coupon_code = order_data.get('couponCode')

    with transaction.atomic():
        products = lock_products({int(item['productId']) for item in items})
        lines = _snapshot_items(items, products)

        subtotal = sum((to_decimal(line['lineTotal']) for line in lines), ZERO)
        shipping_cost = quantize(order_data.get('shippingCost'))
        tax = quantize(order_data.get('tax'))

        coupon = None
        discount = ZERO
        if coupon_code:
            coupon = validate_coupon(coupon_code, user, subtotal, lines, lock=True)
            applied = calculate_discount(coupon, subtotal)
            discount = applied.amount
            if applied.type == Coupon.FREE_SHIPPING:
                shipping_cost = ZERO

        order = Order.objects.create(
            orderNumber=generate_order_number(),
            user=user,
            items=lines,
            shippingAddress=dict(order_data['shippingAddress']),
            billingAddress=dict(order_data['billingAddress']) if order_data.get('billingAddress') else None,
            subtotal=subtotal,
            shippingCost=shipping_cost,
            tax=tax,
            discount=discount,
            total=subtotal + shipping_cost + tax - discount,
            status=OrderStatus.PENDING,
            paymentStatus=PaymentStatus.PENDING,
            paymentMethod=order_data.get('paymentMethod') or '',
            coupon=coupon,
            couponCode=coupon.code if coupon else '',
            notes=order_data.get('notes') or '',
        )
        OrderStatusHistory.objects.create(order=order, status=OrderStatus.PENDING, note="Order created")

        for line in lines:
            reserve_stock(products[line['productId']], line['quantity'], line['variant'])

        if coupon is not None:
            record_usage(coupon, user, order)

        transaction.on_commit(partial(enqueue_order_confirmation, order))

    logger.info("Order %s created for user %s, total %s", order.orderNumber, user.pk, order.total)
    return order


def start_payment(order):
    """Request a payment intent and keep its id on the order.

    Returns the client secret for the caller, or None.
    """
    intent = create_payment_intent(order)
    if intent is None:
        return None
    order.paymentIntentId = intent['id']
    order.save(update_fields=['paymentIntentId', 'updatedAt'])
    return intent.get('clientSecret')


def _restock(order):
    for line in order.items:
        product = Product.objects.filter(pk=line['productId']).first()
        if product is None:
            logger.warning("Product %s of order %s no longer exists, not restocked", line['productId'], order.orderNumber)
            continue
        release_stock(product, line['quantity'], line.get('variant'))


def update_status(order, next_status, note='', actor=None):
    next_status = str(next_status)

    with transaction.atomic():
        locked = Order.objects.select_for_update().get(pk=order.pk)
        current = locked.status
        if not can_transition(current, next_status):
            raise InvalidTransition(f"Cannot change order status from {current} to {next_status}.")

        changes = {'status': next_status, 'updatedAt': timezone.now()}
        if next_status == OrderStatus.REFUNDED and locked.paymentStatus == PaymentStatus.PAID:
            changes['paymentStatus'] = PaymentStatus.REFUNDED

        # compare-and-swap on the status we checked
        if not Order.objects.filter(pk=locked.pk, status=current).update(**changes):
            raise InvalidTransition(f"Order {locked.orderNumber} changed status concurrently.")

        OrderStatusHistory.objects.create(
            order=locked,
            status=next_status,
            note=note or f"Status changed from {current} to {next_status}",
        )

        if next_status == OrderStatus.CANCELLED:
            _restock(locked)

    locked.refresh_from_db()
    logger.info(
        "Order %s: %s -> %s (by %s)",
        locked.orderNumber, current, next_status, actor.pk if actor is not None else 'system'
    )
    return locked


def cancel_order(order, user, reason=''):
    if not can_transition(order.status, OrderStatus.CANCELLED):
        raise OrderNotCancellable(f"Orders that are {order.status} can no longer be cancelled.")
    return update_status(order, OrderStatus.CANCELLED, note=reason or "Cancelled by customer", actor=user)


def update_payment_status(order, next_status):
    next_status = str(next_status)

    with transaction.atomic():
        locked = Order.objects.select_for_update().get(pk=order.pk)
        current = locked.paymentStatus
        if not can_transition_payment(current, next_status):
            raise InvalidPaymentTransition(f"Cannot change payment status from {current} to {next_status}.")
        locked.paymentStatus = next_status
        locked.save(update_fields=['paymentStatus', 'updatedAt'])

    logger.info("Order %s payment: %s -> %s", locked.orderNumber, current, next_status)
    return locked
