"""
Order and payment state machines.

``TRANSITIONS`` is the only place allowed status moves are declared; every
status change goes through ``can_transition``. Keys and values are plain
strings so lookups work for both enum members and raw request values.
"""
from .models import OrderStatus, PaymentStatus


def _table(allowed_moves):
    return {str(status): frozenset(str(n) for n in allowed) for status, allowed in allowed_moves.items()}


TRANSITIONS = _table({
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: set(),
    OrderStatus.REFUNDED: set(),
})

PAYMENT_TRANSITIONS = _table({
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.PENDING, PaymentStatus.PAID},
    PaymentStatus.PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
})


def can_transition(current, next_status):
    return str(next_status) in TRANSITIONS.get(str(current), frozenset())


def can_transition_payment(current, next_status):
    return str(next_status) in PAYMENT_TRANSITIONS.get(str(current), frozenset())
