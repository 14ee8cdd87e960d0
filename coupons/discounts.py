"""
Coupon validation and discount calculation.

``validate_coupon`` is read-only and safe to call as often as a cart changes;
usage is recorded only when an order is placed (``record_usage``), inside the
order transaction.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal

from django.utils import timezone

from backend.money import ZERO, quantize, to_decimal
from products.models import Product

from .exceptions import (
    CouponExpired,
    CouponInactive,
    CouponNotApplicable,
    CouponNotYetValid,
    InvalidCoupon,
    MinimumPurchaseNotMet,
    UsageLimitReached,
    UserLimitReached,
)
from .models import Coupon, CouponUsage, normalize_code

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Discount:
    type: str
    amount: Decimal


def validate_coupon(code, user, cart_total, items=None, lock=False):
    """Return the coupon for ``code`` if ``user`` may apply it to this cart.

    Checks run in a fixed order and the first failure is raised. ``items`` is
    a list of dicts carrying a ``productId``; when given, the coupon's product
    and category restrictions are checked against it. ``lock=True`` re-reads
    the coupon with a row lock and is meant for the order transaction only.
    """
    normalized = normalize_code(code)
    if not normalized:
        raise InvalidCoupon()

    queryset = Coupon.objects.select_for_update() if lock else Coupon.objects.all()
    try:
        coupon = queryset.get(code=normalized)
    except Coupon.DoesNotExist:
        raise InvalidCoupon(f"Coupon {normalized} does not exist.")

    now = timezone.now()
    if not coupon.isActive:
        raise CouponInactive()
    if now < coupon.startDate:
        raise CouponNotYetValid()
    if now > coupon.endDate:
        raise CouponExpired()

    if coupon.usageLimit is not None and coupon.usageCount >= coupon.usageLimit:
        raise UsageLimitReached()
    if coupon.userLimit is not None and coupon.usage_count_for(user) >= coupon.userLimit:
        raise UserLimitReached()

    cart_total = to_decimal(cart_total)
    if cart_total < coupon.minPurchase:
        raise MinimumPurchaseNotMet(
            f"Minimum purchase of {quantize(coupon.minPurchase)} required to use this coupon."
        )

    if items and not is_applicable(coupon, items):
        raise CouponNotApplicable()

    return coupon


def is_applicable(coupon, items):
    allowed_products = set(coupon.products.values_list('pk', flat=True))
    allowed_categories = set(coupon.categories.values_list('pk', flat=True))
    excluded = set(coupon.excludedProducts.values_list('pk', flat=True))
    if not (allowed_products or allowed_categories or excluded):
        return True

    product_ids = {int(item['productId']) for item in items if item.get('productId') is not None}
    categories = dict(Product.objects.filter(pk__in=product_ids).values_list('pk', 'category_id'))

    for product_id in product_ids:
        if product_id in excluded:
            continue
        if not (allowed_products or allowed_categories):
            return True
        if product_id in allowed_products or categories.get(product_id) in allowed_categories:
            return True
    return False


def calculate_discount(coupon, cart_total):
    cart_total = to_decimal(cart_total)

    if coupon.type == Coupon.PERCENTAGE:
        amount = cart_total * to_decimal(coupon.value) / Decimal(100)
    elif coupon.type == Coupon.FIXED:
        amount = min(to_decimal(coupon.value), cart_total)
    elif coupon.type == Coupon.FREE_SHIPPING:
        # shipping is waived by the order total calculation
        return Discount(Coupon.FREE_SHIPPING, ZERO)
    else:
        raise ValueError(f"Unknown coupon type: {coupon.type!r}")

    if coupon.maxDiscount is not None and amount > coupon.maxDiscount:
        amount = to_decimal(coupon.maxDiscount)

    return Discount(coupon.type, quantize(max(amount, ZERO)))


def record_usage(coupon, user, order):
    usage = CouponUsage.objects.create(coupon=coupon, user=user, order=order)
    logger.info("Coupon %s used by user %s on order %s", coupon.code, user.pk, order.orderNumber)
    return usage
