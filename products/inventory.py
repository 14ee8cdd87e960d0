"""
Stock bookkeeping for the catalog.

Every decrement is a single conditional UPDATE (``stock >= quantity``), so
stock never drops below zero even when two checkouts race for the last unit.
Callers are expected to run these inside the order transaction.
"""
import logging

from django.db.models import F

from .exceptions import InsufficientStock
from .models import Product, ProductSize

logger = logging.getLogger(__name__)


def _stock_rows(product, variant=None):
    if product.has_sizes:
        return ProductSize.objects.filter(product=product, size=variant)
    return Product.objects.filter(pk=product.pk)


def lock_products(product_ids):
    """Lock the given products (and their sizes) for the current transaction.

    Rows are locked in primary key order so concurrent checkouts touching the
    same products cannot deadlock. Returns a ``{pk: Product}`` mapping.
    """
    products = (
        Product.objects.select_for_update()
        .filter(pk__in=product_ids)
        .order_by('pk')
    )
    locked = {product.pk: product for product in products}
    # evaluated for the lock only
    list(ProductSize.objects.select_for_update().filter(product_id__in=list(locked)).order_by('pk'))
    return locked


def get_stock(product, variant=None):
    if product.has_sizes:
        size = ProductSize.objects.filter(product=product, size=variant).first()
        return size.stock if size else 0
    return Product.objects.values_list('stock', flat=True).get(pk=product.pk)


def reserve_stock(product, quantity, variant=None):
    updated = _stock_rows(product, variant).filter(stock__gte=quantity).update(
        stock=F('stock') - quantity
    )
    if not updated:
        available = get_stock(product, variant)
        raise InsufficientStock(
            f"Insufficient stock for {product.name}: requested {quantity}, available {available}."
        )
    logger.info("Reserved %s x %s (variant=%s)", quantity, product.name, variant)


def release_stock(product, quantity, variant=None):
    _stock_rows(product, variant).update(stock=F('stock') + quantity)
    logger.info("Released %s x %s (variant=%s)", quantity, product.name, variant)
