from django.conf import settings
from django.db import models

from coupons.models import Coupon


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    PROCESSING = 'processing', 'Processing'
    SHIPPED = 'shipped', 'Shipped'
    DELIVERED = 'delivered', 'Delivered'
    CANCELLED = 'cancelled', 'Cancelled'
    REFUNDED = 'refunded', 'Refunded'


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    FAILED = 'failed', 'Failed'
    REFUNDED = 'refunded', 'Refunded'


class Order(models.Model):
    orderNumber = models.CharField(max_length=32, unique=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='orders')

    # snapshots taken at checkout, never re-read from the catalog
    items = models.JSONField()
    shippingAddress = models.JSONField()
    billingAddress = models.JSONField(null=True, blank=True)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    shippingCost = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=12, decimal_places=2)

    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    paymentStatus = models.CharField(max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    paymentMethod = models.CharField(max_length=50, blank=True, default='')
    paymentIntentId = models.CharField(max_length=255, blank=True, default='')

    coupon = models.ForeignKey(Coupon, on_delete=models.PROTECT, null=True, blank=True, related_name='orders')
    couponCode = models.CharField(max_length=50, blank=True, default='')

    notes = models.TextField(blank=True, default='')
    createdAt = models.DateTimeField(auto_now_add=True)
    updatedAt = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-createdAt']

    def __str__(self):
        return f"Order {self.orderNumber} - {self.status}"


class OrderStatusHistory(models.Model):
    """Audit trail of status changes, appended in order and never edited."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='statusHistory')
    status = models.CharField(max_length=20, choices=OrderStatus.choices)
    note = models.CharField(max_length=255, blank=True, default='')
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['timestamp', 'pk']
        verbose_name_plural = 'order status history'

    def __str__(self):
        return f"{self.order.orderNumber}: {self.status}"
