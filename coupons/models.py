from django.conf import settings
from django.db import models
from django.utils import timezone


def normalize_code(code):
    return (code or '').strip().upper()


class Coupon(models.Model):
    PERCENTAGE = 'percentage'
    FIXED = 'fixed'
    FREE_SHIPPING = 'free_shipping'

    TYPE_CHOICES = (
        (PERCENTAGE, 'Percentage'),
        (FIXED, 'Fixed Amount'),
        (FREE_SHIPPING, 'Free Shipping'),
    )

    code = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=255, blank=True, default='')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    value = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    minPurchase = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    maxDiscount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    usageLimit = models.PositiveIntegerField(null=True, blank=True)  # across all users
    userLimit = models.PositiveIntegerField(null=True, blank=True, default=1)

    startDate = models.DateTimeField(default=timezone.now)
    endDate = models.DateTimeField()
    isActive = models.BooleanField(default=True)

    # empty allow-lists mean the whole catalog
    categories = models.ManyToManyField('products.Category', blank=True, related_name='coupons')
    products = models.ManyToManyField('products.Product', blank=True, related_name='coupons')
    excludedProducts = models.ManyToManyField('products.Product', blank=True, related_name='excluded_from_coupons')

    createdBy = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_coupons'
    )
    createdAt = models.DateTimeField(auto_now_add=True)
    updatedAt = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-createdAt']

    def save(self, *args, **kwargs):
        self.code = normalize_code(self.code)
        super().save(*args, **kwargs)

    @property
    def usageCount(self):
        # derived from the usedBy log, never stored
        return self.usages.count()

    def usage_count_for(self, user):
        return self.usages.filter(user=user).count()

    def is_currently_valid(self):
        now = timezone.now()
        return self.isActive and self.startDate <= now <= self.endDate

    def __str__(self):
        return f"{self.code} ({self.get_type_display()})"


class CouponUsage(models.Model):
    """One redemption of a coupon. Rows are only ever appended."""

    coupon = models.ForeignKey(Coupon, on_delete=models.PROTECT, related_name='usages')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='coupon_usages')
    order = models.ForeignKey(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='coupon_usages'
    )
    usedAt = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['usedAt', 'pk']

    def __str__(self):
        return f"{self.user} used {self.coupon.code} at {self.usedAt}"
