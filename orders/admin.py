from django.contrib import admin

from .models import Order, OrderStatusHistory


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    can_delete = False
    readonly_fields = ('status', 'note', 'timestamp')

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('orderNumber', 'user', 'total', 'status', 'paymentStatus', 'createdAt')
    list_filter = ('status', 'paymentStatus')
    search_fields = ('orderNumber', 'user__email', 'couponCode')
    # status and totals only change through the order workflow
    readonly_fields = (
        'orderNumber', 'user', 'items', 'subtotal', 'shippingCost', 'tax', 'discount', 'total',
        'status', 'paymentStatus', 'coupon', 'couponCode', 'createdAt', 'updatedAt',
    )
    inlines = [OrderStatusHistoryInline]

    # orders are cancelled through the workflow, never deleted
    def has_delete_permission(self, request, obj=None):
        return False
