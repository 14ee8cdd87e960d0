from django.contrib import admin

from .models import Coupon, CouponUsage


class CouponUsageInline(admin.TabularInline):
    model = CouponUsage
    extra = 0
    can_delete = False
    readonly_fields = ('user', 'order', 'usedAt')

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ('code', 'type', 'value', 'startDate', 'endDate', 'isActive')
    list_filter = ('type', 'isActive')
    search_fields = ('code', 'description')
    filter_horizontal = ('categories', 'products', 'excludedProducts')
    inlines = [CouponUsageInline]

    def has_delete_permission(self, request, obj=None):
        return False
