from django.contrib import admin

from .models import Category, Product, ProductSize


class ProductSizeInline(admin.TabularInline):
    model = ProductSize
    extra = 0


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'parent', 'slug')
    search_fields = ('name',)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'price', 'stock', 'has_sizes', 'isAvailable')
    list_filter = ('category', 'isAvailable', 'has_sizes')
    search_fields = ('name', 'seller__email')
    inlines = [ProductSizeInline]
