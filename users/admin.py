from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ('email', 'username', 'role', 'isEmailVerified', 'is_staff')
    list_filter = ('role', 'is_staff', 'isEmailVerified')
    search_fields = ('email', 'username')
    ordering = ('email',)
    fieldsets = UserAdmin.fieldsets + (
        ('Shop', {'fields': ('role', 'isEmailVerified')}),
    )
