from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['email', 'display_name', 'currency', 'group_count', 'is_active', 'created_at']
    list_filter = ['is_active', 'is_staff', 'currency']
    search_fields = ['email', 'display_name']
    ordering = ['email']
    readonly_fields = ['created_at', 'last_login']

    # No username on this model
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('display_name', 'currency')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Activity', {'fields': ('created_at', 'last_login'), 'classes': ('collapse',)}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'currency', 'password1', 'password2'),
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(_group_count=Count('group_memberships'))

    @admin.display(description='Expense groups', ordering='_group_count')
    def group_count(self, obj):
        return obj._group_count
