# ==========================================
# apps/groups/admin.py
# ==========================================

from django.contrib import admin
from django.db import IntegrityError, transaction
from django.db.models import Count
from apps.groups.models import Group, GroupMembership, generate_invite_code


class GroupMembershipInline(admin.TabularInline):
    model = GroupMembership
    extra = 0
    fields = ['user', 'role', 'joined_at']
    readonly_fields = ['joined_at']
    autocomplete_fields = ['user']


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Expense groups with their members inline."""

    list_display = ['name', 'creator', 'members', 'ledger_entries', 'is_active', 'invite_code', 'updated_at']
    list_filter = ['is_active']
    search_fields = ['name', 'creator__email', 'invite_code']
    readonly_fields = ['invite_code', 'created_at', 'updated_at']
    inlines = [GroupMembershipInline]
    actions = ['regenerate_invite_codes', 'deactivate_groups']

    def get_queryset(self, request):
        return (
            super().get_queryset(request)
            .select_related('creator')
            .annotate(
                _members=Count('memberships', distinct=True),
                _ledger_entries=Count('expenses', distinct=True),
            )
        )

    @admin.display(ordering='_members')
    def members(self, obj):
        return obj._members

    @admin.display(description='Ledger entries', ordering='_ledger_entries')
    def ledger_entries(self, obj):
        return obj._ledger_entries

    @admin.action(description='Regenerate invite codes')
    def regenerate_invite_codes(self, request, queryset):
        for group in queryset:
            while True:
                try:
                    with transaction.atomic():
                        group.invite_code = generate_invite_code()
                        group.save(update_fields=['invite_code', 'updated_at'])
                    break
                except IntegrityError:
                    continue
        self.message_user(request, f"New invite codes for {queryset.count()} group(s)")

    @admin.action(description='Deactivate selected groups')
    def deactivate_groups(self, request, queryset):
        count = queryset.update(is_active=False)
        self.message_user(request, f"Deactivated {count} group(s)")


@admin.register(GroupMembership)
class GroupMembershipAdmin(admin.ModelAdmin):
    list_display = ['user', 'group', 'role', 'joined_at']
    list_filter = ['role']
    search_fields = ['user__email', 'group__name']
    list_select_related = ['user', 'group']
