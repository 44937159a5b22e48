# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count
from django.utils.html import format_html
from apps.payments.models import Payment
from apps.payments.services import AttachmentManager
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Custom admin interface for User model.

    Cashier accounts are provisioned here (there is no self-registration).
    """

    list_display = [
        'email',
        'display_name',
        'is_active_badge',
        'is_staff',
        'payment_count',
        'created_at',
        'last_login',
    ]

    list_filter = [
        'is_active',
        'is_staff',
        'is_superuser',
        'created_at',
    ]

    search_fields = [
        'email',
        'display_name',
    ]

    ordering = ['-created_at']

    # Remove username field references from BaseUserAdmin
    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'password')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']

    def delete_model(self, request, obj):
        images = self._receipt_keys(User.objects.filter(pk=obj.pk))
        super().delete_model(request, obj)
        self._remove_receipts(images)

    def delete_queryset(self, request, queryset):
        images = self._receipt_keys(queryset)
        super().delete_queryset(request, queryset)
        self._remove_receipts(images)

    def _receipt_keys(self, users):
        """Storage keys of receipts attached to the users' payments."""
        return list(
            Payment.objects
            .filter(owner__in=users)
            .exclude(image='')
            .values_list('image', flat=True)
        )

    def _remove_receipts(self, images):
        attachments = AttachmentManager()
        for image in images:
            attachments.remove(image)

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(_payment_count=Count('payments'))

    def is_active_badge(self, obj):
        """Display active status as colored badge."""
        if obj.is_active:
            return format_html(
                '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">{}</span>',
                'Active'
            )
        return format_html(
            '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            'Inactive'
        )
    is_active_badge.short_description = 'Status'

    def payment_count(self, obj):
        return obj._payment_count
    payment_count.short_description = 'Payments'
    payment_count.admin_order_field = '_payment_count'
