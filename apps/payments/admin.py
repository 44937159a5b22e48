# ==========================================
# apps/payments/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html
from .models import Payment
from .services import AttachmentManager


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """
    Admin interface for Payments.

    Read-mostly view of the ledger: filtering by coffee type and date,
    search by owner email, receipt preview. Deleting a payment here also
    removes its receipt file.
    """

    list_display = [
        'date',
        'coffee_type',
        'weight_kg',
        'price_display',
        'owner',
        'receipt_link',
        'created_at',
    ]

    list_filter = [
        'coffee_type',
        'date',
    ]

    search_fields = [
        'owner__email',
        'coffee_type',
    ]

    date_hierarchy = 'date'
    ordering = ['-date', '-created_at']
    readonly_fields = ['owner', 'image', 'receipt_link', 'created_at', 'updated_at']
    list_select_related = ['owner']
    actions = ['delete_with_receipts']

    fieldsets = (
        ('Transaction', {
            'fields': ('owner', 'date', 'coffee_type', 'weight_kg', 'total_price')
        }),
        ('Receipt', {
            'fields': ('image', 'receipt_link'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def has_add_permission(self, request):
        """Payments are recorded by cashiers through the API."""
        return False

    def get_actions(self, request):
        actions = super().get_actions(request)
        actions.pop('delete_selected', None)
        return actions

    def price_display(self, obj):
        return f"Rp {obj.total_price:,}".replace(',', '.')
    price_display.short_description = 'Total Price'
    price_display.admin_order_field = 'total_price'

    def receipt_link(self, obj):
        url = AttachmentManager().url(obj.image)
        if not url:
            return '-'
        return format_html('<a href="{}" target="_blank">View receipt</a>', url)
    receipt_link.short_description = 'Receipt'

    @admin.action(description='Delete selected payments and their receipts')
    def delete_with_receipts(self, request, queryset):
        attachments = AttachmentManager()
        count = 0
        for payment in queryset:
            image = payment.image
            payment.delete()
            attachments.remove(image)
            count += 1
        self.message_user(request, f'{count} payment(s) deleted.')

    def delete_model(self, request, obj):
        image = obj.image
        super().delete_model(request, obj)
        AttachmentManager().remove(image)
