from django.contrib import admin
from .models import Order, Payment, Delivery, TransactionLog


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    readonly_fields = ('amount', 'status', 'created_at')


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('order_number', 'customer_id', 'status', 'total_amount', 'created_at')
    search_fields = ('order_number', 'order_id', 'customer_id')
    list_filter = ('status', 'created_at')
    readonly_fields = ('order_id', 'order_number', 'created_at', 'updated_at')
    inlines = [PaymentInline]


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ('id', 'order', 'amount', 'status', 'created_at')
    search_fields = ('order__order_number', 'order__order_id')
    list_filter = ('status', 'created_at')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(Delivery)
class DeliveryAdmin(admin.ModelAdmin):
    list_display = ('id', 'order_number', 'customer_id', 'scheduled_date', 'status')
    search_fields = ('order_number', 'customer_id', 'address')
    list_filter = ('status', 'scheduled_date')
    readonly_fields = ('order_number', 'items', 'created_at', 'updated_at')


@admin.register(TransactionLog)
class TransactionLogAdmin(admin.ModelAdmin):
    list_display = ('id', 'order', 'level', 'created_at', 'message')
    list_filter = ('level', 'created_at')
    search_fields = ('order__order_number', 'message')
    readonly_fields = ('created_at',)

    def has_add_permission(self, request):
        """Log rows are written by the order protocol only."""
        return False
