from decimal import Decimal

from django.db.models import Sum

from .models import Order, Payment, Delivery


def list_orders():
    return Order.objects.all().order_by('-created_at', '-pk')


def list_orders_for_customer(customer_id):
    # An empty result is a valid answer, not a missing resource
    return Order.objects.filter(customer_id=str(customer_id)).order_by('-created_at', '-pk')


def count_orders():
    return Order.objects.count()


def total_payment_amount():
    """Sum of every payment amount; zero when no payments exist."""
    total = Payment.objects.aggregate(total=Sum('amount'))['total']
    if total is None:
        return Decimal('0.00')
    return total


def list_deliveries():
    return Delivery.objects.select_related('order').order_by('-created_at', '-pk')
