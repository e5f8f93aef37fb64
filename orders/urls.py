from django.urls import path
from .views import (
    OrderListCreateView, OrderCountView, CustomerOrderListView, OrderDetailView,
    OrderPaymentStatusView, OrderStatusView, CancelOrderView,
    PaymentTotalView,
    DeliveryListView, DeliveryDetailView, DeliveryScheduleView, DeliveryStatusView,
)

urlpatterns = [
    # Order endpoints
    path('orders/', OrderListCreateView.as_view(), name='order-list-create'),
    path('orders/count/', OrderCountView.as_view(), name='order-count'),
    path('orders/customer/<str:customer_id>/', CustomerOrderListView.as_view(), name='customer-orders'),
    path('orders/<uuid:order_id>/', OrderDetailView.as_view(), name='order-detail'),
    path('orders/<uuid:order_id>/payment-status/', OrderPaymentStatusView.as_view(), name='order-payment-status'),
    path('orders/<uuid:order_id>/status/', OrderStatusView.as_view(), name='order-status'),
    path('orders/<uuid:order_id>/cancel/', CancelOrderView.as_view(), name='order-cancel'),

    # Payment endpoints
    path('payments/total/', PaymentTotalView.as_view(), name='payment-total'),

    # Delivery endpoints
    path('deliveries/', DeliveryListView.as_view(), name='delivery-list'),
    path('deliveries/<int:pk>/', DeliveryDetailView.as_view(), name='delivery-detail'),
    path('deliveries/<int:pk>/schedule/', DeliveryScheduleView.as_view(), name='delivery-schedule'),
    path('deliveries/<int:pk>/status/', DeliveryStatusView.as_view(), name='delivery-status'),
]
