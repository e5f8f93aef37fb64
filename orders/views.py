from rest_framework import status
from rest_framework.response import Response
from drf_yasg.utils import swagger_auto_schema

from core.base_view import BaseAPIView
from core.response import standardized_response

from .serializers import (
    CreateOrderSerializer,
    DeliverySerializer,
    DeliveryStatusSerializer,
    OrderDetailSerializer,
    OrderPaymentStatusSerializer,
    OrderSerializer,
    OrderStatusSerializer,
    PaymentSerializer,
    UpdateOrderSerializer,
)
from .services import OrderService
from . import selectors


# ----------------------
# Order endpoints
# ----------------------
class OrderListCreateView(BaseAPIView):

    def get(self, request):
        orders = selectors.list_orders()
        return Response(standardized_response(data=OrderSerializer(orders, many=True).data))

    @swagger_auto_schema(request_body=CreateOrderSerializer)
    def post(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order, payment, delivery = OrderService.create_order(**serializer.validated_data)

        return Response(
            standardized_response(
                data={
                    "order": OrderSerializer(order).data,
                    "payment": PaymentSerializer(payment).data,
                    "delivery": DeliverySerializer(delivery).data,
                },
                message="Order, payment, and delivery created successfully"
            ),
            status=status.HTTP_201_CREATED
        )


class OrderCountView(BaseAPIView):

    def get(self, request):
        return Response(standardized_response(data={"total_orders": selectors.count_orders()}))


class CustomerOrderListView(BaseAPIView):
    """Orders placed by one customer. An empty list is returned with 200."""

    def get(self, request, customer_id):
        orders = selectors.list_orders_for_customer(customer_id)
        return Response(
            standardized_response(
                data=OrderSerializer(orders, many=True).data,
                message="Orders retrieved successfully"
            )
        )


class OrderDetailView(BaseAPIView):

    def get(self, request, order_id):
        order = OrderService.get_order(order_id)
        return Response(standardized_response(data=OrderDetailSerializer(order).data))

    @swagger_auto_schema(request_body=UpdateOrderSerializer)
    def put(self, request, order_id):
        serializer = UpdateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.update_order(order_id, **serializer.validated_data)
        return Response(
            standardized_response(
                data=OrderSerializer(order).data,
                message="Order updated successfully"
            )
        )


class OrderPaymentStatusView(BaseAPIView):

    @swagger_auto_schema(request_body=OrderPaymentStatusSerializer)
    def put(self, request, order_id):
        serializer = OrderPaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order, payment = OrderService.update_order_and_payment_status(
            order_id,
            status=serializer.validated_data.get("status"),
            payment_status=serializer.validated_data.get("payment_status"),
        )
        return Response(
            standardized_response(
                data={
                    "order": OrderSerializer(order).data,
                    "payment": PaymentSerializer(payment).data if payment else None,
                },
                message="Order and payment status updated"
            )
        )


class OrderStatusView(BaseAPIView):

    @swagger_auto_schema(request_body=OrderStatusSerializer)
    def patch(self, request, order_id):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = OrderService.update_order_status(order_id, serializer.validated_data["status"])
        return Response(
            standardized_response(
                data=OrderSerializer(order).data,
                message="Order status updated successfully"
            )
        )


class CancelOrderView(BaseAPIView):

    def post(self, request, order_id):
        order, delivery = OrderService.cancel_order(order_id)
        return Response(
            standardized_response(
                data={
                    "order": OrderSerializer(order).data,
                    "delivery": DeliverySerializer(delivery).data if delivery else None,
                },
                message="Order cancelled successfully"
            )
        )

    # The dashboard issues DELETE for cancellation
    def delete(self, request, order_id):
        return self.post(request, order_id)


# ----------------------
# Payment endpoints
# ----------------------
class PaymentTotalView(BaseAPIView):

    def get(self, request):
        total = selectors.total_payment_amount()
        return Response(standardized_response(data={"total_amount": str(total)}))


# ----------------------
# Delivery endpoints
# ----------------------
class DeliveryListView(BaseAPIView):

    def get(self, request):
        deliveries = selectors.list_deliveries()
        return Response(standardized_response(data=DeliverySerializer(deliveries, many=True).data))


class DeliveryDetailView(BaseAPIView):

    def delete(self, request, pk):
        OrderService.delete_delivery(pk)
        return Response(standardized_response(message="Delivery deleted successfully"))


class DeliveryScheduleView(BaseAPIView):

    def put(self, request, pk):
        delivery = OrderService.reschedule_delivery(pk, request.data.get("scheduled_date"))
        return Response(
            standardized_response(
                data=DeliverySerializer(delivery).data,
                message="Delivery updated successfully"
            )
        )


class DeliveryStatusView(BaseAPIView):

    @swagger_auto_schema(request_body=DeliveryStatusSerializer)
    def put(self, request, pk):
        serializer = DeliveryStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        delivery = OrderService.update_delivery_status(pk, serializer.validated_data["status"])
        return Response(
            standardized_response(
                data=DeliverySerializer(delivery).data,
                message="Delivery status updated"
            )
        )


__all__ = [
    'OrderListCreateView', 'OrderCountView', 'CustomerOrderListView', 'OrderDetailView',
    'OrderPaymentStatusView', 'OrderStatusView', 'CancelOrderView',
    'PaymentTotalView',
    'DeliveryListView', 'DeliveryDetailView', 'DeliveryScheduleView', 'DeliveryStatusView',
]
