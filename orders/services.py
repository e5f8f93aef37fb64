import json
import logging
from datetime import datetime, time, timedelta
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from core.exceptions import (
    AggregateFailure,
    InvalidArgument,
    InvalidState,
    NotFound,
    OrderCreationFailed,
)
from .models import Order, Payment, Delivery, TransactionLog
from .transitions import transition

logger = logging.getLogger(__name__)


def generate_order_number(created_at):
    """
    Time-ordered order number, e.g. ORD1718035200123456.

    Uniqueness is only as strong as the microsecond clock; two orders created
    in the same microsecond collide on the unique column and the second
    creation fails as a whole.
    """
    micros = int(created_at.timestamp() * 1_000_000)
    return f"{settings.ORDER_NUMBER_PREFIX}{micros}"


def parse_scheduled_date(value):
    """Accept a datetime, an ISO 8601 datetime string or a plain date string."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = parse_datetime(value.strip())
            if parsed is None:
                day = parse_date(value.strip())
                parsed = datetime.combine(day, time.min) if day else None
        except ValueError:
            parsed = None
        if parsed is None:
            raise InvalidArgument(f"Invalid scheduled date '{value}'")
    else:
        raise InvalidArgument("Scheduled date must be a datetime")

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _parse_amount(value):
    if value is None or isinstance(value, bool):
        raise InvalidArgument("Total amount is required")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidArgument(f"Invalid total amount '{value}'")
    if not amount.is_finite() or amount < 0:
        raise InvalidArgument("Total amount must be a non-negative number")
    return amount.quantize(Decimal('0.01'))


def _validate_items(items):
    if not isinstance(items, list) or not items:
        raise InvalidArgument("Items must be a non-empty list")
    return items


def _log(order, message, level=TransactionLog.Level.INFO):
    TransactionLog.objects.create(order=order, message=message, level=level)


class OrderService:
    """Multi-record order operations. Every write path runs inside one transaction."""

    # ---------------------------
    # LOOKUPS
    # ---------------------------
    @staticmethod
    def get_order(order_id, lock=False):
        qs = Order.objects.select_for_update() if lock else Order.objects.all()
        try:
            return qs.get(order_id=order_id)
        except (Order.DoesNotExist, DjangoValidationError, ValueError):
            raise NotFound(f"Order {order_id} not found")

    @staticmethod
    def get_delivery(delivery_id, lock=False):
        qs = Delivery.objects.select_for_update() if lock else Delivery.objects.all()
        try:
            return qs.get(pk=delivery_id)
        except (Delivery.DoesNotExist, TypeError, ValueError):
            raise NotFound(f"Delivery {delivery_id} not found")

    @staticmethod
    def deliveries_for(order):
        """Deliveries linked to the order, newest first; unlinked legacy rows match on order number."""
        return Delivery.objects.filter(
            Q(order=order) | Q(order__isnull=True, order_number=order.lookup_number)
        ).order_by('-created_at', '-pk')

    # ---------------------------
    # CREATE ORDER
    # ---------------------------
    @staticmethod
    def create_order(customer_id, items, total_amount, payment_details=None,
                     address=None, scheduled_date=None):
        """
        Create an order with its payment and delivery.

        Returns (order, payment, delivery). Nothing is persisted unless all
        three records are written.
        """
        if not customer_id or not str(customer_id).strip():
            raise InvalidArgument("Customer reference is required")
        items = _validate_items(items)
        amount = _parse_amount(total_amount)
        if not address or not str(address).strip():
            raise InvalidArgument("Delivery address is required")
        if payment_details is None:
            payment_details = {}

        now = timezone.now()
        if scheduled_date in (None, ''):
            scheduled_date = now + timedelta(hours=settings.DELIVERY_DEFAULT_LEAD_HOURS)
        else:
            scheduled_date = parse_scheduled_date(scheduled_date)

        step = 'order'
        try:
            with transaction.atomic():
                order = Order.objects.create(
                    customer_id=str(customer_id),
                    items=items,
                    total_amount=amount,
                    order_number=generate_order_number(now),
                    status=Order.Status.PENDING,
                )

                step = 'payment'
                payment = Payment.objects.create(
                    order=order,
                    amount=amount,
                    payment_details=payment_details,
                    status=Payment.Status.PENDING,
                )

                step = 'delivery'
                delivery = Delivery.objects.create(
                    order=order,
                    order_number=order.order_number,
                    customer_id=order.customer_id,
                    address=str(address).strip(),
                    items=json.dumps(items),
                    scheduled_date=scheduled_date,
                    status=Delivery.Status.PENDING,
                )

                _log(order, f"Order {order.order_number} created for {amount}")
        except Exception as exc:
            logger.error(
                "Order creation for customer %s failed at step '%s', rolled back: %s",
                customer_id, step, exc, exc_info=True,
            )
            raise OrderCreationFailed(
                step, detail=f"Order creation failed at step '{step}': {exc}"
            ) from exc

        logger.info("Created order %s (%s) for customer %s", order.order_number, order.order_id, customer_id)
        return order, payment, delivery

    # ---------------------------
    # CANCEL ORDER
    # ---------------------------
    @staticmethod
    def cancel_order(order_id):
        """
        Cancel the order, its payments and its delivery together.

        Missing payments or deliveries are tolerated. Returns (order, delivery)
        where delivery may be None. Re-cancelling is a no-op.
        """
        with transaction.atomic():
            order = OrderService.get_order(order_id, lock=True)

            step = 'order'
            try:
                changed = transition(order, Order.Status.CANCELLED)

                step = 'payment'
                payments = list(Payment.objects.select_for_update().filter(order=order))
                if not payments:
                    logger.warning("No payment found for order %s; continuing cancellation", order.order_number)
                for payment in payments:
                    transition(payment, Payment.Status.CANCELLED)

                step = 'delivery'
                deliveries = list(OrderService.deliveries_for(order).select_for_update())
                if not deliveries:
                    logger.warning("No delivery found for order %s; continuing cancellation", order.order_number)
                for delivery in deliveries:
                    if delivery.status == Delivery.Status.DELIVERED:
                        logger.warning(
                            "Cancelling delivery %s of order %s after it was delivered",
                            delivery.pk, order.order_number,
                        )
                    transition(delivery, Delivery.Status.CANCELLED, force=True)

                if changed:
                    missing = [
                        name for name, rows in (('payment', payments), ('delivery', deliveries)) if not rows
                    ]
                    if missing:
                        _log(
                            order,
                            f"Order cancelled without {' or '.join(missing)} record",
                            level=TransactionLog.Level.WARNING,
                        )
                    else:
                        _log(order, "Order, payment and delivery cancelled")
            except (InvalidState, InvalidArgument):
                raise
            except Exception as exc:
                logger.error(
                    "Cancelling order %s failed at step '%s', rolled back: %s",
                    order_id, step, exc, exc_info=True,
                )
                raise AggregateFailure(
                    step, detail=f"Order cancellation failed at step '{step}': {exc}"
                ) from exc

        if changed:
            logger.info("Cancelled order %s", order.order_number)
        else:
            logger.info("Order %s was already cancelled", order.order_number)
        return order, (deliveries[0] if deliveries else None)

    # ---------------------------
    # ORDER UPDATES
    # ---------------------------
    @staticmethod
    @transaction.atomic
    def update_order(order_id, items=None, total_amount=None):
        order = OrderService.get_order(order_id, lock=True)

        update_fields = []
        if items is not None:
            order.items = _validate_items(items)
            update_fields.append('items')
        if total_amount is not None:
            order.total_amount = _parse_amount(total_amount)
            update_fields.append('total_amount')

        if update_fields:
            order.save(update_fields=update_fields + ['updated_at'])
            logger.info("Updated order %s fields: %s", order.order_number, ", ".join(update_fields))
        return order

    @staticmethod
    @transaction.atomic
    def update_order_and_payment_status(order_id, status=None, payment_status=None):
        """Set the order status and the status of its latest payment. Returns (order, payment)."""
        if status is None and payment_status is None:
            raise InvalidArgument("Provide an order status, a payment status or both")

        order = OrderService.get_order(order_id, lock=True)
        payment = (
            Payment.objects.select_for_update()
            .filter(order=order)
            .order_by('-created_at', '-pk')
            .first()
        )

        if status is not None:
            transition(order, status)
        if payment_status is not None:
            if payment is None:
                logger.warning("Order %s has no payment; payment status left unset", order.order_number)
            else:
                transition(payment, payment_status)

        _log(order, f"Status set to order={order.status}, payment={getattr(payment, 'status', None)}")
        return order, payment

    @staticmethod
    @transaction.atomic
    def update_order_status(order_id, status):
        if status not in Order.Status.values:
            raise InvalidArgument(f"Invalid status value '{status}'")

        order = OrderService.get_order(order_id, lock=True)
        if transition(order, status):
            _log(order, f"Order status set to {status}")
        return order

    # ---------------------------
    # DELIVERY
    # ---------------------------
    @staticmethod
    def reschedule_delivery(delivery_id, scheduled_date):
        if scheduled_date in (None, ''):
            raise InvalidArgument("Scheduled date is required")
        scheduled_date = parse_scheduled_date(scheduled_date)

        with transaction.atomic():
            delivery = OrderService.get_delivery(delivery_id, lock=True)
            if delivery.is_closed:
                raise InvalidState(
                    "Cannot update delivery schedule for completed or cancelled deliveries"
                )

            delivery.scheduled_date = scheduled_date
            delivery.save(update_fields=['scheduled_date', 'updated_at'])

        logger.info("Delivery %s rescheduled to %s", delivery.pk, scheduled_date.isoformat())
        return delivery

    @staticmethod
    @transaction.atomic
    def update_delivery_status(delivery_id, status):
        # The dashboard reports a finished delivery as "completed"
        if status == 'completed':
            status = Delivery.Status.DELIVERED

        delivery = OrderService.get_delivery(delivery_id, lock=True)
        if transition(delivery, status):
            logger.info("Delivery %s moved to %s", delivery.pk, status)
        return delivery

    @staticmethod
    def delete_delivery(delivery_id):
        delivery = OrderService.get_delivery(delivery_id)
        delivery.delete()
        logger.info("Deleted delivery %s for order %s", delivery_id, delivery.order_number)
