from datetime import datetime, timezone as dt_timezone

from django.test import TestCase

from core.exceptions import InvalidArgument, InvalidState, NotFound
from orders.models import Delivery
from orders.services import OrderService


class DeliveryRescheduleTests(TestCase):
    def setUp(self):
        _, _, self.delivery = OrderService.create_order(
            customer_id="cust-010",
            items=["milk"],
            total_amount="3.20",
            address="4 Dairy Way",
        )
        self.original_date = self.delivery.scheduled_date

    def test_reschedule_updates_only_the_date(self):
        delivery = OrderService.reschedule_delivery(self.delivery.pk, "2031-03-01T10:30:00Z")

        delivery.refresh_from_db()
        self.assertEqual(delivery.scheduled_date, datetime(2031, 3, 1, 10, 30, tzinfo=dt_timezone.utc))
        self.assertEqual(delivery.status, Delivery.Status.PENDING)
        self.assertEqual(delivery.address, "4 Dairy Way")

    def test_reschedule_accepts_plain_date(self):
        delivery = OrderService.reschedule_delivery(self.delivery.pk, "2031-03-01")
        self.assertEqual(delivery.scheduled_date.date().isoformat(), "2031-03-01")

    def test_reschedule_allowed_while_in_transit(self):
        Delivery.objects.filter(pk=self.delivery.pk).update(status=Delivery.Status.IN_TRANSIT)

        delivery = OrderService.reschedule_delivery(self.delivery.pk, "2031-03-01T10:30:00Z")

        self.assertEqual(delivery.scheduled_date.year, 2031)

    def test_missing_date_is_invalid_argument(self):
        for value in (None, ""):
            with self.assertRaises(InvalidArgument):
                OrderService.reschedule_delivery(self.delivery.pk, value)

    def test_missing_date_checked_before_lookup(self):
        with self.assertRaises(InvalidArgument):
            OrderService.reschedule_delivery(999999, None)

    def test_unknown_delivery_raises_not_found(self):
        with self.assertRaises(NotFound):
            OrderService.reschedule_delivery(999999, "2031-03-01T10:30:00Z")

    def test_closed_delivery_cannot_be_rescheduled(self):
        for closed in (Delivery.Status.DELIVERED, Delivery.Status.CANCELLED):
            Delivery.objects.filter(pk=self.delivery.pk).update(status=closed)

            with self.assertRaises(InvalidState):
                OrderService.reschedule_delivery(self.delivery.pk, "2031-03-01T10:30:00Z")

            self.delivery.refresh_from_db()
            self.assertEqual(self.delivery.scheduled_date, self.original_date)

    def test_cancelled_order_delivery_cannot_be_rescheduled(self):
        OrderService.cancel_order(self.delivery.order.order_id)

        with self.assertRaises(InvalidState):
            OrderService.reschedule_delivery(self.delivery.pk, "2031-03-01T10:30:00Z")


class DeliveryDispatchTests(TestCase):
    def setUp(self):
        _, _, self.delivery = OrderService.create_order(
            customer_id="cust-011",
            items=["eggs"],
            total_amount="2.00",
            address="5 Hen House",
        )

    def test_dispatcher_progresses_delivery(self):
        OrderService.update_delivery_status(self.delivery.pk, "in_transit")
        delivery = OrderService.update_delivery_status(self.delivery.pk, "delivered")

        self.assertEqual(delivery.status, Delivery.Status.DELIVERED)

    def test_delivered_is_terminal(self):
        OrderService.update_delivery_status(self.delivery.pk, "in_transit")
        OrderService.update_delivery_status(self.delivery.pk, "delivered")

        with self.assertRaises(InvalidState):
            OrderService.update_delivery_status(self.delivery.pk, "pending")

    def test_cannot_skip_transit(self):
        with self.assertRaises(InvalidState):
            OrderService.update_delivery_status(self.delivery.pk, "delivered")

    def test_completed_is_accepted_as_delivered(self):
        OrderService.update_delivery_status(self.delivery.pk, "in_transit")
        delivery = OrderService.update_delivery_status(self.delivery.pk, "completed")

        delivery.refresh_from_db()
        self.assertEqual(delivery.status, Delivery.Status.DELIVERED)

    def test_unknown_status_is_invalid_argument(self):
        with self.assertRaises(InvalidArgument):
            OrderService.update_delivery_status(self.delivery.pk, "lost")

    def test_delete_delivery(self):
        OrderService.delete_delivery(self.delivery.pk)
        self.assertFalse(Delivery.objects.filter(pk=self.delivery.pk).exists())

        with self.assertRaises(NotFound):
            OrderService.delete_delivery(self.delivery.pk)
