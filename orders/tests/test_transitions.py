from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from core.exceptions import InvalidArgument, InvalidState
from orders.models import Order, Payment, Delivery
from orders.transitions import can_transition, transition


class TransitionTableTests(SimpleTestCase):
    def test_cancelled_is_terminal_for_every_leg(self):
        for kind in (Order, Payment, Delivery):
            for target in kind.Status.values:
                if target == 'cancelled':
                    continue
                self.assertFalse(can_transition(kind, 'cancelled', target), (kind, target))

    def test_same_status_is_always_allowed(self):
        for kind in (Order, Payment, Delivery):
            for value in kind.Status.values:
                self.assertTrue(can_transition(kind, value, value))

    def test_delivery_progression(self):
        self.assertTrue(can_transition(Delivery, 'pending', 'in_transit'))
        self.assertTrue(can_transition(Delivery, 'in_transit', 'delivered'))
        self.assertFalse(can_transition(Delivery, 'pending', 'delivered'))
        self.assertFalse(can_transition(Delivery, 'delivered', 'cancelled'))

    def test_unknown_kind_is_rejected(self):
        with self.assertRaises(TypeError):
            can_transition(object, 'pending', 'cancelled')


class TransitionTests(TestCase):
    def setUp(self):
        self.order = Order.objects.create(
            customer_id="cust-020",
            items=["tea"],
            total_amount=Decimal("4.00"),
            order_number="ORD1",
        )

    def test_legal_move_persists(self):
        self.assertTrue(transition(self.order, 'completed'))

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.COMPLETED)

    def test_reapplying_status_is_a_no_op(self):
        transition(self.order, 'cancelled')
        updated_at = Order.objects.get(pk=self.order.pk).updated_at

        self.assertFalse(transition(self.order, 'cancelled'))
        self.assertEqual(Order.objects.get(pk=self.order.pk).updated_at, updated_at)

    def test_illegal_move_raises_invalid_state(self):
        transition(self.order, 'cancelled')

        with self.assertRaises(InvalidState):
            transition(self.order, 'pending')

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.CANCELLED)

    def test_unknown_status_raises_invalid_argument(self):
        with self.assertRaises(InvalidArgument):
            transition(self.order, 'shipped')

    def test_non_string_status_raises_invalid_argument(self):
        for value in (["completed"], {"status": "completed"}, None):
            with self.assertRaises(InvalidArgument):
                transition(self.order, value)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.Status.PENDING)

    def test_force_skips_the_table(self):
        delivery = Delivery.objects.create(
            order=self.order,
            order_number=self.order.order_number,
            customer_id=self.order.customer_id,
            address="7 Leaf Ln",
            items='["tea"]',
            scheduled_date=timezone.now(),
            status=Delivery.Status.DELIVERED,
        )

        with self.assertRaises(InvalidState):
            transition(delivery, 'cancelled')
        self.assertTrue(transition(delivery, 'cancelled', force=True))

        delivery.refresh_from_db()
        self.assertEqual(delivery.status, Delivery.Status.CANCELLED)

    def test_payment_statuses_follow_their_own_table(self):
        payment = Payment.objects.create(order=self.order, amount=Decimal("4.00"))

        transition(payment, 'completed')
        with self.assertRaises(InvalidState):
            transition(payment, 'pending')
