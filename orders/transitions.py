"""
Status transitions for orders, payments and deliveries.

All status writes go through `transition()` so the three legs of an order
share one table of legal moves instead of ad hoc field assignments.
"""
import logging

from django.utils import timezone

from core.exceptions import InvalidArgument, InvalidState
from .models import Order, Payment, Delivery

logger = logging.getLogger(__name__)


ORDER_TRANSITIONS = {
    Order.Status.PENDING: {Order.Status.COMPLETED, Order.Status.CANCELLED},
    Order.Status.COMPLETED: {Order.Status.PENDING, Order.Status.CANCELLED},
    Order.Status.CANCELLED: set(),
}

PAYMENT_TRANSITIONS = {
    Payment.Status.PENDING: {Payment.Status.COMPLETED, Payment.Status.CANCELLED},
    Payment.Status.COMPLETED: {Payment.Status.CANCELLED},
    Payment.Status.CANCELLED: set(),
}

DELIVERY_TRANSITIONS = {
    Delivery.Status.PENDING: {Delivery.Status.IN_TRANSIT, Delivery.Status.CANCELLED},
    Delivery.Status.IN_TRANSIT: {
        Delivery.Status.DELIVERED,
        Delivery.Status.PENDING,
        Delivery.Status.CANCELLED,
    },
    Delivery.Status.DELIVERED: set(),
    Delivery.Status.CANCELLED: set(),
}

TRANSITIONS = {
    Order: ORDER_TRANSITIONS,
    Payment: PAYMENT_TRANSITIONS,
    Delivery: DELIVERY_TRANSITIONS,
}


def _table_for(kind):
    try:
        return TRANSITIONS[kind]
    except KeyError:
        raise TypeError(f"No status transitions defined for {kind.__name__}")


def can_transition(kind, current, target):
    """True when `target` is reachable from `current` (or equal to it) for the record kind."""
    table = _table_for(kind)
    if current == target:
        return True
    return target in table.get(current, set())


def transition(record, target, force=False):
    """
    Move `record` to the `target` status and persist it.

    Returns True when the status changed, False when the record already had
    that status (no write happens). Raises InvalidArgument for an unknown
    status and InvalidState for a move the table does not allow. `force`
    skips the table check; order cancellation uses it to reach delivered
    deliveries.
    """
    kind = type(record)
    table = _table_for(kind)

    if not isinstance(target, str) or target not in table:
        raise InvalidArgument(
            f"Invalid {kind._meta.verbose_name} status '{target}'. "
            f"Allowed: {', '.join(sorted(table))}"
        )

    current = record.status
    if current == target:
        return False

    if not force and not can_transition(kind, current, target):
        raise InvalidState(
            f"Cannot move {kind._meta.verbose_name} {record.pk} from '{current}' to '{target}'"
        )

    record.status = target
    record.updated_at = timezone.now()
    record.save(update_fields=['status', 'updated_at'])
    logger.debug("%s %s: %s -> %s", kind.__name__, record.pk, current, target)
    return True
