from django.db import models
import uuid


# ========================
# ORDER SYSTEM
# ========================
class Order(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    order_id = models.UUIDField(default=uuid.uuid4, editable=False, unique=True)
    customer_id = models.CharField(max_length=64, db_index=True)
    items = models.JSONField(default=list)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    # Assigned once by the creation protocol (ORD<epoch micros>)
    order_number = models.CharField(max_length=32, unique=True, editable=False)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['status'], name='order_status_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk and 'update_fields' not in kwargs:
            # order_number never changes after creation
            kwargs['update_fields'] = [
                f.name for f in self._meta.concrete_fields
                if not f.primary_key and f.name != 'order_number'
            ]
        super().save(*args, **kwargs)

    @property
    def lookup_number(self):
        """Stored order number, or the derived form used by rows created before it existed."""
        if self.order_number:
            return self.order_number
        return f"ORD{self.order_id.hex[-10:]}"

    @property
    def is_cancelled(self):
        return self.status == self.Status.CANCELLED

    def __str__(self):
        return f"Order {self.order_number} ({self.customer_id})"


# ========================
# PAYMENT SYSTEM
# ========================
class Payment(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    # Not unique: a retried payment adds a second row for the same order
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='payments')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    payment_details = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['status'], name='payment_status_idx'),
        ]

    def __str__(self):
        return f"Payment {self.pk} for {self.order.order_number} - {self.status}"


# ========================
# DELIVERY
# ========================
class Delivery(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        IN_TRANSIT = 'in_transit', 'In transit'
        DELIVERED = 'delivered', 'Delivered'
        CANCELLED = 'cancelled', 'Cancelled'

    order = models.ForeignKey(
        Order, on_delete=models.CASCADE, related_name='deliveries', null=True, blank=True
    )
    order_number = models.CharField(max_length=32, db_index=True)
    customer_id = models.CharField(max_length=64, db_index=True)
    address = models.TextField()
    items = models.TextField(help_text='JSON snapshot of the order items at creation')
    scheduled_date = models.DateTimeField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'deliveries'
        indexes = [
            models.Index(fields=['status'], name='delivery_status_idx'),
        ]

    @property
    def is_closed(self):
        return self.status in (self.Status.DELIVERED, self.Status.CANCELLED)

    def __str__(self):
        return f"Delivery {self.pk} for {self.order_number} - {self.status}"


class TransactionLog(models.Model):
    class Level(models.TextChoices):
        INFO = 'INFO', 'Info'
        WARNING = 'WARNING', 'Warning'
        ERROR = 'ERROR', 'Error'

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='logs')
    message = models.TextField()
    level = models.CharField(max_length=10, choices=Level.choices, default=Level.INFO)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"[{self.level}] {self.order.order_number}: {self.message[:50]}"
