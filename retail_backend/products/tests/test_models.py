# products/tests/test_models.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import F
from django.test import TestCase

from products.models import StockAdjustment, StockBatch
from products.services.stock_adjustments import mark_wastage

from .helpers import receive


class StockBatchModelTests(TestCase):
    """
    GUARANTEES:
    - 0 <= remaining_quantity <= initial_quantity (DB-enforced)
    - initial_quantity and purchase_price never change
    - batches are never deleted
    """

    def setUp(self):
        self.product, self.batch = receive(quantity="5")

    def test_remaining_cannot_exceed_initial(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                StockBatch.objects.filter(pk=self.batch.pk).update(
                    remaining_quantity=F("initial_quantity") + 1
                )

    def test_remaining_cannot_go_negative(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                StockBatch.objects.filter(pk=self.batch.pk).update(remaining_quantity=Decimal("-1"))

    def test_initial_quantity_is_immutable(self):
        self.batch.initial_quantity = Decimal("50")
        with self.assertRaises(ValidationError):
            self.batch.save()

    def test_purchase_price_is_immutable(self):
        self.batch.purchase_price = Decimal("9.99")
        with self.assertRaises(ValidationError):
            self.batch.save()

    def test_batches_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.batch.delete()
        self.assertTrue(StockBatch.objects.filter(pk=self.batch.pk).exists())


class StockAdjustmentModelTests(TestCase):
    def test_adjustments_are_append_only(self):
        _, batch = receive(quantity="5")
        mark_wastage(batch_id=batch.pk)
        adj = StockAdjustment.objects.get(batch=batch)

        adj.reason = "edited"
        with self.assertRaises(ValidationError):
            adj.save()
        with self.assertRaises(ValidationError):
            adj.delete()
        self.assertEqual(adj.delta, Decimal("-5.000"))
