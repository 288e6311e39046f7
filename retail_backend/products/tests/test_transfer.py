# products/tests/test_transfer.py

from datetime import date
from decimal import Decimal
from unittest import mock
import uuid

from django.db import DatabaseError
from django.test import TestCase

from products.models import Product, StockAdjustment, StockBatch
from products.services.exceptions import InsufficientStock, InvalidArgument, NotFound, StorageFailure
from products.services.stock_transfer import divide_stock

from .helpers import batch_sum, receive


class DivideStockTests(TestCase):
    def setUp(self):
        self.source, self.batch = receive(
            barcode="123",
            quantity="7",
            purchase_price="2.00",
            supplier_name="Acme",
            category_name="Bulk",
            expiry_date=date(2030, 5, 1),
        )

    def _counts(self):
        return (
            Product.objects.count(),
            StockBatch.objects.count(),
            StockAdjustment.objects.count(),
        )

    def test_divide_into_new_product(self):
        result = divide_stock(
            source_batch_id=self.batch.pk,
            quantity="4",
            target_barcode="456",
            target_name="Retail Pack",
            target_price="6.00",
        )

        self.batch.refresh_from_db()
        self.source.refresh_from_db()
        target = Product.objects.get(barcode="456")
        target_batch = StockBatch.objects.get(pk=result.target_batch_id)

        self.assertTrue(result.target_created)
        self.assertEqual(self.batch.remaining_quantity, Decimal("3.000"))
        self.assertEqual(self.source.quantity, Decimal("3.000"))

        self.assertEqual(target.quantity, Decimal("4.000"))
        self.assertEqual(target.name, "Retail Pack")
        self.assertEqual(target.selling_price, Decimal("6.00"))
        self.assertEqual(target.purchase_price, Decimal("2.00"))
        self.assertEqual(target.unit, "pcs")
        self.assertEqual(target.category_id, self.source.category_id)
        self.assertEqual(target.supplier_id, self.batch.supplier_id)

        self.assertEqual(target_batch.initial_quantity, Decimal("4.000"))
        self.assertEqual(target_batch.remaining_quantity, Decimal("4.000"))
        self.assertEqual(target_batch.purchase_price, Decimal("2.00"))
        self.assertEqual(target_batch.expiry_date, date(2030, 5, 1))

        adj = StockAdjustment.objects.get(batch=self.batch)
        self.assertEqual(adj.reason, "Divided into 456")
        self.assertEqual((adj.old_quantity, adj.new_quantity), (Decimal("7.000"), Decimal("3.000")))

        self.assertEqual(batch_sum(self.source), self.source.quantity)
        self.assertEqual(batch_sum(target), target.quantity)

    def test_existing_target_keeps_name_and_price(self):
        existing, _ = receive(barcode="456", quantity="1", name="Six Pack", selling_price="9.00")

        result = divide_stock(
            source_batch_id=self.batch.pk,
            quantity="2",
            target_barcode="456",
            target_name="Ignored",
            target_price="1.00",
        )

        existing.refresh_from_db()
        self.assertFalse(result.target_created)
        self.assertEqual(existing.name, "Six Pack")
        self.assertEqual(existing.selling_price, Decimal("9.00"))
        self.assertEqual(existing.quantity, Decimal("3.000"))
        self.assertEqual(StockBatch.objects.filter(product=existing).count(), 2)

    def test_insufficient_stock_writes_nothing(self):
        before = self._counts()

        with self.assertRaises(InsufficientStock):
            divide_stock(
                source_batch_id=self.batch.pk,
                quantity="999",
                target_barcode="456",
                target_name="Retail Pack",
                target_price="6.00",
            )

        self.assertEqual(self._counts(), before)
        self.batch.refresh_from_db()
        self.source.refresh_from_db()
        self.assertEqual(self.batch.remaining_quantity, Decimal("7.000"))
        self.assertEqual(self.source.quantity, Decimal("7.000"))

    def test_new_target_requires_name(self):
        before = self._counts()
        with self.assertRaises(InvalidArgument):
            divide_stock(
                source_batch_id=self.batch.pk,
                quantity="1",
                target_barcode="456",
                target_name="",
                target_price="6.00",
            )
        self.assertEqual(self._counts(), before)

    def test_missing_source_batch(self):
        with self.assertRaises(NotFound):
            divide_stock(
                source_batch_id=uuid.uuid4(),
                quantity="1",
                target_barcode="456",
                target_name="x",
                target_price="1.00",
            )

    def test_oversized_target_fields_write_nothing(self):
        before = self._counts()
        cases = (
            ("target_barcode", dict(target_barcode="b" * 129, target_name="Retail Pack")),
            ("target_name", dict(target_barcode="456", target_name="n" * 256)),
        )
        for label, kwargs in cases:
            with self.subTest(field=label):
                with self.assertRaises(InvalidArgument):
                    divide_stock(
                        source_batch_id=self.batch.pk,
                        quantity="1",
                        target_price="6.00",
                        **kwargs,
                    )

        self.assertEqual(self._counts(), before)
        self.batch.refresh_from_db()
        self.assertEqual(self.batch.remaining_quantity, Decimal("7.000"))

    def test_full_target_counter_rejected(self):
        target, _ = receive(barcode="456", quantity="999999999")
        before = self._counts()

        with self.assertRaises(InvalidArgument):
            divide_stock(
                source_batch_id=self.batch.pk,
                quantity="1",
                target_barcode="456",
                target_name="Retail Pack",
                target_price="6.00",
            )

        self.assertEqual(self._counts(), before)
        target.refresh_from_db()
        self.source.refresh_from_db()
        self.assertEqual(target.quantity, Decimal("999999999.000"))
        self.assertEqual(self.source.quantity, Decimal("7.000"))

    def test_failure_mid_transfer_rolls_back(self):
        """The adjustment insert is the last write; failing it must undo the rest."""
        before = self._counts()

        with mock.patch.object(StockAdjustment, "save", side_effect=DatabaseError("disk full")):
            with self.assertRaises(StorageFailure):
                divide_stock(
                    source_batch_id=self.batch.pk,
                    quantity="4",
                    target_barcode="456",
                    target_name="Retail Pack",
                    target_price="6.00",
                )

        self.assertEqual(self._counts(), before)
        self.batch.refresh_from_db()
        self.source.refresh_from_db()
        self.assertEqual(self.batch.remaining_quantity, Decimal("7.000"))
        self.assertEqual(self.source.quantity, Decimal("7.000"))
        self.assertFalse(Product.objects.filter(barcode="456").exists())
