# products/tests/test_intake.py

from datetime import date
from decimal import Decimal
import uuid

from django.test import TestCase

from products.models import Category, Product, StockAdjustment, StockBatch
from products.services.exceptions import InvalidArgument, NotFound
from products.services.stock_intake import intake
from purchases.models import Supplier

from .helpers import batch_sum, receive


class IntakeTests(TestCase):
    """
    Intake:
    - new barcode creates the product
    - known barcode increments quantity and overwrites metadata
    - every intake opens exactly one new batch
    """

    def test_new_barcode_creates_product_and_batch(self):
        product, batch = receive(barcode="123", quantity="10", expiry_date=date(2030, 1, 1))

        self.assertEqual(product.quantity, Decimal("10.000"))
        self.assertEqual(product.unit, "pcs")
        self.assertEqual(batch.initial_quantity, Decimal("10.000"))
        self.assertEqual(batch.remaining_quantity, Decimal("10.000"))
        self.assertEqual(batch.purchase_price, Decimal("2.00"))
        self.assertEqual(batch.expiry_date, date(2030, 1, 1))
        self.assertEqual(StockAdjustment.objects.count(), 0)

    def test_known_barcode_increments_and_overwrites(self):
        receive(barcode="123", quantity="10", name="Old name", selling_price="5.00")
        product, _ = receive(
            barcode="123",
            quantity="4",
            name="New name",
            purchase_price="2.50",
            selling_price="6.00",
        )

        self.assertEqual(Product.objects.count(), 1)
        self.assertEqual(product.quantity, Decimal("14.000"))
        self.assertEqual(product.name, "New name")
        self.assertEqual(product.purchase_price, Decimal("2.50"))
        self.assertEqual(product.selling_price, Decimal("6.00"))
        self.assertEqual(StockBatch.objects.filter(product=product).count(), 2)
        self.assertEqual(batch_sum(product), product.quantity)

    def test_names_are_upserted(self):
        receive(barcode="1", supplier_name="Acme", category_name="Dairy")
        product, batch = receive(barcode="2", supplier_name="Acme", category_name="Dairy")

        self.assertEqual(Supplier.objects.count(), 1)
        self.assertEqual(Category.objects.count(), 1)
        self.assertEqual(product.supplier.name, "Acme")
        self.assertEqual(batch.supplier_id, product.supplier_id)

    def test_latest_intake_clears_omitted_category(self):
        receive(barcode="123", category_name="Dairy")
        product, _ = receive(barcode="123")
        self.assertIsNone(product.category_id)

    def test_direct_ids_must_exist(self):
        with self.assertRaises(NotFound):
            receive(barcode="123", supplier_id=uuid.uuid4())
        self.assertEqual(Product.objects.count(), 0)

    def test_name_and_id_together_rejected(self):
        supplier = Supplier.objects.create(name="Acme")
        with self.assertRaises(InvalidArgument):
            receive(barcode="123", supplier_id=supplier.pk, supplier_name="Acme")

    def test_expiry_accepts_iso_string(self):
        _, batch = receive(expiry_date="2031-06-30")
        self.assertEqual(batch.expiry_date, date(2031, 6, 30))

    def test_invalid_input_writes_nothing(self):
        for bad in ("0", "-1", "abc", None):
            with self.subTest(quantity=bad):
                with self.assertRaises(InvalidArgument):
                    receive(quantity=bad)

        with self.assertRaises(InvalidArgument):
            intake(barcode="  ", name="x", purchase_price="1", selling_price="1", quantity="1")
        with self.assertRaises(InvalidArgument):
            receive(purchase_price="-0.01")
        with self.assertRaises(InvalidArgument):
            receive(expiry_date="31/12/2030")

        self.assertEqual(Product.objects.count(), 0)
        self.assertEqual(StockBatch.objects.count(), 0)

    def test_fractional_quantities(self):
        product, batch = receive(quantity="2.5", unit="kg")
        self.assertEqual(product.unit, "kg")
        self.assertEqual(product.quantity, Decimal("2.500"))
        self.assertEqual(batch.remaining_quantity, Decimal("2.500"))


class IntakeColumnLimitTests(TestCase):
    """Values the columns cannot hold are rejected before anything is written."""

    def test_oversized_fields_on_new_barcode(self):
        cases = {
            "name": dict(name="x" * 300),
            "unit": dict(unit="u" * 40),
            "quantity": dict(quantity="10000000000"),
            "selling_price": dict(selling_price="10000000000"),
            "tax_rate": dict(tax_rate="1000"),
            "supplier_name": dict(supplier_name="s" * 201),
        }
        for label, kwargs in cases.items():
            with self.subTest(field=label):
                with self.assertRaises(InvalidArgument):
                    receive(barcode="p1", **kwargs)

        with self.assertRaises(InvalidArgument):
            intake(barcode="b" * 129, name="x", purchase_price="1", selling_price="1", quantity="1")

        self.assertEqual(Product.objects.count(), 0)
        self.assertEqual(StockBatch.objects.count(), 0)
        self.assertEqual(Supplier.objects.count(), 0)

    def test_oversized_fields_on_known_barcode_leave_product_untouched(self):
        product, _ = receive(barcode="p1", name="Tea", unit="box")

        for kwargs in (dict(name="x" * 300), dict(unit="u" * 40), dict(quantity="10000000000")):
            with self.subTest(field=next(iter(kwargs))):
                with self.assertRaises(InvalidArgument):
                    receive(barcode="p1", **kwargs)

        product.refresh_from_db()
        self.assertEqual(product.name, "Tea")
        self.assertEqual(product.unit, "box")
        self.assertEqual(product.quantity, Decimal("10.000"))
        self.assertEqual(StockBatch.objects.filter(product=product).count(), 1)

    def test_counter_overflow_rejected(self):
        product, _ = receive(barcode="p1", quantity="999999999")

        with self.assertRaises(InvalidArgument):
            receive(barcode="p1", quantity="1")

        product.refresh_from_db()
        self.assertEqual(product.quantity, Decimal("999999999.000"))
        self.assertEqual(StockBatch.objects.filter(product=product).count(), 1)

    def test_values_at_the_limit_are_accepted(self):
        product, batch = receive(
            barcode="b" * 128,
            name="n" * 255,
            unit="u" * 16,
            quantity="999999999.999",
            tax_rate="999.99",
        )
        self.assertEqual(product.quantity, Decimal("999999999.999"))
        self.assertEqual(product.tax_rate, Decimal("999.99"))
        self.assertEqual(batch.initial_quantity, Decimal("999999999.999"))
