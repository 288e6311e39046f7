# sales/tests/test_checkout.py

from decimal import Decimal
from unittest import mock
import uuid

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase, override_settings

from products.models import Product, StockAdjustment, StockBatch
from products.services.exceptions import InvalidArgument, NotFound, StorageFailure
from products.services.stock_adjustments import mark_wastage
from products.services.stock_transfer import divide_stock
from products.tests.helpers import batch_sum, receive
from sales.models import Sale, SaleItem
from sales.services.checkout_orchestrator import CartLine, checkout


@override_settings(LEDGER_VAT_RATE=Decimal("0.15"))
class CheckoutTests(TestCase):
    """
    GUARANTEES:
    - Sale + items + stock deductions commit together or not at all
    - Totals are computed server-side from line prices
    - Batches never go below zero (floored, logged)
    """

    def setUp(self):
        self.product, self.batch = receive(
            barcode="123", quantity="10", purchase_price="2.00", selling_price="5.00"
        )

    def test_unbatched_sale_decrements_counter_only(self):
        result = checkout(
            cart_lines=[CartLine(product_id=self.product.pk, quantity="3", unit_price="5.00")]
        )

        self.product.refresh_from_db()
        self.batch.refresh_from_db()
        sale = Sale.objects.get(pk=result.sale_id)

        self.assertEqual(self.product.quantity, Decimal("7.000"))
        self.assertEqual(self.batch.remaining_quantity, Decimal("10.000"))
        self.assertEqual(result.total_amount, Decimal("15.00"))
        self.assertEqual(sale.discount_amount, Decimal("0.00"))
        self.assertEqual(sale.vat_amount, Decimal("2.25"))
        self.assertEqual(sale.payment_method, "CASH")
        self.assertEqual(result.created_at, sale.created_at)

    def test_batched_sale_then_divide(self):
        checkout(
            cart_lines=[
                CartLine(product_id=self.product.pk, batch_id=self.batch.pk, quantity="3", unit_price="5.00")
            ]
        )
        divide_stock(
            source_batch_id=self.batch.pk,
            quantity="4",
            target_barcode="456",
            target_name="Retail Pack",
            target_price="6.00",
        )

        self.batch.refresh_from_db()
        self.product.refresh_from_db()
        target = Product.objects.get(barcode="456")

        self.assertEqual(self.batch.remaining_quantity, Decimal("3.000"))
        self.assertEqual(self.product.quantity, Decimal("3.000"))
        self.assertEqual(target.quantity, Decimal("4.000"))
        self.assertEqual(batch_sum(self.product), self.product.quantity)
        self.assertEqual(batch_sum(target), target.quantity)

    def test_batched_sale_is_traced_by_sale_item_not_adjustment(self):
        result = checkout(
            cart_lines=[
                CartLine(product_id=self.product.pk, batch_id=self.batch.pk, quantity="3", unit_price="5.00")
            ]
        )

        self.assertEqual(StockAdjustment.objects.count(), 0)
        item = SaleItem.objects.get(sale_id=result.sale_id)
        self.assertEqual(item.batch_id, self.batch.pk)
        self.assertEqual(item.quantity, Decimal("3.000"))
        self.batch.refresh_from_db()
        self.assertEqual(
            self.batch.initial_quantity - item.quantity, self.batch.remaining_quantity
        )

    def test_discount_and_snapshots(self):
        result = checkout(
            cart_lines=[
                CartLine(product_id=self.product.pk, batch_id=self.batch.pk, quantity="2", unit_price="4.00")
            ],
            payment_method="card",
        )
        sale = Sale.objects.get(pk=result.sale_id)
        item = SaleItem.objects.get(sale=sale)

        self.assertEqual(sale.total_amount, Decimal("8.00"))
        self.assertEqual(sale.discount_amount, Decimal("2.00"))
        self.assertEqual(sale.vat_amount, Decimal("1.20"))
        self.assertEqual(sale.payment_method, "CARD")

        self.assertEqual(item.price, Decimal("4.00"))
        self.assertEqual(item.original_price, Decimal("5.00"))
        self.assertEqual(item.purchase_price, Decimal("2.00"))
        self.assertEqual(item.batch_id, self.batch.pk)

    @override_settings(LEDGER_VAT_RATE=Decimal("0.10"))
    def test_vat_rate_is_configurable(self):
        result = checkout(
            cart_lines=[CartLine(product_id=self.product.pk, quantity="1", unit_price="5.00")]
        )
        self.assertEqual(Sale.objects.get(pk=result.sale_id).vat_amount, Decimal("0.50"))

    def test_cost_snapshot_fallbacks(self):
        other, _ = receive(barcode="999", quantity="5", purchase_price="1.10", selling_price="3.00")
        receive(barcode="123", quantity="1", purchase_price="1.50", selling_price="5.00")

        result = checkout(
            cart_lines=[
                CartLine(product_id=self.product.pk, quantity="1", unit_price="5.00", purchase_price="0.99"),
                CartLine(product_id=self.product.pk, batch_id=self.batch.pk, quantity="1", unit_price="5.00"),
                CartLine(product_id=other.pk, quantity="1", unit_price="3.00"),
            ]
        )

        costs = list(
            SaleItem.objects.filter(sale_id=result.sale_id)
            .order_by("created_at", "id")
            .values_list("product__barcode", "batch_id", "purchase_price")
        )
        self.assertIn(("123", None, Decimal("0.99")), costs)
        self.assertIn(("123", self.batch.pk, Decimal("2.00")), costs)
        self.assertIn(("999", None, Decimal("1.10")), costs)
        self.product.refresh_from_db()
        self.assertEqual(self.product.purchase_price, Decimal("1.50"))

    def test_batch_is_floored_at_zero_and_logged(self):
        product, small = receive(barcode="777", quantity="2")

        with self.assertLogs("ledger.checkout", level="WARNING") as logs:
            checkout(
                cart_lines=[CartLine(product_id=product.pk, batch_id=small.pk, quantity="5", unit_price="5.00")]
            )

        small.refresh_from_db()
        product.refresh_from_db()
        self.assertEqual(small.remaining_quantity, Decimal("0.000"))
        self.assertEqual(product.quantity, Decimal("-3.000"))
        self.assertTrue(any("floored at zero" in line for line in logs.output))

    def test_two_lines_on_same_batch(self):
        checkout(
            cart_lines=[
                CartLine(product_id=self.product.pk, batch_id=self.batch.pk, quantity="4", unit_price="5.00"),
                CartLine(product_id=self.product.pk, batch_id=self.batch.pk, quantity="4", unit_price="5.00"),
            ]
        )
        self.batch.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(self.batch.remaining_quantity, Decimal("2.000"))
        self.assertEqual(self.product.quantity, Decimal("2.000"))

    def test_dict_lines_accepted(self):
        result = checkout(
            cart_lines=[{"product_id": str(self.product.pk), "quantity": "1", "unit_price": "5.00"}]
        )
        self.assertEqual(result.total_amount, Decimal("5.00"))

    def test_invariant_after_intake_wastage_checkout(self):
        _, second = receive(barcode="123", quantity="6")
        checkout(
            cart_lines=[CartLine(product_id=self.product.pk, batch_id=second.pk, quantity="2", unit_price="5.00")]
        )
        mark_wastage(batch_id=self.batch.pk)

        self.assertEqual(batch_sum(self.product), self.product.quantity)
        self.assertEqual(self.product.quantity, Decimal("4.000"))
        for batch in StockBatch.objects.all():
            self.assertGreaterEqual(batch.remaining_quantity, Decimal("0"))
            self.assertLessEqual(batch.remaining_quantity, batch.initial_quantity)


class CheckoutValidationTests(TestCase):
    def setUp(self):
        self.product, self.batch = receive(barcode="123", quantity="10")
        self.other, self.other_batch = receive(barcode="456", quantity="10")

    def _assert_nothing_written(self):
        self.assertEqual(Sale.objects.count(), 0)
        self.assertEqual(SaleItem.objects.count(), 0)
        self.product.refresh_from_db()
        self.batch.refresh_from_db()
        self.assertEqual(self.product.quantity, Decimal("10.000"))
        self.assertEqual(self.batch.remaining_quantity, Decimal("10.000"))

    def test_rejections(self):
        pid = self.product.pk
        cases = [
            (InvalidArgument, []),
            (InvalidArgument, [CartLine(product_id=pid, quantity="0", unit_price="1")]),
            (InvalidArgument, [CartLine(product_id=pid, quantity="-1", unit_price="1")]),
            (InvalidArgument, [CartLine(product_id=pid, quantity="1", unit_price="-1")]),
            (InvalidArgument, [CartLine(product_id="bad", quantity="1", unit_price="1")]),
            (InvalidArgument, [{"product_id": pid, "quantity": "1"}]),
            (NotFound, [CartLine(product_id=uuid.uuid4(), quantity="1", unit_price="1")]),
            (NotFound, [CartLine(product_id=pid, batch_id=uuid.uuid4(), quantity="1", unit_price="1")]),
            (InvalidArgument, [CartLine(product_id=pid, batch_id=self.other_batch.pk, quantity="1", unit_price="1")]),
        ]
        for error, lines in cases:
            with self.subTest(lines=lines):
                with self.assertRaises(error):
                    checkout(cart_lines=lines)
        self._assert_nothing_written()

    def test_values_beyond_column_limits_rejected(self):
        line = CartLine(product_id=self.product.pk, quantity="1", unit_price="5.00")
        with self.assertRaises(InvalidArgument):
            checkout(cart_lines=[line], payment_method="M" * 33)

        # 10 x 999,999,999.99 does not fit the 12-digit total column.
        big = CartLine(product_id=self.product.pk, quantity="10", unit_price="999999999.99")
        with self.assertRaises(InvalidArgument):
            checkout(cart_lines=[big])

        self._assert_nothing_written()

    def test_failure_after_first_line_rolls_back(self):
        real_save = SaleItem.save
        calls = {"n": 0}

        def failing_save(item, *args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 2:
                raise DatabaseError("connection lost")
            return real_save(item, *args, **kwargs)

        with mock.patch.object(SaleItem, "save", failing_save):
            with self.assertRaises(StorageFailure):
                checkout(
                    cart_lines=[
                        CartLine(product_id=self.product.pk, batch_id=self.batch.pk, quantity="1", unit_price="5"),
                        CartLine(product_id=self.product.pk, batch_id=self.batch.pk, quantity="1", unit_price="5"),
                    ]
                )

        self._assert_nothing_written()


class SaleImmutabilityTests(TestCase):
    def test_sale_and_items_cannot_change(self):
        product, _ = receive(barcode="123", quantity="1")
        result = checkout(cart_lines=[CartLine(product_id=product.pk, quantity="1", unit_price="5")])
        sale = Sale.objects.get(pk=result.sale_id)
        item = sale.items.get()

        with self.assertRaises(ValidationError):
            sale.save()
        with self.assertRaises(ValidationError):
            sale.delete()
        with self.assertRaises(ValidationError):
            item.save()
