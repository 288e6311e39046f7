# products/tests/test_lookups.py

from datetime import date
from decimal import Decimal
import uuid

from django.test import TestCase

from products.services.exceptions import NotFound
from products.services.lookups import (
    SEARCH_LIMIT,
    batch_adjustments,
    get_batch,
    get_product_by_barcode,
    get_product_by_id,
    reconcile_product,
    search_products,
)
from products.services.stock_adjustments import mark_wastage

from .helpers import receive


class LookupTests(TestCase):
    def setUp(self):
        self.product, self.late = receive(
            barcode="5000", name="Whole Milk", quantity="2", expiry_date=date(2030, 3, 1)
        )
        _, self.early = receive(
            barcode="5000", name="Whole Milk", quantity="2", expiry_date=date(2030, 1, 1)
        )
        _, self.wasted = receive(barcode="5000", name="Whole Milk", quantity="1")
        mark_wastage(batch_id=self.wasted.pk)

    def test_by_barcode_returns_in_stock_batches_earliest_first(self):
        product = get_product_by_barcode(" 5000 ")
        self.assertEqual(
            [b.pk for b in product.stock_batches.all()],
            [self.early.pk, self.late.pk],
        )

    def test_by_barcode_unknown_returns_none(self):
        self.assertIsNone(get_product_by_barcode("nope"))
        self.assertIsNone(get_product_by_barcode(""))

    def test_by_id_can_include_empty_batches(self):
        product = get_product_by_id(self.product.pk, include_all_batches=True)
        self.assertEqual(len(product.stock_batches.all()), 3)
        self.assertIsNone(get_product_by_id(uuid.uuid4()))

    def test_search(self):
        receive(barcode="5001", name="Skimmed Milk")

        self.assertEqual(search_products("m"), [])
        names = [p.name for p in search_products("milk")]
        self.assertEqual(names, ["Skimmed Milk", "Whole Milk"])
        self.assertEqual([p.barcode for p in search_products("5001")], ["5001"])

    def test_search_is_capped(self):
        for i in range(SEARCH_LIMIT + 3):
            receive(barcode=f"77{i:02d}", name=f"Bread {i:02d}")
        self.assertEqual(len(search_products("bread")), SEARCH_LIMIT)

    def test_batch_and_history(self):
        self.assertEqual(get_batch(self.wasted.pk).product_id, self.product.pk)
        self.assertEqual([a.reason for a in batch_adjustments(self.wasted.pk)], ["WASTAGE"])
        with self.assertRaises(NotFound):
            get_batch(uuid.uuid4())

    def test_reconcile_consistent_after_intake_and_wastage(self):
        report = reconcile_product(self.product.pk)
        self.assertEqual(report.product_quantity, Decimal("4.000"))
        self.assertEqual(report.batch_quantity, Decimal("4.000"))
        self.assertTrue(report.is_consistent)

        with self.assertRaises(NotFound):
            reconcile_product(uuid.uuid4())
