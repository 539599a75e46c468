from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from authentication.core.exceptions import DuplicateName, InvalidDateRange, TargetNotFound
from catalog.models import Brand, Discount
from catalog.services import DiscountService
from .factories import make_product, make_tree


class DiscountAttachmentTests(TestCase):
    def setUp(self):
        self.service = DiscountService()
        self.cat, self.sub, self.brand = make_tree()
        self.other_brand = Brand.objects.create(name='Other', slug='other', sub_category=self.sub)
        self.now = timezone.now()

    def _payload(self, **overrides):
        data = {
            'discount_name': 'Brand week',
            'discount_type': 'percentage',
            'discount_plan': 'brand',
            'target': self.brand.pk,
            'valid_from': self.now,
            'valid_to': self.now + timedelta(days=7),
            'value_by_percentage': 15,
        }
        data.update(overrides)
        return data

    def test_create_attaches_to_plan_target(self):
        discount = self.service.create(self._payload())
        self.assertEqual(discount.target, self.brand)
        self.assertEqual(list(self.brand.discounts.all()), [discount])

    def test_target_for_other_plan_is_not_set(self):
        discount = self.service.create(self._payload())
        self.assertIsNone(discount.target_category)
        self.assertIsNone(discount.target_product)

    def test_missing_target(self):
        with self.assertRaises(TargetNotFound):
            self.service.create(self._payload(target=9999))
        with self.assertRaises(TargetNotFound):
            self.service.create(self._payload(target=None))
        self.assertFalse(Discount.objects.exists())

    def test_flat_plan_takes_no_target(self):
        discount = self.service.create(self._payload(discount_plan='flat', target=self.brand.pk))
        self.assertIsNone(discount.target)
        self.assertFalse(self.brand.discounts.exists())

    def test_many_discounts_may_share_a_target(self):
        self.service.create(self._payload())
        self.service.create(self._payload(discount_name='Brand weekend'))
        self.assertEqual(self.brand.discounts.count(), 2)

    def test_retarget_moves_link(self):
        discount = self.service.create(self._payload())
        self.service.update(discount.slug, {'target': self.other_brand.pk})

        self.assertFalse(self.brand.discounts.exists())
        self.assertEqual(self.other_brand.discounts.get().pk, discount.pk)

    def test_plan_change_requires_target_of_new_kind(self):
        discount = self.service.create(self._payload())
        with self.assertRaises(TargetNotFound):
            self.service.update(discount.slug, {'discount_plan': 'product'})

        product = make_product(self.brand)
        self.service.update(discount.slug, {'discount_plan': 'product', 'target': product.pk})
        discount.refresh_from_db()
        self.assertIsNone(discount.target_brand)
        self.assertEqual(discount.target_product, product)

    def test_unchanged_target_is_noop(self):
        discount = self.service.create(self._payload())
        self.service.update(discount.slug, {'description': 'Same target'})
        self.assertEqual(self.brand.discounts.get().description, 'Same target')

    def test_rename_uniqueness(self):
        self.service.create(self._payload())
        second = self.service.create(self._payload(discount_name='Other deal'))
        with self.assertRaises(DuplicateName):
            self.service.update(second.slug, {'discount_name': 'Brand week'})

    def test_end_must_follow_start(self):
        with self.assertRaises(InvalidDateRange):
            self.service.create(self._payload(valid_to=self.now - timedelta(days=1)))

    def test_delete_detaches(self):
        discount = self.service.create(self._payload())
        self.service.delete(discount.slug)
        self.assertFalse(self.brand.discounts.exists())
