from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from authentication.core.exceptions import (
    BelowMinimumPurchase,
    CartEmpty,
    CouponExpired,
    CouponInactive,
    CouponInUse,
    CouponNotFound,
    DuplicateCode,
    InvalidDateRange,
    InvalidDiscountValue,
    InvalidInput,
    NoCouponApplied,
    NotApplicableToCart,
    UsageLimitReached,
)
from catalog.tests.factories import make_product, make_tree
from store.models import Coupon
from store.services import CartService, CouponEvaluator, CouponService, round_amount


def unsaved_coupon(**overrides):
    values = {
        'code': 'TEST',
        'discount_type': Coupon.DiscountType.PERCENTAGE,
        'discount_value': Decimal('10'),
        'min_purchase_amount': Decimal('0'),
        'expire_at': timezone.now() + timedelta(days=1),
        'is_active': True,
        'applicable_to': Coupon.ApplicableTo.ALL,
    }
    values.update(overrides)
    return Coupon(**values)


class CouponEvaluatorTests(SimpleTestCase):
    def setUp(self):
        self.evaluator = CouponEvaluator()

    def test_percentage_is_capped(self):
        coupon = unsaved_coupon(discount_value=Decimal('20'), max_discount_amount=Decimal('150'))
        result = self.evaluator.evaluate(coupon, Decimal('1000'))
        self.assertEqual(result['discount_amount'], Decimal('150'))
        self.assertEqual(result['final_amount'], Decimal('850'))

    def test_fixed_never_exceeds_total(self):
        coupon = unsaved_coupon(discount_type=Coupon.DiscountType.FIXED, discount_value=Decimal('100'))
        result = self.evaluator.evaluate(coupon, Decimal('60'))
        self.assertEqual(result['discount_amount'], Decimal('60'))
        self.assertEqual(result['final_amount'], Decimal('0'))

    def test_halves_round_away_from_zero(self):
        self.assertEqual(round_amount(Decimal('2.5')), Decimal('3'))
        self.assertEqual(round_amount(Decimal('7.49')), Decimal('7'))

        result = self.evaluator.evaluate(unsaved_coupon(discount_value=Decimal('25')), Decimal('10'))
        self.assertEqual(result['discount_amount'], Decimal('3'))
        self.assertEqual(result['final_amount'], Decimal('8'))

    def test_inactive_is_reported_before_expired(self):
        coupon = unsaved_coupon(is_active=False, expire_at=timezone.now() - timedelta(days=1))
        with self.assertRaises(CouponInactive):
            self.evaluator.validate(coupon, Decimal('100'))

    def test_expired(self):
        coupon = unsaved_coupon(expire_at=timezone.now() - timedelta(minutes=1))
        with self.assertRaises(CouponExpired):
            self.evaluator.validate(coupon, Decimal('100'))

    def test_usage_limit(self):
        coupon = unsaved_coupon(usage_limit=1, used_count=1)
        with self.assertRaises(UsageLimitReached):
            self.evaluator.validate(coupon, Decimal('100'))
        self.evaluator.validate(coupon, Decimal('100'), claimed=True)

    def test_below_minimum_mentions_amount(self):
        coupon = unsaved_coupon(min_purchase_amount=Decimal('200.00'))
        with self.assertRaisesMessage(BelowMinimumPurchase, '200.00'):
            self.evaluator.validate(coupon, Decimal('150'))


class CouponServiceTests(TestCase):
    def setUp(self):
        self.service = CouponService()
        cat, sub, self.brand = make_tree()
        self.product = make_product(self.brand)

    def _payload(self, **overrides):
        data = {
            'code': 'spring',
            'discount_type': 'percentage',
            'discount_value': Decimal('15'),
            'expire_at': timezone.now() + timedelta(days=30),
        }
        data.update(overrides)
        return data

    def test_code_is_uppercased_and_unique(self):
        coupon = self.service.create(self._payload(code='  spring '))
        self.assertEqual(coupon.code, 'SPRING')
        self.assertEqual(coupon.slug, 'spring')
        with self.assertRaises(DuplicateCode):
            self.service.create(self._payload(code='Spring'))

    def test_percentage_over_hundred(self):
        with self.assertRaises(InvalidDiscountValue):
            self.service.create(self._payload(discount_value=Decimal('120')))

    def test_expiry_must_be_in_future(self):
        with self.assertRaises(InvalidDateRange):
            self.service.create(self._payload(expire_at=timezone.now() - timedelta(days=1)))
        self.assertFalse(Coupon.objects.exists())

    def test_used_coupon_cannot_be_deleted_or_recoded(self):
        coupon = self.service.create(self._payload())
        Coupon.objects.filter(pk=coupon.pk).update(used_count=1)

        with self.assertRaises(CouponInUse):
            self.service.delete(coupon.slug)
        with self.assertRaises(CouponInUse):
            self.service.update(coupon.slug, {'code': 'SUMMER'})

        updated = self.service.update(coupon.slug, {'description': 'Still editable'})
        self.assertEqual(updated.description, 'Still editable')

    def test_toggle_and_active_listing(self):
        coupon = self.service.create(self._payload())
        self.assertEqual(list(self.service.list_active()), [coupon])

        self.service.toggle_status(coupon.slug)
        self.assertFalse(self.service.list_active().exists())
        with self.assertRaises(CouponInactive):
            self.service.get_by_code('spring')

    def test_verify_requires_cart_total(self):
        self.service.create(self._payload())
        with self.assertRaises(InvalidInput):
            self.service.verify('SPRING')
        with self.assertRaises(InvalidInput):
            self.service.verify('SPRING', cart_total=Decimal('-1'))

    def test_verify_product_restricted_coupon(self):
        self.service.create(self._payload(applicable_to='products', applicable_products=[self.product.pk]))
        with self.assertRaises(InvalidInput):
            self.service.verify('SPRING', cart_total=Decimal('100'))

        result = self.service.verify('SPRING', cart_total=Decimal('100'), product_ids=[self.product.pk])
        self.assertEqual(result['discount_amount'], Decimal('15'))
        self.assertEqual(result['final_amount'], Decimal('85'))

    def test_verify_unknown_code(self):
        with self.assertRaises(CouponNotFound):
            self.service.verify('NOPE', cart_total=Decimal('10'))


class CartCouponTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(email='cust@example.com', password='pass123')
        cat, sub, self.brand = make_tree()
        self.shoe = make_product(self.brand, name='Runner', price='150.00')
        self.sock = make_product(self.brand, name='Sock Pack', price='100.00')
        self.cart = CartService()
        self.coupons = CouponService()

    def _fixed_coupon(self, **overrides):
        data = {
            'code': 'SAVE100',
            'discount_type': 'fixed',
            'discount_value': Decimal('100'),
            'min_purchase_amount': Decimal('200'),
            'expire_at': timezone.now() + timedelta(days=7),
        }
        data.update(overrides)
        return self.coupons.create(data)

    def test_fixed_coupon_minimum_purchase(self):
        coupon = self._fixed_coupon()
        self.cart.add_to_cart(self.user.pk, self.shoe.pk)

        with self.assertRaises(BelowMinimumPurchase):
            self.cart.apply_coupon(self.user.pk, 'SAVE100')

        self.cart.add_to_cart(self.user.pk, self.sock.pk)
        result = self.cart.apply_coupon(self.user.pk, 'save100')

        self.assertEqual(result['cart_total'], Decimal('250'))
        self.assertEqual(result['discount_amount'], Decimal('100'))
        self.assertEqual(result['final_amount'], Decimal('150'))
        self.assertEqual(result['cart'].coupon, coupon)

    def test_emptying_the_cart_gives_back_the_coupon_use(self):
        coupon = self._fixed_coupon(min_purchase_amount=Decimal('0'))
        self.cart.add_to_cart(self.user.pk, self.shoe.pk)
        self.cart.apply_coupon(self.user.pk, 'SAVE100')

        self.assertIsNone(self.cart.remove_selected(self.user.pk, [self.shoe.pk]))
        coupon.refresh_from_db()
        self.assertEqual(coupon.used_count, 0)

    def test_apply_then_remove_restores_usage(self):
        coupon = self._fixed_coupon(min_purchase_amount=Decimal('0'))
        self.cart.add_to_cart(self.user.pk, self.shoe.pk)

        self.cart.apply_coupon(self.user.pk, 'SAVE100')
        coupon.refresh_from_db()
        self.assertEqual(coupon.used_count, 1)

        cart = self.cart.remove_coupon(self.user.pk)
        coupon.refresh_from_db()
        self.assertEqual(coupon.used_count, 0)
        self.assertIsNone(cart.coupon)
        self.assertEqual(cart.discount_amount, Decimal('0'))
        self.assertIsNone(cart.discount_type)

    def test_reapplying_same_coupon_counts_once(self):
        coupon = self._fixed_coupon(min_purchase_amount=Decimal('0'), usage_limit=1)
        self.cart.add_to_cart(self.user.pk, self.shoe.pk)

        self.cart.apply_coupon(self.user.pk, 'SAVE100')
        self.cart.apply_coupon(self.user.pk, 'SAVE100')
        coupon.refresh_from_db()
        self.assertEqual(coupon.used_count, 1)

    def test_switching_coupon_releases_previous(self):
        first = self._fixed_coupon(min_purchase_amount=Decimal('0'))
        second = self._fixed_coupon(code='TAKE10', discount_value=Decimal('10'), min_purchase_amount=Decimal('0'))
        self.cart.add_to_cart(self.user.pk, self.shoe.pk)

        self.cart.apply_coupon(self.user.pk, first.code)
        self.cart.apply_coupon(self.user.pk, second.code)

        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual((first.used_count, second.used_count), (0, 1))

    def test_coupon_limited_to_other_products(self):
        self._fixed_coupon(
            min_purchase_amount=Decimal('0'), applicable_to='products', applicable_products=[self.sock.pk]
        )
        self.cart.add_to_cart(self.user.pk, self.shoe.pk)
        with self.assertRaises(NotApplicableToCart):
            self.cart.apply_coupon(self.user.pk, 'SAVE100')

    def test_apply_without_cart(self):
        self._fixed_coupon()
        with self.assertRaises(CartEmpty):
            self.cart.apply_coupon(self.user.pk, 'SAVE100')

    def test_apply_unknown_code(self):
        self.cart.add_to_cart(self.user.pk, self.shoe.pk)
        with self.assertRaises(CouponNotFound):
            self.cart.apply_coupon(self.user.pk, 'MISSING')

    def test_remove_when_nothing_applied(self):
        self.cart.add_to_cart(self.user.pk, self.shoe.pk)
        with self.assertRaises(NoCouponApplied):
            self.cart.remove_coupon(self.user.pk)
