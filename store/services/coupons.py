import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from authentication.core.exceptions import (
    BelowMinimumPurchase,
    CouponExpired,
    CouponInactive,
    CouponInUse,
    CouponNotFound,
    DuplicateCode,
    InvalidDateRange,
    InvalidDiscountValue,
    InvalidInput,
    NotApplicableToCart,
    ProductNotFound,
    UsageLimitReached,
)
from catalog.models import Product
from catalog.services.slugs import assign_slug
from store.models import Coupon

logger = logging.getLogger(__name__)


def round_amount(value):
    """Round to the nearest whole currency unit, halves away from zero."""
    return Decimal(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP)


class CouponEvaluator:
    """
    Pure checks and arithmetic for a coupon against a cart total.

    Nothing here touches the database except reading the coupon's
    product restrictions.
    """

    @staticmethod
    def validate(coupon, cart_total, product_ids=(), claimed=False):
        """``claimed`` means the caller already holds one of the coupon's uses."""
        if not coupon.is_active:
            raise CouponInactive()
        if coupon.is_expired:
            raise CouponExpired()
        if coupon.is_usage_limit_reached and not claimed:
            raise UsageLimitReached()
        if cart_total < coupon.min_purchase_amount:
            raise BelowMinimumPurchase(
                f"Minimum purchase amount of {coupon.min_purchase_amount} required for this coupon"
            )

        if coupon.applicable_to == Coupon.ApplicableTo.PRODUCTS:
            allowed = set(coupon.applicable_products.values_list('pk', flat=True))
            if allowed and not allowed.intersection(product_ids):
                raise NotApplicableToCart()

    @staticmethod
    def calculate(coupon, cart_total):
        if coupon.discount_type == Coupon.DiscountType.PERCENTAGE:
            discount = cart_total * coupon.discount_value / Decimal('100')
            if coupon.max_discount_amount is not None and discount > coupon.max_discount_amount:
                discount = coupon.max_discount_amount
        else:
            discount = min(coupon.discount_value, cart_total)
        return discount

    def evaluate(self, coupon, cart_total, product_ids=(), claimed=False):
        cart_total = Decimal(cart_total)
        self.validate(coupon, cart_total, product_ids, claimed=claimed)
        discount = self.calculate(coupon, cart_total)
        final = max(Decimal('0'), cart_total - discount)
        return {
            'cart_total': cart_total,
            'discount_amount': round_amount(discount),
            'final_amount': round_amount(final),
        }


class CouponService:
    editable_fields = (
        'description', 'discount_type', 'discount_value', 'min_purchase_amount',
        'max_discount_amount', 'expire_at', 'usage_limit', 'is_active', 'applicable_to',
    )

    def __init__(self, evaluator=None):
        self.evaluator = evaluator or CouponEvaluator()

    # ---------------------------
    # LOOKUPS
    # ---------------------------
    def list(self, is_active=None, discount_type=None):
        qs = Coupon.objects.prefetch_related('applicable_products')
        if is_active is not None:
            qs = qs.filter(is_active=is_active)
        if discount_type:
            qs = qs.filter(discount_type=discount_type)
        return qs

    def list_active(self):
        return self.list(is_active=True).filter(expire_at__gt=timezone.now())

    def get(self, slug):
        try:
            return Coupon.objects.get(slug=slug)
        except Coupon.DoesNotExist:
            raise CouponNotFound("Coupon not found")

    def get_by_code(self, code):
        """Fetch a coupon a customer may still redeem."""
        try:
            coupon = Coupon.objects.get(code=self.normalize_code(code))
        except Coupon.DoesNotExist:
            raise CouponNotFound()

        if not coupon.is_active:
            raise CouponInactive()
        if coupon.is_expired:
            raise CouponExpired()
        if coupon.is_usage_limit_reached:
            raise UsageLimitReached()
        return coupon

    @staticmethod
    def normalize_code(code):
        return (code or '').strip().upper()

    # ---------------------------
    # RULES
    # ---------------------------
    @staticmethod
    def _ensure_code_free(code, exclude_pk=None):
        qs = Coupon.objects.filter(code=code)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise DuplicateCode()

    @staticmethod
    def _validate_values(coupon):
        if coupon.discount_value is None or coupon.discount_value < 0:
            raise InvalidDiscountValue("Discount value cannot be negative")
        if coupon.discount_type == Coupon.DiscountType.PERCENTAGE and coupon.discount_value > 100:
            raise InvalidDiscountValue("Percentage discount cannot exceed 100")
        if coupon.usage_limit is not None and coupon.usage_limit < 1:
            raise InvalidInput("Usage limit must be at least 1")

    @staticmethod
    def _resolve_products(product_ids):
        products = list(Product.objects.filter(pk__in=product_ids))
        if len(products) != len(set(product_ids)):
            raise ProductNotFound("One or more applicable products do not exist")
        return products

    # ---------------------------
    # CREATE
    # ---------------------------
    @transaction.atomic
    def create(self, data):
        code = self.normalize_code(data['code'])
        self._ensure_code_free(code)

        coupon = Coupon(code=code, slug=assign_slug(code, Coupon))
        for field in self.editable_fields:
            if field in data:
                setattr(coupon, field, data[field])
        self._validate_values(coupon)
        if coupon.expire_at <= timezone.now():
            raise InvalidDateRange("Expiry date must be in the future")

        products = self._resolve_products(data.get('applicable_products') or [])
        coupon.save()
        coupon.applicable_products.set(products)

        logger.info(f"Coupon created: {coupon.code} ({coupon.discount_type} {coupon.discount_value})")
        return coupon

    # ---------------------------
    # UPDATE
    # ---------------------------
    @transaction.atomic
    def update(self, slug, data):
        coupon = self.get(slug)

        if 'code' in data:
            code = self.normalize_code(data['code'])
            if code != coupon.code:
                if coupon.used_count > 0:
                    raise CouponInUse("Cannot change code of a coupon that has been used")
                self._ensure_code_free(code, exclude_pk=coupon.pk)
                coupon.code = code
                coupon.slug = assign_slug(code, Coupon, current_id=coupon.pk)

        for field in self.editable_fields:
            if field in data:
                setattr(coupon, field, data[field])
        self._validate_values(coupon)
        coupon.save()

        if 'applicable_products' in data:
            coupon.applicable_products.set(self._resolve_products(data['applicable_products'] or []))

        logger.info(f"Coupon updated: {coupon.code}")
        return coupon

    @transaction.atomic
    def toggle_status(self, slug):
        coupon = self.get(slug)
        coupon.is_active = not coupon.is_active
        coupon.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Coupon {coupon.code} {'activated' if coupon.is_active else 'deactivated'}")
        return coupon

    # ---------------------------
    # DELETE
    # ---------------------------
    @transaction.atomic
    def delete(self, slug):
        coupon = self.get(slug)
        if coupon.used_count > 0:
            raise CouponInUse("Cannot delete a coupon that has been used. Consider deactivating it instead.")
        coupon.delete()
        logger.info(f"Coupon deleted: {coupon.code}")

    # ---------------------------
    # USAGE COUNTERS
    # ---------------------------
    @staticmethod
    def claim(coupon):
        """Take one use of the coupon; fails when the limit was reached meanwhile."""
        qs = Coupon.objects.filter(pk=coupon.pk)
        if coupon.usage_limit is not None:
            qs = qs.filter(used_count__lt=F('usage_limit'))
        if not qs.update(used_count=F('used_count') + 1):
            raise UsageLimitReached()
        coupon.refresh_from_db(fields=['used_count'])

    @staticmethod
    def release(coupon):
        Coupon.objects.filter(pk=coupon.pk, used_count__gt=0).update(used_count=F('used_count') - 1)
        coupon.refresh_from_db(fields=['used_count'])

    # ---------------------------
    # VERIFY
    # ---------------------------
    def verify(self, code, cart_total=None, product_ids=None):
        """Evaluate a coupon against a caller-supplied cart without touching any cart."""
        if cart_total is None or Decimal(cart_total) < 0:
            raise InvalidInput("Valid cart total is required")

        try:
            coupon = Coupon.objects.get(code=self.normalize_code(code))
        except Coupon.DoesNotExist:
            raise CouponNotFound()

        if (
            coupon.applicable_to == Coupon.ApplicableTo.PRODUCTS
            and coupon.applicable_products.exists()
            and not product_ids
        ):
            raise InvalidInput("Product IDs are required for product-specific coupons")

        result = self.evaluator.evaluate(coupon, cart_total, product_ids or ())
        result['coupon'] = coupon
        result['savings'] = result['discount_amount']
        return result
