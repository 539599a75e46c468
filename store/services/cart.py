import logging
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F, Sum

from authentication.core.exceptions import (
    CartEmpty,
    CartNotFound,
    CouponNotFound,
    InsufficientStock,
    InvalidQuantity,
    MaxQuantityReached,
    MinQuantityReached,
    NoCouponApplied,
    OutOfStock,
    ProductNotFound,
    ProductNotInCart,
    UserNotFound,
)
from catalog.models import Product
from commerce_api.conf import StoreConfig
from store.models import Cart, CartItem, Coupon
from store.services.coupons import CouponService

logger = logging.getLogger(__name__)


class CartService:
    """
    Per-customer cart with stock moving in lockstep with line quantities.

    Every unit that enters a cart leaves the product's stock and every unit
    that leaves a cart goes back, so ``stock + sum(quantities)`` is constant
    for a product. Mutations lock the cart row and change stock with
    conditional updates, so the last unit cannot be handed out twice.
    A cart that loses its last line is deleted.
    """

    def __init__(self, config=None, coupons=None):
        self.config = config or StoreConfig.from_settings()
        self.coupons = coupons or CouponService()

    # ---------------------------
    # LOOKUPS
    # ---------------------------
    @staticmethod
    def resolve_user(user_id):
        try:
            return get_user_model().objects.get(pk=user_id)
        except (get_user_model().DoesNotExist, ValueError, TypeError):
            raise UserNotFound()

    @staticmethod
    def resolve_product(product_id):
        try:
            return Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise ProductNotFound()

    @staticmethod
    def _locked_cart(user_id, missing=CartNotFound):
        cart = Cart.objects.select_for_update().filter(customer_id=user_id).first()
        if cart is None:
            raise missing()
        return cart

    @staticmethod
    def _get_item(cart, product_id):
        item = cart.items.select_related('product').filter(product_id=product_id).first()
        if item is None:
            raise ProductNotInCart()
        return item

    def get_cart(self, user_id):
        return (
            Cart.objects.filter(customer_id=user_id)
            .select_related('coupon')
            .prefetch_related('items__product')
            .first()
        )

    # ---------------------------
    # STOCK
    # ---------------------------
    @staticmethod
    def take_stock(product_id, units, error=OutOfStock):
        """Move ``units`` out of stock, or raise ``error`` if there are not that many."""
        updated = Product.objects.filter(pk=product_id, stock__gte=units).update(stock=F('stock') - units)
        if not updated:
            raise error()

    @staticmethod
    def return_stock(product_id, units):
        Product.objects.filter(pk=product_id).update(stock=F('stock') + units)

    def add_unit(self, cart, product):
        """Put one more unit of ``product`` in a locked cart, creating the line if needed."""
        item = cart.items.filter(product=product).first()
        if item is not None and item.quantity >= self.config.cart_max_quantity:
            raise MaxQuantityReached()

        self.take_stock(product.pk, 1)
        if item is None:
            item = CartItem.objects.create(cart=cart, product=product, quantity=1)
        else:
            item.quantity += 1
            item.save(update_fields=['quantity'])
        return item

    def _drop_if_empty(self, cart):
        if cart.items.exists():
            return cart
        if cart.coupon_id is not None:
            self.coupons.release(cart.coupon)
        cart.delete()
        logger.info(f"Cart for user {cart.customer_id} emptied and removed")
        return None

    @transaction.atomic
    def drop_emptied(self, cart_ids):
        """Delete those of the given carts that lost their last line elsewhere."""
        carts = Cart.objects.select_for_update().select_related('coupon').filter(pk__in=cart_ids)
        return sum(1 for cart in carts if self._drop_if_empty(cart) is None)

    # ---------------------------
    # LINE ITEMS
    # ---------------------------
    @transaction.atomic
    def add_to_cart(self, user_id, product_id):
        user = self.resolve_user(user_id)
        product = self.resolve_product(product_id)
        if product.stock < 1:
            raise OutOfStock()

        cart, created = Cart.objects.select_for_update().get_or_create(customer=user)
        if created:
            logger.info(f"Cart created for user {user.pk}")

        item = self.add_unit(cart, product)
        logger.info(f"User {user.pk} added product {product.pk} to cart (qty={item.quantity})")
        return cart

    @transaction.atomic
    def add_quantity(self, user_id, product_id):
        cart = self._locked_cart(user_id)
        item = self._get_item(cart, product_id)

        if item.quantity >= self.config.cart_max_quantity:
            raise MaxQuantityReached()
        if item.product.stock < 1:
            raise OutOfStock()

        self.take_stock(item.product_id, 1)
        item.quantity += 1
        item.save(update_fields=['quantity'])
        return cart

    @transaction.atomic
    def subtract_quantity(self, user_id, product_id):
        cart = self._locked_cart(user_id)
        item = self._get_item(cart, product_id)

        if item.quantity <= self.config.cart_min_quantity:
            raise MinQuantityReached()

        self.return_stock(item.product_id, 1)
        item.quantity -= 1
        item.save(update_fields=['quantity'])
        return cart

    @transaction.atomic
    def set_quantity(self, user_id, product_id, quantity):
        if not self.config.cart_min_quantity <= quantity <= self.config.cart_max_quantity:
            raise InvalidQuantity(
                f"Quantity must be between {self.config.cart_min_quantity} "
                f"and {self.config.cart_max_quantity}"
            )

        cart = self._locked_cart(user_id)
        item = self._get_item(cart, product_id)

        delta = quantity - item.quantity
        if delta > 0:
            self.take_stock(item.product_id, delta, error=InsufficientStock)
        elif delta < 0:
            self.return_stock(item.product_id, -delta)

        item.quantity = quantity
        item.save(update_fields=['quantity'])
        logger.info(f"User {user_id} set product {product_id} quantity to {quantity} (delta={delta})")
        return cart

    @transaction.atomic
    def remove_selected(self, user_id, product_ids):
        """Drop the given lines, putting their units back on the shelf."""
        cart = self._locked_cart(user_id)
        items = list(cart.items.filter(product_id__in=product_ids))

        for item in items:
            self.return_stock(item.product_id, item.quantity)
        cart.items.filter(pk__in=[item.pk for item in items]).delete()

        logger.info(f"User {user_id} removed {len(items)} product(s) from cart")
        return self._drop_if_empty(cart)

    # ---------------------------
    # TOTALS
    # ---------------------------
    def count_items(self, user_id):
        total = CartItem.objects.filter(cart__customer_id=user_id).aggregate(total=Sum('quantity'))['total']
        return total or 0

    def total_price(self, user_id):
        cart = self.get_cart(user_id)
        if cart is None:
            return Decimal('0')
        return cart.total

    # ---------------------------
    # COUPONS
    # ---------------------------
    @transaction.atomic
    def apply_coupon(self, user_id, code):
        cart = self._locked_cart(user_id, missing=CartEmpty)

        coupon = Coupon.objects.select_for_update().filter(
            code=self.coupons.normalize_code(code)
        ).first()
        if coupon is None:
            raise CouponNotFound()

        cart_total = cart.total
        product_ids = list(cart.items.values_list('product_id', flat=True))
        reapplied = cart.coupon_id == coupon.pk
        result = self.coupons.evaluator.evaluate(coupon, cart_total, product_ids, claimed=reapplied)

        if not reapplied:
            if cart.coupon_id is not None:
                self.coupons.release(cart.coupon)
            self.coupons.claim(coupon)

        cart.coupon = coupon
        cart.discount_amount = result['discount_amount']
        cart.discount_type = coupon.discount_type
        cart.save(update_fields=['coupon', 'discount_amount', 'discount_type', 'updated_at'])

        logger.info(f"Coupon {coupon.code} applied to cart of user {user_id}: -{result['discount_amount']}")
        return {
            'cart': cart,
            'cart_total': result['cart_total'],
            'discount_amount': result['discount_amount'],
            'final_amount': result['final_amount'],
            'savings': result['discount_amount'],
        }

    @transaction.atomic
    def remove_coupon(self, user_id):
        cart = self._locked_cart(user_id)
        if cart.coupon_id is None:
            raise NoCouponApplied()

        coupon = cart.coupon
        self.coupons.release(coupon)

        cart.coupon = None
        cart.discount_amount = Decimal('0')
        cart.discount_type = None
        cart.save(update_fields=['coupon', 'discount_amount', 'discount_type', 'updated_at'])

        logger.info(f"Coupon {coupon.code} removed from cart of user {user_id}")
        return cart
