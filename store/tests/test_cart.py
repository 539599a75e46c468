from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from authentication.core.exceptions import (
    CartNotFound,
    InsufficientStock,
    InvalidQuantity,
    MaxQuantityReached,
    MinQuantityReached,
    OutOfStock,
    ProductNotFound,
    ProductNotInCart,
    UserNotFound,
)
from catalog.models import Product
from catalog.tests.factories import make_product, make_tree
from commerce_api.conf import StoreConfig
from store.models import Cart, CartItem
from store.services import CartService


class CartEngineTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(email='cust@example.com', password='pass123')
        cat, sub, self.brand = make_tree()
        self.product = make_product(self.brand, stock=5)
        self.service = CartService(config=StoreConfig())

    def _stock(self, product=None):
        return Product.objects.get(pk=(product or self.product).pk).stock

    def _quantity(self, product=None):
        return CartItem.objects.get(cart__customer=self.user, product=product or self.product).quantity

    def test_add_quantity_until_stock_runs_out(self):
        self.service.add_to_cart(self.user.pk, self.product.pk)
        self.assertEqual(self._quantity(), 1)

        for _ in range(4):
            self.service.add_quantity(self.user.pk, self.product.pk)
        self.assertEqual(self._quantity(), 5)
        self.assertEqual(self._stock(), 0)

        with self.assertRaises(OutOfStock):
            self.service.add_quantity(self.user.pk, self.product.pk)
        self.assertEqual(self._quantity(), 5)
        self.assertEqual(self._stock(), 0)

    def test_stock_plus_cart_quantity_is_constant(self):
        steps = [
            lambda: self.service.add_to_cart(self.user.pk, self.product.pk),
            lambda: self.service.add_quantity(self.user.pk, self.product.pk),
            lambda: self.service.set_quantity(self.user.pk, self.product.pk, 4),
            lambda: self.service.subtract_quantity(self.user.pk, self.product.pk),
            lambda: self.service.set_quantity(self.user.pk, self.product.pk, 2),
            lambda: self.service.add_to_cart(self.user.pk, self.product.pk),
        ]
        for step in steps:
            step()
            self.assertEqual(self._stock() + self._quantity(), 5)

        self.service.remove_selected(self.user.pk, [self.product.pk])
        self.assertEqual(self._stock(), 5)

    def test_set_quantity_outside_bounds(self):
        self.service.add_to_cart(self.user.pk, self.product.pk)
        for quantity in (0, 101):
            with self.assertRaises(InvalidQuantity):
                self.service.set_quantity(self.user.pk, self.product.pk, quantity)
        self.assertEqual(self._quantity(), 1)

    def test_set_quantity_beyond_stock(self):
        self.service.add_to_cart(self.user.pk, self.product.pk)
        with self.assertRaises(InsufficientStock):
            self.service.set_quantity(self.user.pk, self.product.pk, 10)
        self.assertEqual(self._quantity(), 1)
        self.assertEqual(self._stock(), 4)

    def test_subtract_at_minimum(self):
        self.service.add_to_cart(self.user.pk, self.product.pk)
        with self.assertRaises(MinQuantityReached):
            self.service.subtract_quantity(self.user.pk, self.product.pk)

    def test_maximum_quantity(self):
        plenty = make_product(self.brand, name='Bulk Socks', stock=500)
        self.service.add_to_cart(self.user.pk, plenty.pk)
        self.service.set_quantity(self.user.pk, plenty.pk, 100)

        with self.assertRaises(MaxQuantityReached):
            self.service.add_quantity(self.user.pk, plenty.pk)
        with self.assertRaises(MaxQuantityReached):
            self.service.add_to_cart(self.user.pk, plenty.pk)
        self.assertEqual(self._stock(plenty), 400)

    def test_add_to_cart_when_sold_out(self):
        self.product.stock = 0
        self.product.save()
        with self.assertRaises(OutOfStock):
            self.service.add_to_cart(self.user.pk, self.product.pk)
        self.assertFalse(Cart.objects.exists())

    def test_add_to_cart_unknown_user_or_product(self):
        with self.assertRaises(UserNotFound):
            self.service.add_to_cart(9999, self.product.pk)
        with self.assertRaises(ProductNotFound):
            self.service.add_to_cart(self.user.pk, 9999)

    def test_quantity_change_without_cart(self):
        with self.assertRaises(CartNotFound):
            self.service.add_quantity(self.user.pk, self.product.pk)

    def test_quantity_change_for_product_not_in_cart(self):
        other = make_product(self.brand, name='Walker')
        self.service.add_to_cart(self.user.pk, self.product.pk)
        with self.assertRaises(ProductNotInCart):
            self.service.subtract_quantity(self.user.pk, other.pk)

    def test_removing_last_line_deletes_cart(self):
        self.service.add_to_cart(self.user.pk, self.product.pk)
        result = self.service.remove_selected(self.user.pk, [self.product.pk])

        self.assertIsNone(result)
        self.assertIsNone(self.service.get_cart(self.user.pk))
        self.assertEqual(self.service.count_items(self.user.pk), 0)
        self.assertEqual(self.service.total_price(self.user.pk), Decimal('0'))

    def test_removing_some_lines_keeps_cart(self):
        other = make_product(self.brand, name='Walker')
        self.service.add_to_cart(self.user.pk, self.product.pk)
        self.service.add_to_cart(self.user.pk, other.pk)

        cart = self.service.remove_selected(self.user.pk, [self.product.pk])
        self.assertIsNotNone(cart)
        self.assertEqual(list(cart.items.values_list('product_id', flat=True)), [other.pk])

    def test_totals(self):
        walker = make_product(self.brand, name='Walker', price='25.50')
        self.service.add_to_cart(self.user.pk, self.product.pk)
        self.service.set_quantity(self.user.pk, self.product.pk, 3)
        self.service.add_to_cart(self.user.pk, walker.pk)

        self.assertEqual(self.service.count_items(self.user.pk), 4)
        self.assertEqual(self.service.total_price(self.user.pk), Decimal('55.50'))
