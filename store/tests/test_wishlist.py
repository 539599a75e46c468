from django.contrib.auth import get_user_model
from django.test import TestCase

from authentication.core.exceptions import (
    AlreadyInWishlist,
    OutOfStock,
    ProductNotFound,
    ProductNotInWishlist,
    WishlistNotFound,
)
from catalog.models import Product
from catalog.tests.factories import make_product, make_tree
from store.models import Cart, CartItem, Wishlist
from store.services import WishlistService


class WishlistEngineTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(email='cust@example.com', password='pass123')
        cat, sub, self.brand = make_tree()
        self.runner = make_product(self.brand, name='Runner', stock=3)
        self.walker = make_product(self.brand, name='Walker', stock=0)
        self.service = WishlistService()

    def test_add_creates_wishlist_once(self):
        self.service.add(self.user.pk, self.runner.pk)
        self.service.add(self.user.pk, self.walker.pk)

        self.assertEqual(Wishlist.objects.count(), 1)
        self.assertEqual(self.service.count(self.user.pk), 2)

        with self.assertRaises(AlreadyInWishlist):
            self.service.add(self.user.pk, self.runner.pk)

    def test_add_unknown_product(self):
        with self.assertRaises(ProductNotFound):
            self.service.add(self.user.pk, 9999)

    def test_removing_last_item_deletes_wishlist(self):
        self.service.add(self.user.pk, self.runner.pk)
        self.assertIsNone(self.service.remove_selected(self.user.pk, [self.runner.pk]))
        self.assertIsNone(self.service.get_wishlist(self.user.pk))

    def test_remove_without_wishlist(self):
        with self.assertRaises(WishlistNotFound):
            self.service.remove_selected(self.user.pk, [self.runner.pk])

    def test_move_sold_out_product_changes_nothing(self):
        self.service.add(self.user.pk, self.walker.pk)

        with self.assertRaises(OutOfStock):
            self.service.move_to_cart(self.user.pk, [self.walker.pk])

        wishlist = self.service.get_wishlist(self.user.pk)
        self.assertEqual([item.product_id for item in wishlist.items.all()], [self.walker.pk])
        self.assertFalse(Cart.objects.exists())

    def test_one_sold_out_product_aborts_the_batch(self):
        self.service.add(self.user.pk, self.runner.pk)
        self.service.add(self.user.pk, self.walker.pk)

        with self.assertRaises(OutOfStock):
            self.service.move_to_cart(self.user.pk, [self.runner.pk, self.walker.pk])

        self.assertEqual(Product.objects.get(pk=self.runner.pk).stock, 3)
        self.assertEqual(self.service.count(self.user.pk), 2)
        self.assertFalse(CartItem.objects.exists())

    def test_move_to_cart(self):
        self.service.add(self.user.pk, self.runner.pk)

        moved = self.service.move_to_cart(self.user.pk, [self.runner.pk, 9999])

        self.assertEqual(moved, [self.runner.pk])
        self.assertEqual(CartItem.objects.get(cart__customer=self.user).quantity, 1)
        self.assertEqual(Product.objects.get(pk=self.runner.pk).stock, 2)
        self.assertIsNone(self.service.get_wishlist(self.user.pk))

    def test_move_adds_to_existing_cart_line(self):
        self.service.cart.add_to_cart(self.user.pk, self.runner.pk)
        self.service.add(self.user.pk, self.runner.pk)

        self.service.move_to_cart(self.user.pk, [self.runner.pk])
        self.assertEqual(CartItem.objects.get(cart__customer=self.user).quantity, 2)
        self.assertEqual(Product.objects.get(pk=self.runner.pk).stock, 1)

    def test_move_products_not_in_wishlist(self):
        self.service.add(self.user.pk, self.runner.pk)
        with self.assertRaises(ProductNotInWishlist):
            self.service.move_to_cart(self.user.pk, [self.walker.pk])

    def test_move_without_wishlist(self):
        with self.assertRaises(WishlistNotFound):
            self.service.move_to_cart(self.user.pk, [self.runner.pk])
