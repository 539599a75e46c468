import logging

from django.db import transaction

from authentication.core.exceptions import (
    AlreadyInWishlist,
    MaxQuantityReached,
    OutOfStock,
    ProductNotFound,
    ProductNotInWishlist,
    WishlistNotFound,
)
from catalog.models import Product
from store.models import Cart, Wishlist, WishlistItem
from store.services.cart import CartService

logger = logging.getLogger(__name__)


class WishlistService:
    def __init__(self, config=None, cart_service=None):
        self.cart = cart_service or CartService(config=config)
        self.config = self.cart.config

    def get_wishlist(self, user_id):
        return (
            Wishlist.objects.filter(customer_id=user_id)
            .prefetch_related('items__product')
            .first()
        )

    def count(self, user_id):
        return WishlistItem.objects.filter(wishlist__customer_id=user_id).count()

    @staticmethod
    def _drop_if_empty(wishlist):
        if wishlist.items.exists():
            return wishlist
        wishlist.delete()
        logger.info(f"Wishlist for user {wishlist.customer_id} emptied and removed")
        return None

    @transaction.atomic
    def drop_emptied(self, wishlist_ids):
        wishlists = Wishlist.objects.select_for_update().filter(pk__in=wishlist_ids)
        return sum(1 for wishlist in wishlists if self._drop_if_empty(wishlist) is None)

    @transaction.atomic
    def add(self, user_id, product_id):
        user = self.cart.resolve_user(user_id)
        product = self.cart.resolve_product(product_id)

        wishlist, _ = Wishlist.objects.get_or_create(customer=user)
        if wishlist.items.filter(product=product).exists():
            raise AlreadyInWishlist()

        WishlistItem.objects.create(wishlist=wishlist, product=product)
        logger.info(f"User {user.pk} added product {product.pk} to wishlist")
        return wishlist

    @transaction.atomic
    def remove_selected(self, user_id, product_ids):
        wishlist = Wishlist.objects.filter(customer_id=user_id).first()
        if wishlist is None:
            raise WishlistNotFound()

        deleted, _ = wishlist.items.filter(product_id__in=product_ids).delete()
        logger.info(f"User {user_id} removed {deleted} product(s) from wishlist")
        return self._drop_if_empty(wishlist)

    @transaction.atomic
    def move_to_cart(self, user_id, product_ids):
        """
        Move the selected wishlist products into the cart, one unit each.

        Every product is checked before anything is written; a single
        missing or sold-out product aborts the whole batch and leaves the
        wishlist, the cart and stock as they were.

        Returns:
            list: ids of the products that were moved
        """
        wishlist = Wishlist.objects.select_for_update().filter(customer_id=user_id).first()
        if wishlist is None or not wishlist.items.exists():
            raise WishlistNotFound()

        selected = list(wishlist.items.filter(product_id__in=product_ids).values_list('product_id', flat=True))
        if not selected:
            raise ProductNotInWishlist()

        cart, _ = Cart.objects.select_for_update().get_or_create(customer_id=user_id)
        quantities = dict(cart.items.filter(product_id__in=selected).values_list('product_id', 'quantity'))

        # validate the whole batch first
        products = []
        for product_id in selected:
            product = Product.objects.select_for_update().filter(pk=product_id).first()
            if product is None:
                raise ProductNotFound(f"Product {product_id} no longer exists")
            if product.stock < 1:
                raise OutOfStock(f"{product.name} is out of stock")
            if quantities.get(product_id, 0) >= self.config.cart_max_quantity:
                raise MaxQuantityReached(f"Maximum quantity limit reached for {product.name}")
            products.append(product)

        for product in products:
            self.cart.add_unit(cart, product)

        wishlist.items.filter(product_id__in=selected).delete()
        self._drop_if_empty(wishlist)

        logger.info(f"User {user_id} moved {len(selected)} product(s) from wishlist to cart")
        return selected
