import logging

from django.db.models.signals import post_delete, pre_delete
from django.dispatch import receiver

from catalog.models import Product
from .models import Cart, Wishlist
from .services import CartService, WishlistService

logger = logging.getLogger(__name__)


@receiver(pre_delete, sender=Product)
def remember_holders(sender, instance, **kwargs):
    """
    Note which carts and wishlists hold the product before its lines are
    cascaded away, so the ones left empty can be dropped afterwards.
    """
    instance._holder_carts = list(
        Cart.objects.filter(items__product=instance).values_list('pk', flat=True)
    )
    instance._holder_wishlists = list(
        Wishlist.objects.filter(items__product=instance).values_list('pk', flat=True)
    )


@receiver(post_delete, sender=Product)
def drop_emptied_holders(sender, instance, **kwargs):
    cart_ids = getattr(instance, '_holder_carts', [])
    wishlist_ids = getattr(instance, '_holder_wishlists', [])

    carts = CartService().drop_emptied(cart_ids) if cart_ids else 0
    wishlists = WishlistService().drop_emptied(wishlist_ids) if wishlist_ids else 0
    if carts or wishlists:
        logger.info(
            f"Product {instance.pk} deleted: removed {carts} emptied carts and {wishlists} emptied wishlists"
        )
