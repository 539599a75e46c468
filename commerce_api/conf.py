from dataclasses import dataclass

from django.conf import settings


@dataclass(frozen=True)
class StoreConfig:
    """Business limits read once from settings.STORE and handed to services."""
    cart_min_quantity: int = 1
    cart_max_quantity: int = 100
    product_max_images: int = 10
    variant_max_images: int = 10
    review_max_images: int = 5
    cloudinary_folder: str = ''

    @classmethod
    def from_settings(cls):
        values = getattr(settings, 'STORE', {})
        return cls(
            cart_min_quantity=values.get('CART_MIN_QUANTITY', cls.cart_min_quantity),
            cart_max_quantity=values.get('CART_MAX_QUANTITY', cls.cart_max_quantity),
            product_max_images=values.get('PRODUCT_MAX_IMAGES', cls.product_max_images),
            variant_max_images=values.get('VARIANT_MAX_IMAGES', cls.variant_max_images),
            review_max_images=values.get('REVIEW_MAX_IMAGES', cls.review_max_images),
            cloudinary_folder=values.get('CLOUDINARY_FOLDER', cls.cloudinary_folder),
        )
