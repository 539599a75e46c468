import logging

from django.db import transaction

from authentication.core.exceptions import (
    BrandNotFound,
    CategoryNotFound,
    DuplicateName,
    DuplicateSku,
    HasDependents,
    ImageLimitExceeded,
    NewParentNotFound,
    ParentNotFound,
    ProductNotFound,
    SubCategoryNotFound,
    VariantNotFound,
)
from catalog.models import Brand, Category, Product, SubCategory, Variant
from catalog.services.media import get_blob_store
from catalog.services.slugs import assign_slug
from commerce_api.conf import StoreConfig

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Shared plumbing for the catalog tree services.

    Subclasses set ``model``, ``not_found`` and ``parents``; ``parents`` maps
    a foreign key field to the model it points at. A child's parent pointer is
    the only stored link, so writing it both removes the child from the old
    parent's set and adds it to the new one.
    """
    model = None
    not_found = None
    parents = {}
    editable_fields = ()

    def __init__(self, config=None, blob_store=None):
        self.config = config or StoreConfig.from_settings()
        self.blobs = blob_store or get_blob_store(self.config)

    @property
    def label(self):
        return self.model._meta.verbose_name.title()

    # ---------------------------
    # LOOKUPS
    # ---------------------------
    def list(self):
        return self.model.objects.all()

    def get(self, slug):
        try:
            return self.model.objects.get(slug=slug)
        except self.model.DoesNotExist:
            raise self.not_found()

    def _resolve_parent(self, field, pk, error):
        parent_model = self.parents[field]
        try:
            return parent_model.objects.get(pk=pk)
        except (parent_model.DoesNotExist, ValueError, TypeError):
            raise error(f"{parent_model._meta.verbose_name.title()} does not exist")

    # ---------------------------
    # RULES
    # ---------------------------
    def _ensure_name_free(self, name, exclude_pk=None, **scope):
        qs = self.model.objects.filter(name=name, **scope)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise DuplicateName(f"{self.label} with this name already exists")

    def _rename(self, instance, data):
        """Apply a name change (and new slug) when the name actually differs."""
        name = data.get('name')
        if 'name' not in data or name == instance.name:
            return
        self._ensure_name_free(name, exclude_pk=instance.pk)
        instance.name = name
        instance.slug = assign_slug(name, self.model, current_id=instance.pk)

    def _reparent(self, instance, data):
        for field in self.parents:
            if field not in data:
                continue
            new_id = data[field]
            if getattr(instance, f'{field}_id') == new_id:
                continue
            parent = self._resolve_parent(field, new_id, NewParentNotFound)
            logger.info(
                f"Moving {self.label} '{instance.slug}' {field}: "
                f"{getattr(instance, f'{field}_id')} -> {parent.pk}"
            )
            setattr(instance, field, parent)

    def _apply_fields(self, instance, data):
        # presence, not truthiness: stock=0 and description="" are real updates
        for field in self.editable_fields:
            if field in data:
                setattr(instance, field, data[field])

    # ---------------------------
    # IMAGES
    # ---------------------------
    def _store_image(self, image):
        return self.blobs.store(image) if image is not None else None

    def _replace_image(self, instance, image):
        """Upload ``image`` and return the URL it replaces (deleted after save)."""
        if image is None:
            return None
        old_url = instance.image
        instance.image = self.blobs.store(image)
        return old_url

    def _check_image_room(self, current, incoming, limit):
        if current + incoming > limit:
            raise ImageLimitExceeded(
                f"Cannot have more than {limit} images. Currently has {current} images."
            )

    def _delete_discounts(self, instance):
        deleted, _ = instance.discounts.all().delete()
        if deleted:
            logger.info(f"Deleted {deleted} discounts targeting {self.label} '{instance.slug}'")


# ==========================================
# Single-image nodes (category, sub-category, brand)
# ==========================================
class _ImageNodeService(CatalogService):
    # reverse relations that must be empty before a delete
    dependents = ()

    @transaction.atomic
    def create(self, data, image=None):
        self._ensure_name_free(data['name'])
        parents = {
            field: self._resolve_parent(field, data.get(field), ParentNotFound)
            for field in self.parents
        }

        instance = self.model(
            name=data['name'],
            slug=assign_slug(data['name'], self.model),
            **parents,
        )
        self._apply_fields(instance, data)
        instance.image = self._store_image(image)
        try:
            instance.save()
        except Exception:
            self.blobs.delete_quietly(instance.image)
            raise

        logger.info(f"{self.label} created: {instance.slug}")
        return instance

    @transaction.atomic
    def update(self, slug, data, image=None):
        instance = self.get(slug)
        self._rename(instance, data)
        self._reparent(instance, data)
        self._apply_fields(instance, data)
        old_image = self._replace_image(instance, image)
        try:
            instance.save()
        except Exception:
            if image is not None:
                self.blobs.delete_quietly(instance.image)
            raise

        if old_image:
            self.blobs.delete_quietly(old_image)
        logger.info(f"{self.label} updated: {instance.slug}")
        return instance

    @transaction.atomic
    def delete(self, slug):
        instance = self.get(slug)
        for relation in self.dependents:
            if getattr(instance, relation).exists():
                logger.warning(f"Refusing to delete {self.label} '{slug}': it still has {relation}")
                raise HasDependents(f"Cannot delete {self.label.lower()} with existing {relation}")

        self._delete_discounts(instance)
        self.blobs.delete_quietly(instance.image)
        instance.delete()
        logger.info(f"{self.label} deleted: {slug}")


class CategoryService(_ImageNodeService):
    model = Category
    not_found = CategoryNotFound
    dependents = ('subcategories', 'products')
    editable_fields = ('description', 'is_active')


class SubCategoryService(_ImageNodeService):
    model = SubCategory
    not_found = SubCategoryNotFound
    parents = {'category': Category}
    dependents = ('brands', 'products')
    editable_fields = ('description', 'is_active')


class BrandService(_ImageNodeService):
    model = Brand
    not_found = BrandNotFound
    parents = {'sub_category': SubCategory}
    dependents = ('products',)
    editable_fields = ('description', 'since', 'is_active')


# ==========================================
# Products
# ==========================================
class ProductService(CatalogService):
    model = Product
    not_found = ProductNotFound
    parents = {'category': Category, 'sub_category': SubCategory, 'brand': Brand}
    editable_fields = (
        'description', 'tags', 'variant_type', 'retail_price', 'wholesale_price',
        'stock', 'alert_quantity', 'is_active',
    )

    def list(self):
        return Product.objects.select_related('category', 'sub_category', 'brand')

    def get_by_id(self, product_id):
        try:
            return Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise ProductNotFound()

    def _ensure_sku_free(self, sku, exclude_pk=None):
        qs = Product.objects.filter(sku=sku)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise DuplicateSku()

    @transaction.atomic
    def create(self, data, images=None):
        images = images or []
        sku = data['sku'].upper()

        self._ensure_name_free(data['name'])
        self._ensure_sku_free(sku)
        parents = {
            field: self._resolve_parent(field, data.get(field), ParentNotFound)
            for field in self.parents
        }
        self._check_image_room(0, len(images), self.config.product_max_images)

        product = Product(
            name=data['name'],
            slug=assign_slug(data['name'], Product),
            sku=sku,
            **parents,
        )
        self._apply_fields(product, data)
        product.images = self.blobs.store_many(images) if images else []
        try:
            product.save()
        except Exception:
            self.blobs.delete_quietly(product.images)
            raise

        logger.info(f"Product created: {product.slug} (sku={product.sku})")
        return product

    @transaction.atomic
    def update(self, slug, data, images=None):
        product = self.get(slug)
        images = images or []

        self._rename(product, data)
        if 'sku' in data:
            sku = data['sku'].upper()
            if sku != product.sku:
                self._ensure_sku_free(sku, exclude_pk=product.pk)
                product.sku = sku
        self._reparent(product, data)
        self._apply_fields(product, data)

        added = []
        if images:
            self._check_image_room(len(product.images), len(images), self.config.product_max_images)
            added = self.blobs.store_many(images)
            product.images = list(product.images) + added

        try:
            product.save()
        except Exception:
            self.blobs.delete_quietly(added)
            raise
        logger.info(f"Product updated: {product.slug}")
        return product

    @transaction.atomic
    def remove_images(self, slug, urls):
        product = self.get(slug)
        removed = [url for url in product.images if url in urls]
        if removed:
            product.images = [url for url in product.images if url not in removed]
            product.save(update_fields=['images', 'updated_at'])
            self.blobs.delete_quietly(removed)
            logger.info(f"Removed {len(removed)} images from product {slug}")
        return product

    @transaction.atomic
    def delete(self, slug):
        """
        Delete a product with everything hanging off it: variant images,
        variants, targeting discounts, product images, then the product row.
        """
        product = self.get(slug)

        for variant in product.variants.all():
            self.blobs.delete_quietly(variant.images)
        variant_count, _ = product.variants.all().delete()

        self._delete_discounts(product)
        self.blobs.delete_quietly(product.images)
        product.delete()
        logger.info(f"Product deleted: {slug} (variants removed: {variant_count})")


# ==========================================
# Variants
# ==========================================
class VariantService(CatalogService):
    model = Variant
    not_found = VariantNotFound
    parents = {'product': Product}
    editable_fields = (
        'description', 'size', 'color', 'stock', 'alert_stock',
        'retail_price', 'wholesale_price', 'is_active',
    )

    def list(self, product_slug=None):
        qs = Variant.objects.select_related('product')
        if product_slug:
            qs = qs.filter(product__slug=product_slug)
        return qs

    @transaction.atomic
    def create(self, data, images=None):
        images = images or []
        product = self._resolve_parent('product', data.get('product'), ParentNotFound)
        self._ensure_name_free(data['name'], product=product)
        self._check_image_room(0, len(images), self.config.variant_max_images)

        variant = Variant(
            product=product,
            name=data['name'],
            slug=assign_slug(data['name'], Variant),
        )
        self._apply_fields(variant, data)
        variant.images = self.blobs.store_many(images) if images else []
        try:
            variant.save()
        except Exception:
            self.blobs.delete_quietly(variant.images)
            raise

        logger.info(f"Variant created: {variant.slug} for product {product.slug}")
        return variant

    @transaction.atomic
    def update(self, slug, data, images=None):
        variant = self.get(slug)
        images = images or []

        self._reparent(variant, data)
        if 'name' in data and data['name'] != variant.name:
            self._ensure_name_free(data['name'], exclude_pk=variant.pk, product=variant.product)
            variant.name = data['name']
            variant.slug = assign_slug(data['name'], Variant, current_id=variant.pk)
        elif 'product' in data:
            # moved under another product: the kept name must be free there too
            self._ensure_name_free(variant.name, exclude_pk=variant.pk, product=variant.product)
        self._apply_fields(variant, data)

        added = []
        if images:
            self._check_image_room(len(variant.images), len(images), self.config.variant_max_images)
            added = self.blobs.store_many(images)
            variant.images = list(variant.images) + added

        try:
            variant.save()
        except Exception:
            self.blobs.delete_quietly(added)
            raise
        logger.info(f"Variant updated: {variant.slug}")
        return variant

    @transaction.atomic
    def remove_images(self, slug, urls):
        variant = self.get(slug)
        removed = [url for url in variant.images if url in urls]
        if removed:
            variant.images = [url for url in variant.images if url not in removed]
            variant.save(update_fields=['images', 'updated_at'])
            self.blobs.delete_quietly(removed)
        return variant

    @transaction.atomic
    def delete(self, slug):
        variant = self.get(slug)
        self.blobs.delete_quietly(variant.images)
        variant.delete()
        logger.info(f"Variant deleted: {slug}")
