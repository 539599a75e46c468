from .discounts import DiscountService
from .hierarchy import (
    BrandService,
    CategoryService,
    ProductService,
    SubCategoryService,
    VariantService,
)
from .media import CloudinaryBlobStore, get_blob_store
from .slugs import assign_slug

__all__ = [
    'assign_slug',
    'BrandService',
    'CategoryService',
    'CloudinaryBlobStore',
    'DiscountService',
    'get_blob_store',
    'ProductService',
    'SubCategoryService',
    'VariantService',
]
