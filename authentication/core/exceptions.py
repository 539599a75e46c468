from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import APIException

# =====================================================
# Error kinds
# Each kind is a base class; the concrete failure raised by a
# service is a subclass carrying its own default_code.
# =====================================================

class EntityNotFound(APIException):
    status_code = 404
    default_detail = _('The requested resource was not found.')
    default_code = 'not_found'


class DuplicateName(APIException):
    status_code = 400
    default_detail = _('An entry with this name already exists.')
    default_code = 'duplicate_name'


class InvalidInput(APIException):
    status_code = 400
    default_detail = _('Invalid input.')
    default_code = 'invalid_input'


class HasDependents(APIException):
    status_code = 400
    default_detail = _('Cannot delete a record that still has dependents.')
    default_code = 'has_dependents'


class StockError(APIException):
    status_code = 400
    default_detail = _('Not enough stock.')
    default_code = 'stock_error'


class QuantityBoundsExceeded(APIException):
    status_code = 400
    default_detail = _('Quantity is outside the allowed range.')
    default_code = 'quantity_bounds_exceeded'


class CouponInvalid(APIException):
    status_code = 400
    default_detail = _('This coupon cannot be used.')
    default_code = 'coupon_invalid'


class AlreadyExists(APIException):
    status_code = 400
    default_detail = _('This entry already exists.')
    default_code = 'already_exists'


class ResourcePermissionDenied(APIException):
    status_code = 403
    default_detail = _('You do not have permission to modify this resource.')
    default_code = 'permission_denied'


# =====================================================
# Not found
# =====================================================

class UserNotFound(EntityNotFound):
    default_detail = _('User not found')
    default_code = 'user_not_found'

class CategoryNotFound(EntityNotFound):
    default_detail = _('Category not found')
    default_code = 'category_not_found'

class SubCategoryNotFound(EntityNotFound):
    default_detail = _('Sub-category not found')
    default_code = 'subcategory_not_found'

class BrandNotFound(EntityNotFound):
    default_detail = _('Brand not found')
    default_code = 'brand_not_found'

class ProductNotFound(EntityNotFound):
    default_detail = _('Product not found')
    default_code = 'product_not_found'

class VariantNotFound(EntityNotFound):
    default_detail = _('Variant not found')
    default_code = 'variant_not_found'

class DiscountNotFound(EntityNotFound):
    default_detail = _('Discount not found')
    default_code = 'discount_not_found'

class ParentNotFound(EntityNotFound):
    default_detail = _('Parent record not found')
    default_code = 'parent_not_found'

class NewParentNotFound(EntityNotFound):
    default_detail = _('New parent record not found')
    default_code = 'new_parent_not_found'

class TargetNotFound(EntityNotFound):
    default_detail = _('Discount target does not exist')
    default_code = 'target_not_found'

class CartNotFound(EntityNotFound):
    default_detail = _('Cart not found or cart is empty')
    default_code = 'cart_not_found'

class CartEmpty(EntityNotFound):
    default_detail = _('Cart is empty')
    default_code = 'cart_empty'

class ProductNotInCart(EntityNotFound):
    default_detail = _('Product not found in cart')
    default_code = 'product_not_in_cart'

class WishlistNotFound(EntityNotFound):
    default_detail = _('Wishlist not found or wishlist is empty')
    default_code = 'wishlist_not_found'

class ProductNotInWishlist(EntityNotFound):
    default_detail = _('Selected products not found in wishlist')
    default_code = 'product_not_in_wishlist'

class CouponNotFound(EntityNotFound):
    default_detail = _('Invalid coupon code')
    default_code = 'coupon_not_found'

class ReviewNotFound(EntityNotFound):
    default_detail = _('Review not found')
    default_code = 'review_not_found'


# =====================================================
# Uniqueness
# =====================================================

class DuplicateSku(DuplicateName):
    default_detail = _('Product with this SKU already exists')
    default_code = 'duplicate_sku'

class DuplicateCode(DuplicateName):
    default_detail = _('Coupon code already exists')
    default_code = 'duplicate_code'


# =====================================================
# Input
# =====================================================

class InvalidName(InvalidInput):
    default_detail = _('Name does not produce a valid slug')
    default_code = 'invalid_name'

class InvalidQuantity(InvalidInput):
    default_detail = _('Quantity must be between 1 and 100')
    default_code = 'invalid_quantity'

class ImageLimitExceeded(InvalidInput):
    default_detail = _('Too many images')
    default_code = 'image_limit_exceeded'

class InvalidDateRange(InvalidInput):
    default_detail = _('End date must be after start date')
    default_code = 'invalid_date_range'

class InvalidDiscountValue(InvalidInput):
    default_detail = _('Percentage discount cannot exceed 100%')
    default_code = 'invalid_discount_value'


# =====================================================
# Dependents
# =====================================================

class CouponInUse(HasDependents):
    default_detail = _('Coupon has already been used')
    default_code = 'coupon_in_use'


# =====================================================
# Stock and quantity
# =====================================================

class OutOfStock(StockError):
    default_detail = _('Product is out of stock')
    default_code = 'out_of_stock'

class InsufficientStock(StockError):
    default_detail = _('Insufficient stock available')
    default_code = 'insufficient_stock'

class MaxQuantityReached(QuantityBoundsExceeded):
    default_detail = _('Maximum quantity limit reached for this product')
    default_code = 'max_quantity_reached'

class MinQuantityReached(QuantityBoundsExceeded):
    default_detail = _('Minimum quantity limit reached for this product')
    default_code = 'min_quantity_reached'


# =====================================================
# Coupons
# =====================================================

class CouponInactive(CouponInvalid):
    default_detail = _('This coupon is not active')
    default_code = 'coupon_inactive'

class CouponExpired(CouponInvalid):
    default_detail = _('This coupon has expired')
    default_code = 'coupon_expired'

class UsageLimitReached(CouponInvalid):
    default_detail = _('This coupon has reached its usage limit')
    default_code = 'usage_limit_reached'

class BelowMinimumPurchase(CouponInvalid):
    default_detail = _('Cart total is below the minimum purchase amount for this coupon')
    default_code = 'below_minimum_purchase'

class NotApplicableToCart(CouponInvalid):
    default_detail = _('This coupon is not applicable to items in your cart')
    default_code = 'not_applicable_to_cart'

class NoCouponApplied(CouponInvalid):
    default_detail = _('No coupon applied to this cart')
    default_code = 'no_coupon_applied'


# =====================================================
# Duplicates of user actions
# =====================================================

class AlreadyReviewed(AlreadyExists):
    default_detail = _('You have already reviewed this product')
    default_code = 'already_reviewed'

class AlreadyInWishlist(AlreadyExists):
    default_detail = _('Product already in wishlist')
    default_code = 'already_in_wishlist'

class AlreadyMarked(AlreadyExists):
    default_detail = _('You have already marked this review as helpful')
    default_code = 'already_marked'

class NotMarked(AlreadyExists):
    default_detail = _("You haven't marked this review as helpful")
    default_code = 'not_marked'

class ReviewNotApproved(AlreadyExists):
    default_detail = _('You can only mark approved reviews as helpful')
    default_code = 'review_not_approved'

class ReviewLocked(AlreadyExists):
    default_detail = _('Approved reviews cannot be edited. Contact support for changes.')
    default_code = 'review_locked'


# =====================================================
# Ownership
# =====================================================

class NotResourceOwner(ResourcePermissionDenied):
    default_detail = _('You can only modify your own resources')
    default_code = 'not_resource_owner'


# =====================================================
# Image hosting
# =====================================================

class BlobStoreError(APIException):
    status_code = 502
    default_detail = _('Image hosting service failed.')
    default_code = 'blob_store_error'

class BlobUploadError(BlobStoreError):
    default_detail = _('Image upload failed')
    default_code = 'blob_upload_failed'

class BlobDeleteError(BlobStoreError):
    default_detail = _('Image deletion failed')
    default_code = 'blob_delete_failed'
