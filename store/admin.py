from django.contrib import admin
from .models import Coupon, Cart, CartItem, Wishlist, WishlistItem, Review


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ('code', 'discount_type', 'discount_value', 'used_count', 'usage_limit', 'expire_at', 'is_active')
    list_filter = ('discount_type', 'applicable_to', 'is_active')
    search_fields = ('code', 'description')
    readonly_fields = ('slug', 'used_count', 'created_at', 'updated_at')
    filter_horizontal = ('applicable_products',)


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    readonly_fields = ('added_at',)


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ('customer', 'coupon', 'discount_amount', 'updated_at')
    search_fields = ('customer__email',)
    readonly_fields = ('created_at', 'updated_at')
    inlines = [CartItemInline]


class WishlistItemInline(admin.TabularInline):
    model = WishlistItem
    extra = 0
    readonly_fields = ('added_at',)


@admin.register(Wishlist)
class WishlistAdmin(admin.ModelAdmin):
    list_display = ('customer', 'created_at')
    search_fields = ('customer__email',)
    inlines = [WishlistItemInline]


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('product', 'customer', 'rating', 'status', 'helpful', 'created_at')
    list_filter = ('status', 'rating', 'created_at')
    search_fields = ('product__name', 'customer__email', 'comment')
    readonly_fields = ('helpful', 'created_at', 'updated_at')
