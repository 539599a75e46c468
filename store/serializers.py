from rest_framework import serializers

from .models import Coupon, Cart, CartItem, Wishlist, WishlistItem, Review


# ---------------------------
# Shared product summary
# ---------------------------
class ProductSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    slug = serializers.CharField(read_only=True)
    images = serializers.ListField(child=serializers.CharField(), read_only=True)
    retail_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    stock = serializers.IntegerField(read_only=True)


# ---------------------------
# Coupon Serializers
# ---------------------------
class CouponSerializer(serializers.ModelSerializer):
    is_expired = serializers.BooleanField(read_only=True)

    class Meta:
        model = Coupon
        fields = [
            'id', 'code', 'slug', 'description', 'discount_type', 'discount_value',
            'min_purchase_amount', 'max_discount_amount', 'expire_at', 'usage_limit',
            'used_count', 'is_active', 'is_expired', 'applicable_to', 'applicable_products',
            'created_at', 'updated_at'
        ]


class CouponWriteSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    discount_type = serializers.ChoiceField(choices=Coupon.DiscountType.choices)
    discount_value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    min_purchase_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    max_discount_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    expire_at = serializers.DateTimeField()
    usage_limit = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False)
    applicable_to = serializers.ChoiceField(choices=Coupon.ApplicableTo.choices, required=False)
    applicable_products = serializers.ListField(child=serializers.IntegerField(), required=False)

    def validate_code(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("Coupon code cannot be blank")
        return value

    def validate(self, attrs):
        if attrs.get('discount_type') == Coupon.DiscountType.PERCENTAGE and attrs.get('discount_value', 0) > 100:
            raise serializers.ValidationError({'discount_value': "Percentage discount cannot exceed 100"})
        return attrs


class CouponVerifySerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    cart_total = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    product_ids = serializers.ListField(child=serializers.IntegerField(), required=False)


class ApplyCouponSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)


# ---------------------------
# Cart Serializers
# ---------------------------
class CartItemSerializer(serializers.ModelSerializer):
    product_details = ProductSummarySerializer(source='product', read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = CartItem
        fields = ['id', 'product', 'product_details', 'quantity', 'subtotal', 'added_at']


class CartSerializer(serializers.ModelSerializer):
    items = CartItemSerializer(many=True, read_only=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    item_count = serializers.IntegerField(read_only=True)
    coupon_code = serializers.CharField(source='coupon.code', read_only=True, default=None)

    class Meta:
        model = Cart
        fields = [
            'id', 'customer', 'items', 'total', 'item_count', 'coupon', 'coupon_code',
            'discount_amount', 'discount_type', 'created_at', 'updated_at'
        ]


class CartProductSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()


class CartQuantitySerializer(CartProductSerializer):
    quantity = serializers.IntegerField()


class ProductSelectionSerializer(serializers.Serializer):
    product_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


# ---------------------------
# Wishlist Serializers
# ---------------------------
class WishlistItemSerializer(serializers.ModelSerializer):
    product_details = ProductSummarySerializer(source='product', read_only=True)

    class Meta:
        model = WishlistItem
        fields = ['id', 'product', 'product_details', 'added_at']


class WishlistSerializer(serializers.ModelSerializer):
    items = WishlistItemSerializer(many=True, read_only=True)

    class Meta:
        model = Wishlist
        fields = ['id', 'customer', 'items', 'created_at', 'updated_at']


# ---------------------------
# Review Serializers
# ---------------------------
class ReviewSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.full_name', read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_slug = serializers.CharField(source='product.slug', read_only=True)

    class Meta:
        model = Review
        fields = [
            'id', 'product', 'product_name', 'product_slug', 'customer', 'customer_name',
            'rating', 'comment', 'images', 'is_verified_purchase', 'status', 'helpful',
            'admin_response', 'rejection_reason', 'created_at', 'updated_at'
        ]


class ReviewCreateSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(min_length=10, max_length=1000)


class ReviewUpdateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    comment = serializers.CharField(min_length=10, max_length=1000, required=False)


class ReviewStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Review.Status.choices)
    rejection_reason = serializers.CharField(max_length=200, required=False, allow_blank=True)
    admin_response = serializers.CharField(max_length=500, required=False, allow_blank=True)

    def validate(self, attrs):
        if attrs['status'] == Review.Status.REJECTED and not attrs.get('rejection_reason'):
            raise serializers.ValidationError({'rejection_reason': "A reason is required when rejecting a review"})
        return attrs
