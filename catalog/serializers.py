from django.utils import timezone
from rest_framework import serializers

from .models import Category, SubCategory, Brand, Product, Variant, Discount


# ---------------------------
# Category Serializers
# ---------------------------
class CategorySerializer(serializers.ModelSerializer):
    subcategory_count = serializers.IntegerField(source='subcategories.count', read_only=True)

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'slug', 'description', 'image', 'is_active',
            'subcategory_count', 'created_at', 'updated_at'
        ]


class CategoryWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    is_active = serializers.BooleanField(required=False)


# ---------------------------
# Sub-category Serializers
# ---------------------------
class SubCategorySerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)

    class Meta:
        model = SubCategory
        fields = [
            'id', 'name', 'slug', 'description', 'image', 'category', 'category_name',
            'is_active', 'created_at', 'updated_at'
        ]


class SubCategoryWriteSerializer(CategoryWriteSerializer):
    category = serializers.IntegerField(help_text="Parent category id")


# ---------------------------
# Brand Serializers
# ---------------------------
class BrandSerializer(serializers.ModelSerializer):
    sub_category_name = serializers.CharField(source='sub_category.name', read_only=True)

    class Meta:
        model = Brand
        fields = [
            'id', 'name', 'slug', 'description', 'image', 'since', 'sub_category',
            'sub_category_name', 'is_active', 'created_at', 'updated_at'
        ]


class BrandWriteSerializer(CategoryWriteSerializer):
    sub_category = serializers.IntegerField(help_text="Parent sub-category id")
    since = serializers.IntegerField(min_value=1800, required=False, allow_null=True)

    def validate_since(self, value):
        if value is not None and value > timezone.now().year:
            raise serializers.ValidationError("Founding year cannot be in the future")
        return value


# ---------------------------
# Variant Serializers
# ---------------------------
class VariantSerializer(serializers.ModelSerializer):
    product_slug = serializers.CharField(source='product.slug', read_only=True)

    class Meta:
        model = Variant
        fields = [
            'id', 'product', 'product_slug', 'name', 'slug', 'description', 'size', 'color',
            'stock', 'alert_stock', 'retail_price', 'wholesale_price', 'images',
            'is_active', 'created_at', 'updated_at'
        ]


class VariantWriteSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    name = serializers.CharField(max_length=150)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)
    size = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    color = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    stock = serializers.IntegerField(min_value=0)
    alert_stock = serializers.IntegerField(min_value=0, required=False)
    retail_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    wholesale_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    is_active = serializers.BooleanField(required=False)


# ---------------------------
# Product Serializers
# ---------------------------
class ProductSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)
    sub_category_name = serializers.CharField(source='sub_category.name', read_only=True)
    brand_name = serializers.CharField(source='brand.name', read_only=True)
    in_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'slug', 'description', 'sku',
            'category', 'category_name', 'sub_category', 'sub_category_name', 'brand', 'brand_name',
            'images', 'tags', 'variant_type', 'retail_price', 'wholesale_price',
            'stock', 'alert_quantity', 'in_stock', 'average_rating', 'total_reviews',
            'is_active', 'created_at', 'updated_at'
        ]


class ProductDetailSerializer(ProductSerializer):
    variants = VariantSerializer(many=True, read_only=True)

    class Meta(ProductSerializer.Meta):
        fields = ProductSerializer.Meta.fields + ['variants']


class ProductWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    description = serializers.CharField(max_length=2000, required=False, allow_blank=True, allow_null=True)
    sku = serializers.CharField(max_length=80)
    category = serializers.IntegerField()
    sub_category = serializers.IntegerField()
    brand = serializers.IntegerField()
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)
    variant_type = serializers.ChoiceField(choices=Product.VARIANT_TYPES, required=False)
    retail_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    wholesale_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    stock = serializers.IntegerField(min_value=0, required=False)
    alert_quantity = serializers.IntegerField(min_value=0, required=False)
    is_active = serializers.BooleanField(required=False)

    def validate_sku(self, value):
        return value.strip().upper()


class ImageRemovalSerializer(serializers.Serializer):
    images = serializers.ListField(child=serializers.URLField(), allow_empty=False)


# ---------------------------
# Discount Serializers
# ---------------------------
class DiscountSerializer(serializers.ModelSerializer):
    target = serializers.SerializerMethodField()

    class Meta:
        model = Discount
        fields = [
            'id', 'discount_name', 'slug', 'description', 'discount_type', 'discount_plan',
            'target', 'valid_from', 'valid_to', 'value_by_amount', 'value_by_percentage',
            'is_active', 'created_at', 'updated_at'
        ]

    def get_target(self, obj):
        target = obj.target
        if target is None:
            return None
        return {'id': target.pk, 'slug': target.slug, 'name': str(target)}


class DiscountWriteSerializer(serializers.Serializer):
    discount_name = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    discount_type = serializers.ChoiceField(choices=Discount.DiscountType.choices)
    discount_plan = serializers.ChoiceField(choices=Discount.Plan.choices)
    target = serializers.IntegerField(required=False, allow_null=True, help_text="Id of the entity the plan targets")
    valid_from = serializers.DateTimeField()
    valid_to = serializers.DateTimeField()
    value_by_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    value_by_percentage = serializers.DecimalField(
        max_digits=5, decimal_places=2, min_value=0, max_value=100, required=False
    )
    is_active = serializers.BooleanField(required=False)

    def validate(self, attrs):
        valid_from = attrs.get('valid_from')
        valid_to = attrs.get('valid_to')
        if valid_from and valid_to and valid_to <= valid_from:
            raise serializers.ValidationError({'valid_to': "End date must be after start date"})
        return attrs
