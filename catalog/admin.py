from django.contrib import admin
from .models import Category, SubCategory, Brand, Product, Variant, Discount


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('name', 'description')
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ('created_at', 'updated_at')


@admin.register(SubCategory)
class SubCategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'is_active', 'created_at')
    list_filter = ('category', 'is_active')
    search_fields = ('name', 'category__name')
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ('created_at', 'updated_at')


@admin.register(Brand)
class BrandAdmin(admin.ModelAdmin):
    list_display = ('name', 'sub_category', 'since', 'is_active')
    list_filter = ('sub_category', 'is_active')
    search_fields = ('name',)
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ('created_at', 'updated_at')


class VariantInline(admin.TabularInline):
    model = Variant
    extra = 0
    fields = ('name', 'slug', 'size', 'color', 'stock', 'retail_price', 'is_active')


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'sku', 'category', 'brand', 'retail_price', 'stock', 'in_stock', 'average_rating')
    list_filter = ('category', 'sub_category', 'brand', 'is_active', 'created_at')
    search_fields = ('name', 'sku', 'description')
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ('average_rating', 'total_reviews', 'created_at', 'updated_at')
    inlines = [VariantInline]
    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'slug', 'sku', 'category', 'sub_category', 'brand')
        }),
        ('Details', {
            'fields': ('description', 'variant_type', 'retail_price', 'wholesale_price',
                       'stock', 'alert_quantity', 'images', 'tags', 'is_active')
        }),
        ('Reviews', {
            'fields': ('average_rating', 'total_reviews'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Variant)
class VariantAdmin(admin.ModelAdmin):
    list_display = ('name', 'product', 'stock', 'alert_stock', 'retail_price', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name', 'product__name')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(Discount)
class DiscountAdmin(admin.ModelAdmin):
    list_display = ('discount_name', 'discount_plan', 'discount_type', 'valid_from', 'valid_to', 'is_active')
    list_filter = ('discount_plan', 'discount_type', 'is_active')
    search_fields = ('discount_name',)
    readonly_fields = ('created_at', 'updated_at')
