from django.urls import path

from . import views

urlpatterns = [
    # Categories
    path('categories/', views.CategoryListCreateView.as_view(), name='category-list'),
    path('categories/<slug:slug>/', views.CategoryDetailView.as_view(), name='category-detail'),

    # Sub-categories
    path('subcategories/', views.SubCategoryListCreateView.as_view(), name='subcategory-list'),
    path('subcategories/<slug:slug>/', views.SubCategoryDetailView.as_view(), name='subcategory-detail'),

    # Brands
    path('brands/', views.BrandListCreateView.as_view(), name='brand-list'),
    path('brands/<slug:slug>/', views.BrandDetailView.as_view(), name='brand-detail'),

    # Products
    path('products/', views.ProductListCreateView.as_view(), name='product-list'),
    path('products/<slug:slug>/', views.ProductDetailView.as_view(), name='product-detail'),
    path('products/<slug:slug>/images/remove/', views.ProductImageRemoveView.as_view(), name='product-image-remove'),

    # Variants
    path('variants/', views.VariantListCreateView.as_view(), name='variant-list'),
    path('variants/<slug:slug>/', views.VariantDetailView.as_view(), name='variant-detail'),
    path('variants/<slug:slug>/images/remove/', views.VariantImageRemoveView.as_view(), name='variant-image-remove'),

    # Discounts
    path('discounts/', views.DiscountListCreateView.as_view(), name='discount-list'),
    path('discounts/<slug:slug>/', views.DiscountDetailView.as_view(), name='discount-detail'),
]
