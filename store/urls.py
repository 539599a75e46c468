from django.urls import path

from .views import (
    ActiveCouponListView,
    CartAddView,
    CartCouponView,
    CartDecreaseView,
    CartIncreaseView,
    CartQuantityView,
    CartRemoveView,
    CartSummaryView,
    CartView,
    CouponByCodeView,
    CouponDetailView,
    CouponListCreateView,
    CouponToggleView,
    CouponVerifyView,
    MyReviewListView,
    ProductReviewListView,
    ReviewDetailView,
    ReviewHelpfulView,
    ReviewImageUploadView,
    ReviewListCreateView,
    ReviewStatisticsView,
    ReviewStatusView,
    WishlistAddView,
    WishlistMoveToCartView,
    WishlistRemoveView,
    WishlistView,
)

urlpatterns = [
    # Coupons
    path('coupons/', CouponListCreateView.as_view(), name='coupon-list-create'),
    path('coupons/active/', ActiveCouponListView.as_view(), name='coupon-active'),
    path('coupons/verify/', CouponVerifyView.as_view(), name='coupon-verify'),
    path('coupons/code/<str:code>/', CouponByCodeView.as_view(), name='coupon-by-code'),
    path('coupons/<slug:slug>/', CouponDetailView.as_view(), name='coupon-detail'),
    path('coupons/<slug:slug>/toggle/', CouponToggleView.as_view(), name='coupon-toggle'),

    # Cart
    path('cart/', CartView.as_view(), name='cart-detail'),
    path('cart/add/', CartAddView.as_view(), name='cart-add'),
    path('cart/increase/', CartIncreaseView.as_view(), name='cart-increase'),
    path('cart/decrease/', CartDecreaseView.as_view(), name='cart-decrease'),
    path('cart/quantity/', CartQuantityView.as_view(), name='cart-quantity'),
    path('cart/remove/', CartRemoveView.as_view(), name='cart-remove'),
    path('cart/summary/', CartSummaryView.as_view(), name='cart-summary'),
    path('cart/coupon/', CartCouponView.as_view(), name='cart-coupon'),

    # Wishlist
    path('wishlist/', WishlistView.as_view(), name='wishlist-detail'),
    path('wishlist/add/', WishlistAddView.as_view(), name='wishlist-add'),
    path('wishlist/remove/', WishlistRemoveView.as_view(), name='wishlist-remove'),
    path('wishlist/move-to-cart/', WishlistMoveToCartView.as_view(), name='wishlist-move-to-cart'),

    # Reviews
    path('reviews/', ReviewListCreateView.as_view(), name='review-list-create'),
    path('reviews/mine/', MyReviewListView.as_view(), name='review-mine'),
    path('reviews/statistics/', ReviewStatisticsView.as_view(), name='review-statistics'),
    path('reviews/upload-images/', ReviewImageUploadView.as_view(), name='review-upload-images'),
    path('reviews/product/<int:product_id>/', ProductReviewListView.as_view(), name='review-product'),
    path('reviews/<int:pk>/', ReviewDetailView.as_view(), name='review-detail'),
    path('reviews/<int:pk>/status/', ReviewStatusView.as_view(), name='review-status'),
    path('reviews/<int:pk>/helpful/', ReviewHelpfulView.as_view(), name='review-helpful'),
]
