from .cart import CartService
from .coupons import CouponEvaluator, CouponService, round_amount
from .reviews import ReviewService
from .wishlist import WishlistService

__all__ = [
    'CartService',
    'CouponEvaluator',
    'CouponService',
    'ReviewService',
    'round_amount',
    'WishlistService',
]
