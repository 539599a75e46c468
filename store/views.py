import logging

from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample, OpenApiResponse

from authentication.core.base_view import BaseAPIView
from authentication.core.permissions import IsAdmin
from authentication.core.response import standardized_response
from .serializers import (
    ApplyCouponSerializer,
    CartProductSerializer,
    CartQuantitySerializer,
    CartSerializer,
    CouponSerializer,
    CouponVerifySerializer,
    CouponWriteSerializer,
    ProductSelectionSerializer,
    ReviewCreateSerializer,
    ReviewSerializer,
    ReviewStatusSerializer,
    ReviewUpdateSerializer,
    WishlistSerializer,
)
from .services import CartService, CouponService, ReviewService, WishlistService

logger = logging.getLogger(__name__)


def int_param(request, name, default):
    try:
        return int(request.query_params.get(name, default))
    except (TypeError, ValueError):
        return default


def bool_param(request, name):
    value = request.query_params.get(name)
    if value is None:
        return None
    return value.lower() in ('1', 'true', 'yes')


def cart_payload(cart):
    return CartSerializer(cart).data if cart is not None else None


def wishlist_payload(wishlist):
    return WishlistSerializer(wishlist).data if wishlist is not None else None


# ======================================================
# COUPON VIEWS
# ======================================================
class CouponListCreateView(BaseAPIView):
    permission_classes = [IsAdmin]

    @extend_schema(
        tags=["Coupons"],
        parameters=[
            OpenApiParameter(name='is_active', type=bool, required=False),
            OpenApiParameter(name='discount_type', type=str, required=False, enum=['percentage', 'fixed']),
        ],
        responses={200: CouponSerializer(many=True)},
    )
    def get(self, request):
        coupons = CouponService().list(
            is_active=bool_param(request, 'is_active'),
            discount_type=request.query_params.get('discount_type'),
        )
        return Response(standardized_response(data=CouponSerializer(coupons, many=True).data))

    @extend_schema(
        tags=["Coupons"],
        request=CouponWriteSerializer,
        examples=[
            OpenApiExample(
                "Fixed coupon",
                value={
                    "code": "SAVE100",
                    "discount_type": "fixed",
                    "discount_value": "100.00",
                    "min_purchase_amount": "200.00",
                    "expire_at": "2026-12-31T23:59:59Z",
                    "usage_limit": 500
                }
            )
        ],
        responses={201: CouponSerializer, 400: OpenApiResponse(description="Coupon code already exists")},
    )
    def post(self, request):
        serializer = CouponWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        coupon = CouponService().create(serializer.validated_data)
        return Response(
            standardized_response(data=CouponSerializer(coupon).data, message="Coupon created successfully"),
            status=status.HTTP_201_CREATED
        )


@extend_schema(tags=["Coupons"], responses={200: CouponSerializer(many=True)})
class ActiveCouponListView(BaseAPIView):
    permission_classes = [AllowAny]

    def get(self, request):
        coupons = CouponService().list_active()
        return Response(standardized_response(data=CouponSerializer(coupons, many=True).data))


@extend_schema(tags=["Coupons"], responses={200: CouponSerializer, 404: OpenApiResponse(description="Invalid coupon code")})
class CouponByCodeView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, code):
        coupon = CouponService().get_by_code(code)
        return Response(standardized_response(data=CouponSerializer(coupon).data))


class CouponVerifyView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Coupons"], request=CouponVerifySerializer)
    def post(self, request):
        serializer = CouponVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = CouponService().verify(
            serializer.validated_data['code'],
            cart_total=serializer.validated_data.get('cart_total'),
            product_ids=serializer.validated_data.get('product_ids'),
        )
        return Response(standardized_response(
            message="Coupon is valid",
            data={
                'coupon': CouponSerializer(result['coupon']).data,
                'cart_total': result['cart_total'],
                'discount_amount': result['discount_amount'],
                'final_amount': result['final_amount'],
                'savings': result['savings'],
            }
        ))


class CouponDetailView(BaseAPIView):
    permission_classes = [IsAdmin]

    @extend_schema(tags=["Coupons"], responses={200: CouponSerializer})
    def get(self, request, slug):
        coupon = CouponService().get(slug)
        return Response(standardized_response(data=CouponSerializer(coupon).data))

    @extend_schema(tags=["Coupons"], request=CouponWriteSerializer, responses={200: CouponSerializer})
    def patch(self, request, slug):
        serializer = CouponWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        coupon = CouponService().update(slug, serializer.validated_data)
        return Response(standardized_response(
            data=CouponSerializer(coupon).data,
            message="Coupon updated successfully"
        ))

    @extend_schema(tags=["Coupons"], responses={400: OpenApiResponse(description="Coupon has already been used")})
    def delete(self, request, slug):
        CouponService().delete(slug)
        logger.info(f"Coupon {slug} deleted by {request.user.email}")
        return Response(standardized_response(message="Coupon deleted successfully"))


@extend_schema(tags=["Coupons"], request=None, responses={200: CouponSerializer})
class CouponToggleView(BaseAPIView):
    permission_classes = [IsAdmin]

    def post(self, request, slug):
        coupon = CouponService().toggle_status(slug)
        state = "activated" if coupon.is_active else "deactivated"
        return Response(standardized_response(
            data=CouponSerializer(coupon).data,
            message=f"Coupon {state} successfully"
        ))


# ======================================================
# CART VIEWS
# ======================================================
@extend_schema(tags=["Cart"], responses={200: CartSerializer})
class CartView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        cart = CartService().get_cart(request.user.pk)
        if cart is None:
            return Response(standardized_response(data=None, message="Cart is empty"))
        return Response(standardized_response(data=cart_payload(cart)))


class CartAddView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Cart"],
        request=CartProductSerializer,
        responses={
            200: CartSerializer,
            400: OpenApiResponse(description="Product is out of stock"),
            404: OpenApiResponse(description="Product not found"),
        }
    )
    def post(self, request):
        serializer = CartProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = CartService()
        service.add_to_cart(request.user.pk, serializer.validated_data['product_id'])
        return Response(standardized_response(
            data=cart_payload(service.get_cart(request.user.pk)),
            message="Product added to cart"
        ))


class CartIncreaseView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Cart"], request=CartProductSerializer, responses={200: CartSerializer})
    def post(self, request):
        serializer = CartProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = CartService()
        service.add_quantity(request.user.pk, serializer.validated_data['product_id'])
        return Response(standardized_response(
            data=cart_payload(service.get_cart(request.user.pk)),
            message="Product quantity increased"
        ))


class CartDecreaseView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Cart"], request=CartProductSerializer, responses={200: CartSerializer})
    def post(self, request):
        serializer = CartProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = CartService()
        service.subtract_quantity(request.user.pk, serializer.validated_data['product_id'])
        return Response(standardized_response(
            data=cart_payload(service.get_cart(request.user.pk)),
            message="Product quantity decreased"
        ))


class CartQuantityView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Cart"], request=CartQuantitySerializer, responses={200: CartSerializer})
    def put(self, request):
        serializer = CartQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = CartService()
        service.set_quantity(
            request.user.pk,
            serializer.validated_data['product_id'],
            serializer.validated_data['quantity'],
        )
        return Response(standardized_response(
            data=cart_payload(service.get_cart(request.user.pk)),
            message="Cart item quantity updated"
        ))


class CartRemoveView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Cart"], request=ProductSelectionSerializer, responses={200: CartSerializer})
    def post(self, request):
        serializer = ProductSelectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        cart = CartService().remove_selected(request.user.pk, serializer.validated_data['product_ids'])
        if cart is None:
            return Response(standardized_response(data=None, message="Cart is now empty"))
        return Response(standardized_response(
            data=cart_payload(CartService().get_cart(request.user.pk)),
            message="Selected products removed from cart"
        ))


@extend_schema(tags=["Cart"])
class CartSummaryView(BaseAPIView):
    """Item count and total price without the line details."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        service = CartService()
        return Response(standardized_response(data={
            'item_count': service.count_items(request.user.pk),
            'total_price': service.total_price(request.user.pk),
        }))


class CartCouponView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Cart"],
        request=ApplyCouponSerializer,
        responses={
            200: OpenApiResponse(description="Coupon applied"),
            400: OpenApiResponse(description="Coupon cannot be used for this cart"),
            404: OpenApiResponse(description="Cart is empty or coupon code is invalid"),
        }
    )
    def post(self, request):
        serializer = ApplyCouponSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = CartService().apply_coupon(request.user.pk, serializer.validated_data['code'])
        return Response(standardized_response(
            message="Coupon applied successfully",
            data={
                'cart': cart_payload(result['cart']),
                'cart_total': result['cart_total'],
                'discount_amount': result['discount_amount'],
                'final_amount': result['final_amount'],
                'savings': result['savings'],
            }
        ))

    @extend_schema(tags=["Cart"], responses={200: CartSerializer})
    def delete(self, request):
        cart = CartService().remove_coupon(request.user.pk)
        return Response(standardized_response(data=cart_payload(cart), message="Coupon removed successfully"))


# ======================================================
# WISHLIST VIEWS
# ======================================================
@extend_schema(tags=["Wishlist"], responses={200: WishlistSerializer})
class WishlistView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        service = WishlistService()
        wishlist = service.get_wishlist(request.user.pk)
        return Response(standardized_response(
            data=wishlist_payload(wishlist),
            count=service.count(request.user.pk),
        ))


class WishlistAddView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wishlist"], request=CartProductSerializer, responses={201: WishlistSerializer})
    def post(self, request):
        serializer = CartProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = WishlistService()
        service.add(request.user.pk, serializer.validated_data['product_id'])
        return Response(
            standardized_response(
                data=wishlist_payload(service.get_wishlist(request.user.pk)),
                message="Product added to wishlist"
            ),
            status=status.HTTP_201_CREATED
        )


class WishlistRemoveView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Wishlist"], request=ProductSelectionSerializer, responses={200: WishlistSerializer})
    def post(self, request):
        serializer = ProductSelectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = WishlistService()
        wishlist = service.remove_selected(request.user.pk, serializer.validated_data['product_ids'])
        if wishlist is not None:
            wishlist = service.get_wishlist(request.user.pk)
        return Response(standardized_response(
            data=wishlist_payload(wishlist),
            message="Selected products removed from wishlist"
        ))


class WishlistMoveToCartView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(
        tags=["Wishlist"],
        request=ProductSelectionSerializer,
        responses={
            200: OpenApiResponse(description="Products moved to cart"),
            400: OpenApiResponse(description="A selected product is out of stock"),
        }
    )
    def post(self, request):
        serializer = ProductSelectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        moved = WishlistService().move_to_cart(request.user.pk, serializer.validated_data['product_ids'])
        return Response(standardized_response(
            data={'moved_products': moved},
            message=f"{len(moved)} product(s) moved to cart"
        ))


# ======================================================
# REVIEW VIEWS
# ======================================================
class ReviewListCreateView(BaseAPIView):
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get_permissions(self):
        if self.request.method == 'GET':
            return [IsAdmin()]
        return [IsAuthenticated()]

    @extend_schema(
        tags=["Reviews"],
        parameters=[
            OpenApiParameter(name='status', type=str, required=False, enum=['pending', 'approved', 'rejected']),
            OpenApiParameter(name='rating', type=int, required=False),
            OpenApiParameter(name='page', type=int, required=False),
            OpenApiParameter(name='limit', type=int, required=False),
        ],
        responses={200: ReviewSerializer(many=True)},
    )
    def get(self, request):
        result = ReviewService().list(
            status=request.query_params.get('status'),
            rating=int_param(request, 'rating', None),
            page=int_param(request, 'page', 1),
            limit=int_param(request, 'limit', 20),
        )
        return Response(standardized_response(
            data=ReviewSerializer(result['reviews'], many=True).data,
            pagination=result['pagination'],
        ))

    @extend_schema(
        tags=["Reviews"],
        request=ReviewCreateSerializer,
        responses={201: ReviewSerializer, 400: OpenApiResponse(description="Product already reviewed")},
    )
    def post(self, request):
        serializer = ReviewCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = ReviewService().create(
            request.user, serializer.validated_data, images=request.FILES.getlist('images')
        )
        return Response(
            standardized_response(
                data=ReviewSerializer(review).data,
                message="Review submitted and awaiting approval"
            ),
            status=status.HTTP_201_CREATED
        )


@extend_schema(tags=["Reviews"], responses={200: ReviewSerializer(many=True)})
class MyReviewListView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        result = ReviewService().user_reviews(
            request.user,
            status=request.query_params.get('status'),
            page=int_param(request, 'page', 1),
            limit=int_param(request, 'limit', 10),
        )
        return Response(standardized_response(
            data=ReviewSerializer(result['reviews'], many=True).data,
            pagination=result['pagination'],
        ))


@extend_schema(
    tags=["Reviews"],
    parameters=[
        OpenApiParameter(name='status', type=str, required=False, description="Defaults to approved"),
        OpenApiParameter(name='rating', type=int, required=False),
        OpenApiParameter(name='page', type=int, required=False),
        OpenApiParameter(name='limit', type=int, required=False),
    ],
)
class ProductReviewListView(BaseAPIView):
    permission_classes = [AllowAny]

    def get(self, request, product_id):
        result = ReviewService().product_reviews(
            product_id,
            status=request.query_params.get('status', 'approved'),
            rating=int_param(request, 'rating', None),
            page=int_param(request, 'page', 1),
            limit=int_param(request, 'limit', 10),
        )
        return Response(standardized_response(
            data={
                'product': result['product'],
                'reviews': ReviewSerializer(result['reviews'], many=True).data,
                'rating_distribution': result['rating_distribution'],
            },
            pagination=result['pagination'],
        ))


class ReviewDetailView(BaseAPIView):
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def get_permissions(self):
        if self.request.method == 'GET':
            return [AllowAny()]
        return [IsAuthenticated()]

    @extend_schema(tags=["Reviews"], responses={200: ReviewSerializer})
    def get(self, request, pk):
        review = ReviewService().get(pk)
        return Response(standardized_response(data=ReviewSerializer(review).data))

    @extend_schema(
        tags=["Reviews"],
        request=ReviewUpdateSerializer,
        responses={
            200: ReviewSerializer,
            400: OpenApiResponse(description="Approved reviews cannot be edited"),
            403: OpenApiResponse(description="Not the review author"),
        }
    )
    def patch(self, request, pk):
        serializer = ReviewUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        review = ReviewService().update(
            request.user, pk, serializer.validated_data, images=request.FILES.getlist('images')
        )
        return Response(standardized_response(data=ReviewSerializer(review).data, message="Review updated successfully"))

    @extend_schema(tags=["Reviews"], responses={403: OpenApiResponse(description="Not the review author")})
    def delete(self, request, pk):
        ReviewService().delete(request.user, pk)
        logger.info(f"Review {pk} deleted by user {request.user.pk}")
        return Response(standardized_response(message="Review deleted successfully"))


class ReviewStatusView(BaseAPIView):
    permission_classes = [IsAdmin]

    @extend_schema(tags=["Reviews"], request=ReviewStatusSerializer, responses={200: ReviewSerializer})
    def patch(self, request, pk):
        serializer = ReviewStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = ReviewService().set_status(
            pk,
            serializer.validated_data['status'],
            rejection_reason=serializer.validated_data.get('rejection_reason'),
            admin_response=serializer.validated_data.get('admin_response'),
        )
        messages = {
            'approved': "Review approved successfully",
            'rejected': "Review rejected successfully",
        }
        return Response(standardized_response(
            data=ReviewSerializer(review).data,
            message=messages.get(review.status, "Review status updated successfully")
        ))


class ReviewHelpfulView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Reviews"], request=None, responses={200: ReviewSerializer})
    def post(self, request, pk):
        review = ReviewService().mark_helpful(request.user, pk)
        return Response(standardized_response(data=ReviewSerializer(review).data, message="Review marked as helpful"))

    @extend_schema(tags=["Reviews"], responses={200: ReviewSerializer})
    def delete(self, request, pk):
        review = ReviewService().unmark_helpful(request.user, pk)
        return Response(standardized_response(data=ReviewSerializer(review).data, message="Review unmarked as helpful"))


@extend_schema(tags=["Reviews"])
class ReviewStatisticsView(BaseAPIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        return Response(standardized_response(data=ReviewService().statistics()))


@extend_schema(tags=["Reviews"], request={'multipart/form-data': {'type': 'object'}})
class ReviewImageUploadView(BaseAPIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        urls = ReviewService().upload_images(request.FILES.getlist('images'))
        return Response(standardized_response(data={'images': urls}, message="Review images uploaded successfully"))
