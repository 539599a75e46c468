import logging

from rest_framework import generics, status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample, OpenApiResponse

from authentication.core.base_view import BaseAPIView
from authentication.core.permissions import IsAdminOrReadOnly, IsAdmin
from authentication.core.response import standardized_response
from .filters import ProductFilter
from .serializers import (
    BrandSerializer, BrandWriteSerializer,
    CategorySerializer, CategoryWriteSerializer,
    DiscountSerializer, DiscountWriteSerializer,
    ImageRemovalSerializer,
    ProductDetailSerializer, ProductSerializer, ProductWriteSerializer,
    SubCategorySerializer, SubCategoryWriteSerializer,
    VariantSerializer, VariantWriteSerializer,
)
from .services import (
    BrandService,
    CategoryService,
    DiscountService,
    ProductService,
    SubCategoryService,
    VariantService,
)

logger = logging.getLogger(__name__)


def paginated_payload(view, serializer):
    paginator = view.paginator
    return standardized_response(
        data=serializer.data,
        pagination={
            'count': paginator.page.paginator.count,
            'next': paginator.get_next_link(),
            'previous': paginator.get_previous_link(),
        }
    )


# ======================================================
# SHARED NODE VIEWS (category, sub-category, brand)
# ======================================================
class NodeListCreateView(BaseAPIView):
    """List nodes for anyone; admins create them (optionally with an ``image`` file)."""
    permission_classes = [IsAdminOrReadOnly]
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    service_class = None
    serializer_class = None
    write_serializer_class = None
    label = None

    def get(self, request):
        queryset = self.service_class().list()
        serializer = self.serializer_class(queryset, many=True)
        return Response(standardized_response(data=serializer.data))

    def post(self, request):
        serializer = self.write_serializer_class(data=request.data)
        serializer.is_valid(raise_exception=True)
        instance = self.service_class().create(serializer.validated_data, image=request.FILES.get('image'))
        return Response(
            standardized_response(
                data=self.serializer_class(instance).data,
                message=f"{self.label} created successfully"
            ),
            status=status.HTTP_201_CREATED
        )


class NodeDetailView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    service_class = None
    serializer_class = None
    write_serializer_class = None
    label = None

    def get(self, request, slug):
        instance = self.service_class().get(slug)
        return Response(standardized_response(data=self.serializer_class(instance).data))

    def patch(self, request, slug):
        serializer = self.write_serializer_class(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        instance = self.service_class().update(slug, serializer.validated_data, image=request.FILES.get('image'))
        return Response(standardized_response(
            data=self.serializer_class(instance).data,
            message=f"{self.label} updated successfully"
        ))

    def delete(self, request, slug):
        self.service_class().delete(slug)
        logger.info(f"{self.label} {slug} deleted by {request.user.email}")
        return Response(standardized_response(message=f"{self.label} deleted successfully"))


# ======================================================
# CATEGORY VIEWS
# ======================================================
@extend_schema(
    tags=["Categories"],
    request=CategoryWriteSerializer,
    responses={200: CategorySerializer(many=True), 201: CategorySerializer},
)
class CategoryListCreateView(NodeListCreateView):
    service_class = CategoryService
    serializer_class = CategorySerializer
    write_serializer_class = CategoryWriteSerializer
    label = "Category"


@extend_schema(
    tags=["Categories"],
    request=CategoryWriteSerializer,
    responses={
        200: CategorySerializer,
        400: OpenApiResponse(description="Category still has sub-categories"),
        404: OpenApiResponse(description="Category not found"),
    },
)
class CategoryDetailView(NodeDetailView):
    service_class = CategoryService
    serializer_class = CategorySerializer
    write_serializer_class = CategoryWriteSerializer
    label = "Category"


# ======================================================
# SUB-CATEGORY VIEWS
# ======================================================
@extend_schema(
    tags=["Sub-categories"],
    request=SubCategoryWriteSerializer,
    responses={200: SubCategorySerializer(many=True), 201: SubCategorySerializer},
)
class SubCategoryListCreateView(NodeListCreateView):
    service_class = SubCategoryService
    serializer_class = SubCategorySerializer
    write_serializer_class = SubCategoryWriteSerializer
    label = "Sub-category"


@extend_schema(tags=["Sub-categories"], request=SubCategoryWriteSerializer, responses={200: SubCategorySerializer})
class SubCategoryDetailView(NodeDetailView):
    service_class = SubCategoryService
    serializer_class = SubCategorySerializer
    write_serializer_class = SubCategoryWriteSerializer
    label = "Sub-category"


# ======================================================
# BRAND VIEWS
# ======================================================
@extend_schema(
    tags=["Brands"],
    request=BrandWriteSerializer,
    responses={200: BrandSerializer(many=True), 201: BrandSerializer},
)
class BrandListCreateView(NodeListCreateView):
    service_class = BrandService
    serializer_class = BrandSerializer
    write_serializer_class = BrandWriteSerializer
    label = "Brand"


@extend_schema(tags=["Brands"], request=BrandWriteSerializer, responses={200: BrandSerializer})
class BrandDetailView(NodeDetailView):
    service_class = BrandService
    serializer_class = BrandSerializer
    write_serializer_class = BrandWriteSerializer
    label = "Brand"


# ======================================================
# PRODUCT VIEWS
# ======================================================
class ProductListCreateView(BaseAPIView, generics.ListAPIView):
    permission_classes = [IsAdminOrReadOnly]
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    serializer_class = ProductSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = ProductFilter
    search_fields = ['name', 'description', 'sku']
    ordering_fields = ['retail_price', 'name', 'created_at', 'average_rating']

    def get_queryset(self):
        return ProductService().list()

    @extend_schema(
        tags=["Products"],
        parameters=[
            OpenApiParameter(name='category', description='Filter by category slug', required=False, type=str),
            OpenApiParameter(name='sub_category', description='Filter by sub-category slug', required=False, type=str),
            OpenApiParameter(name='brand', description='Filter by brand slug', required=False, type=str),
            OpenApiParameter(name='min_price', description='Minimum retail price', required=False, type=float),
            OpenApiParameter(name='max_price', description='Maximum retail price', required=False, type=float),
            OpenApiParameter(name='search', description='Search by name, description or SKU', required=False, type=str),
            OpenApiParameter(name='ordering', description='Order by retail_price, name, created_at or average_rating', required=False, type=str),
        ],
        responses={200: ProductSerializer(many=True)},
        description="Retrieve a list of products. Supports filtering, search, and ordering."
    )
    def get(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return Response(paginated_payload(self, serializer))
        serializer = self.get_serializer(queryset, many=True)
        return Response(standardized_response(data=serializer.data))

    @extend_schema(
        tags=["Products"],
        description="Create a product (admin only). Upload up to 10 files under `images`.",
        request=ProductWriteSerializer,
        examples=[
            OpenApiExample(
                "Create product example",
                summary="Add new product",
                value={
                    "name": "Air Runner",
                    "sku": "air-001",
                    "category": 1,
                    "sub_category": 2,
                    "brand": 3,
                    "retail_price": "120.00",
                    "stock": 25,
                    "tags": ["running", "sport"]
                }
            )
        ],
        responses={201: ProductDetailSerializer, 400: OpenApiResponse(description="Invalid input")}
    )
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = ProductService().create(serializer.validated_data, images=request.FILES.getlist('images'))
        return Response(
            standardized_response(data=ProductDetailSerializer(product).data, message="Product created successfully"),
            status=status.HTTP_201_CREATED
        )


class ProductDetailView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(
        tags=["Products"],
        responses={200: ProductDetailSerializer, 404: OpenApiResponse(description="Product not found")},
        description="Retrieve details of a specific product by slug"
    )
    def get(self, request, slug):
        product = ProductService().get(slug)
        return Response(standardized_response(data=ProductDetailSerializer(product).data))

    @extend_schema(
        tags=["Products"],
        description="Update product fields. Files sent under `images` are appended (10 images max).",
        request=ProductWriteSerializer,
        examples=[OpenApiExample("Patch product example", summary="Set stock to zero", value={"stock": 0})],
        responses={200: ProductDetailSerializer}
    )
    def patch(self, request, slug):
        serializer = ProductWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        product = ProductService().update(slug, serializer.validated_data, images=request.FILES.getlist('images'))
        return Response(standardized_response(
            data=ProductDetailSerializer(product).data,
            message="Product updated successfully"
        ))

    @extend_schema(
        tags=["Products"],
        description="Delete a product together with its variants, discounts and images.",
        responses={200: OpenApiResponse(description="Product deleted successfully.")}
    )
    def delete(self, request, slug):
        ProductService().delete(slug)
        logger.info(f"Product {slug} deleted by {request.user.email}")
        return Response(standardized_response(message="Product deleted successfully"))


@extend_schema(tags=["Products"], request=ImageRemovalSerializer, responses={200: ProductDetailSerializer})
class ProductImageRemoveView(BaseAPIView):
    permission_classes = [IsAdmin]

    def post(self, request, slug):
        serializer = ImageRemovalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = ProductService().remove_images(slug, serializer.validated_data['images'])
        return Response(standardized_response(
            data=ProductDetailSerializer(product).data,
            message="Images removed successfully"
        ))


# ======================================================
# VARIANT VIEWS
# ======================================================
class VariantListCreateView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(
        tags=["Variants"],
        parameters=[OpenApiParameter(name='product', description='Filter by product slug', required=False, type=str)],
        responses={200: VariantSerializer(many=True)},
    )
    def get(self, request):
        variants = VariantService().list(product_slug=request.query_params.get('product'))
        return Response(standardized_response(data=VariantSerializer(variants, many=True).data))

    @extend_schema(tags=["Variants"], request=VariantWriteSerializer, responses={201: VariantSerializer})
    def post(self, request):
        serializer = VariantWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        variant = VariantService().create(serializer.validated_data, images=request.FILES.getlist('images'))
        return Response(
            standardized_response(data=VariantSerializer(variant).data, message="Variant created successfully"),
            status=status.HTTP_201_CREATED
        )


class VariantDetailView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(tags=["Variants"], responses={200: VariantSerializer})
    def get(self, request, slug):
        variant = VariantService().get(slug)
        return Response(standardized_response(data=VariantSerializer(variant).data))

    @extend_schema(tags=["Variants"], request=VariantWriteSerializer, responses={200: VariantSerializer})
    def patch(self, request, slug):
        serializer = VariantWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        variant = VariantService().update(slug, serializer.validated_data, images=request.FILES.getlist('images'))
        return Response(standardized_response(
            data=VariantSerializer(variant).data,
            message="Variant updated successfully"
        ))

    @extend_schema(tags=["Variants"], responses={200: OpenApiResponse(description="Variant deleted successfully.")})
    def delete(self, request, slug):
        VariantService().delete(slug)
        return Response(standardized_response(message="Variant deleted successfully"))


@extend_schema(tags=["Variants"], request=ImageRemovalSerializer, responses={200: VariantSerializer})
class VariantImageRemoveView(BaseAPIView):
    permission_classes = [IsAdmin]

    def post(self, request, slug):
        serializer = ImageRemovalSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        variant = VariantService().remove_images(slug, serializer.validated_data['images'])
        return Response(standardized_response(
            data=VariantSerializer(variant).data,
            message="Images removed successfully"
        ))


# ======================================================
# DISCOUNT VIEWS
# ======================================================
class DiscountListCreateView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(tags=["Discounts"], responses={200: DiscountSerializer(many=True)})
    def get(self, request):
        discounts = DiscountService().list()
        return Response(standardized_response(data=DiscountSerializer(discounts, many=True).data))

    @extend_schema(
        tags=["Discounts"],
        request=DiscountWriteSerializer,
        examples=[
            OpenApiExample(
                "Brand discount",
                value={
                    "discount_name": "Summer Sneakers",
                    "discount_type": "percentage",
                    "discount_plan": "brand",
                    "target": 3,
                    "valid_from": "2026-06-01T00:00:00Z",
                    "valid_to": "2026-08-31T23:59:59Z",
                    "value_by_percentage": "15.00"
                }
            )
        ],
        responses={201: DiscountSerializer, 404: OpenApiResponse(description="Target not found")}
    )
    def post(self, request):
        serializer = DiscountWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        discount = DiscountService().create(serializer.validated_data)
        return Response(
            standardized_response(data=DiscountSerializer(discount).data, message="Discount created successfully"),
            status=status.HTTP_201_CREATED
        )


class DiscountDetailView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(tags=["Discounts"], responses={200: DiscountSerializer})
    def get(self, request, slug):
        discount = DiscountService().get(slug)
        return Response(standardized_response(data=DiscountSerializer(discount).data))

    @extend_schema(tags=["Discounts"], request=DiscountWriteSerializer, responses={200: DiscountSerializer})
    def patch(self, request, slug):
        serializer = DiscountWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        discount = DiscountService().update(slug, serializer.validated_data)
        return Response(standardized_response(
            data=DiscountSerializer(discount).data,
            message="Discount updated successfully"
        ))

    @extend_schema(tags=["Discounts"], responses={200: OpenApiResponse(description="Discount deleted successfully.")})
    def delete(self, request, slug):
        DiscountService().delete(slug)
        return Response(standardized_response(message="Discount deleted successfully"))
