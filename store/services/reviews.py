import logging
from decimal import Decimal, ROUND_HALF_UP

from django.core.paginator import Paginator
from django.db import transaction
from django.db.models import Avg, Count

from authentication.core.exceptions import (
    AlreadyMarked,
    AlreadyReviewed,
    ImageLimitExceeded,
    InvalidInput,
    NotMarked,
    NotResourceOwner,
    ProductNotFound,
    ReviewLocked,
    ReviewNotApproved,
    ReviewNotFound,
)
from catalog.models import Product
from catalog.services.media import get_blob_store
from commerce_api.conf import StoreConfig
from store.models import Review

logger = logging.getLogger(__name__)


MAX_PAGE_SIZE = 100


def paginate(queryset, page, limit):
    """Slice ``queryset`` into a page and describe where it sits."""
    limit = min(max(limit or 1, 1), MAX_PAGE_SIZE)
    paginator = Paginator(queryset, limit)
    current = paginator.get_page(page)
    return current.object_list, {
        'current_page': current.number,
        'total_pages': paginator.num_pages,
        'total_reviews': paginator.count,
        'reviews_per_page': limit,
        'has_next_page': current.has_next(),
        'has_prev_page': current.has_previous(),
    }


def one_decimal(value):
    return Decimal(str(value)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)


def rating_distribution(queryset):
    rows = queryset.values('rating').annotate(count=Count('id')).order_by('-rating')
    return [{'rating': row['rating'], 'count': row['count']} for row in rows]


class ReviewService:
    """
    Product reviews and the rating aggregate they feed.

    Only approved reviews count. Whenever a review moves into or out of the
    approved state, or an approved review is deleted, the product's
    ``average_rating`` and ``total_reviews`` are recomputed from scratch.
    """

    def __init__(self, config=None, blob_store=None):
        self.config = config or StoreConfig.from_settings()
        self.blobs = blob_store or get_blob_store(self.config)

    # ---------------------------
    # LOOKUPS
    # ---------------------------
    @staticmethod
    def _base_queryset():
        return Review.objects.select_related('product', 'customer')

    def get(self, review_id):
        try:
            return self._base_queryset().get(pk=review_id)
        except (Review.DoesNotExist, ValueError, TypeError):
            raise ReviewNotFound()

    def list(self, status=None, rating=None, page=1, limit=20):
        qs = self._base_queryset()
        if status:
            qs = qs.filter(status=status)
        if rating:
            qs = qs.filter(rating=rating)
        reviews, pagination = paginate(qs, page, limit)
        return {'reviews': reviews, 'pagination': pagination}

    def product_reviews(self, product_id, status=Review.Status.APPROVED, rating=None, page=1, limit=10):
        try:
            product = Product.objects.get(pk=product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise ProductNotFound()

        qs = self._base_queryset().filter(product=product).order_by('-created_at', '-helpful')
        if status:
            qs = qs.filter(status=status)
        if rating:
            qs = qs.filter(rating=rating)

        reviews, pagination = paginate(qs, page, limit)
        approved = Review.objects.filter(product=product, status=Review.Status.APPROVED)
        return {
            'product': {
                'id': product.pk,
                'name': product.name,
                'average_rating': product.average_rating,
                'total_reviews': product.total_reviews,
            },
            'reviews': reviews,
            'rating_distribution': rating_distribution(approved),
            'pagination': pagination,
        }

    def user_reviews(self, user, status=None, page=1, limit=10):
        qs = self._base_queryset().filter(customer=user)
        if status:
            qs = qs.filter(status=status)
        reviews, pagination = paginate(qs, page, limit)
        return {'reviews': reviews, 'pagination': pagination}

    # ---------------------------
    # AGGREGATE
    # ---------------------------
    @staticmethod
    def recompute_product_rating(product_id):
        stats = Review.objects.filter(
            product_id=product_id, status=Review.Status.APPROVED
        ).aggregate(avg=Avg('rating'), count=Count('id'))

        average = one_decimal(stats['avg']) if stats['avg'] is not None else Decimal('0')
        Product.objects.filter(pk=product_id).update(average_rating=average, total_reviews=stats['count'])
        logger.info(f"Product {product_id} rating recomputed: {average} over {stats['count']} review(s)")
        return average, stats['count']

    # ---------------------------
    # IMAGES
    # ---------------------------
    def _check_image_count(self, files):
        if len(files) > self.config.review_max_images:
            raise ImageLimitExceeded(f"Maximum {self.config.review_max_images} images allowed per review")

    def upload_images(self, files):
        if not files:
            raise InvalidInput("No images provided for upload")
        self._check_image_count(files)
        return self.blobs.store_many(files)

    # ---------------------------
    # CREATE / UPDATE / DELETE
    # ---------------------------
    @transaction.atomic
    def create(self, user, data, images=None):
        try:
            product = Product.objects.get(pk=data['product'])
        except (Product.DoesNotExist, ValueError, TypeError):
            raise ProductNotFound()

        if Review.objects.filter(customer=user, product=product).exists():
            raise AlreadyReviewed()

        images = images or []
        self._check_image_count(images)
        urls = self.blobs.store_many(images) if images else []

        try:
            review = Review.objects.create(
                product=product,
                customer=user,
                rating=data['rating'],
                comment=data['comment'],
                images=urls,
            )
        except Exception:
            self.blobs.delete_quietly(urls)
            raise
        logger.info(f"Review {review.pk} created by user {user.pk} for product {product.pk}")
        return review

    @transaction.atomic
    def update(self, user, review_id, data, images=None):
        review = self.get(review_id)
        if review.customer_id != user.pk:
            raise NotResourceOwner("You can only update your own reviews")
        if review.is_approved:
            raise ReviewLocked()

        for field in ('rating', 'comment'):
            if field in data:
                setattr(review, field, data[field])

        old_images = []
        if images:
            self._check_image_count(images)
            old_images = review.images
            review.images = self.blobs.store_many(images)

        try:
            review.save()
        except Exception:
            if images:
                self.blobs.delete_quietly(review.images)
            raise

        # old blobs go only once the new list is stored
        if old_images:
            self.blobs.delete_quietly(old_images)
        logger.info(f"Review {review.pk} updated by user {user.pk}")
        return review

    @transaction.atomic
    def delete(self, user, review_id):
        review = self.get(review_id)
        is_admin = getattr(user, 'is_admin', False) or user.is_staff
        if review.customer_id != user.pk and not is_admin:
            raise NotResourceOwner("You can only delete your own reviews")

        if review.images:
            self.blobs.delete_quietly(review.images)

        was_approved = review.is_approved
        product_id = review.product_id
        review.delete()
        if was_approved:
            self.recompute_product_rating(product_id)

        logger.info(f"Review {review_id} deleted by user {user.pk}")

    # ---------------------------
    # MODERATION
    # ---------------------------
    @transaction.atomic
    def set_status(self, review_id, status, rejection_reason=None, admin_response=None):
        review = self.get(review_id)
        was_approved = review.is_approved

        review.status = status
        review.rejection_reason = rejection_reason if status == Review.Status.REJECTED else None
        if admin_response:
            review.admin_response = admin_response
        review.save()

        if was_approved != review.is_approved:
            self.recompute_product_rating(review.product_id)

        logger.info(f"Review {review.pk} status set to {status}")
        return review

    @transaction.atomic
    def mark_helpful(self, user, review_id):
        review = self.get(review_id)
        if not review.is_approved:
            raise ReviewNotApproved()
        if review.helpful_by.filter(pk=user.pk).exists():
            raise AlreadyMarked()

        review.helpful_by.add(user)
        return self._sync_helpful(review)

    @transaction.atomic
    def unmark_helpful(self, user, review_id):
        review = self.get(review_id)
        if not review.is_approved:
            raise ReviewNotApproved()
        if not review.helpful_by.filter(pk=user.pk).exists():
            raise NotMarked()

        review.helpful_by.remove(user)
        return self._sync_helpful(review)

    @staticmethod
    def _sync_helpful(review):
        review.helpful = review.helpful_by.count()
        review.save(update_fields=['helpful', 'updated_at'])
        return review

    # ---------------------------
    # STATISTICS
    # ---------------------------
    def statistics(self):
        approved = Review.objects.filter(status=Review.Status.APPROVED)
        average = approved.aggregate(avg=Avg('rating'))['avg']

        top_products = (
            approved.values('product_id', 'product__name', 'product__slug')
            .annotate(review_count=Count('id'), average_rating=Avg('rating'))
            .order_by('-review_count')[:10]
        )

        return {
            'total_reviews': Review.objects.count(),
            'average_rating': one_decimal(average) if average is not None else 0,
            'status_distribution': [
                {'status': row['status'], 'count': row['count']}
                for row in Review.objects.values('status').annotate(count=Count('id')).order_by('status')
            ],
            'rating_distribution': rating_distribution(approved),
            'top_reviewed_products': [
                {
                    'product_id': row['product_id'],
                    'product_name': row['product__name'],
                    'product_slug': row['product__slug'],
                    'review_count': row['review_count'],
                    'average_rating': one_decimal(row['average_rating']),
                }
                for row in top_products
            ],
        }
