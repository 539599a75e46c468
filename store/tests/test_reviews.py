from decimal import Decimal
from unittest.mock import MagicMock, patch

from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import TestCase

from authentication.core.exceptions import (
    AlreadyMarked,
    AlreadyReviewed,
    ImageLimitExceeded,
    NotMarked,
    NotResourceOwner,
    ProductNotFound,
    ReviewLocked,
    ReviewNotApproved,
)
from catalog.models import Product
from catalog.tests.factories import make_product, make_tree
from store.models import Review
from store.services import ReviewService


class ReviewServiceTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.alice = User.objects.create_user(email='alice@example.com', password='pass123')
        self.bob = User.objects.create_user(email='bob@example.com', password='pass123')
        self.carol = User.objects.create_user(email='carol@example.com', password='pass123')
        self.admin = User.objects.create_user(email='admin@example.com', password='pass123', role='ADMIN')
        cat, sub, brand = make_tree()
        self.product = make_product(brand)
        self.blobs = MagicMock()
        self.service = ReviewService(blob_store=self.blobs)

    def _review(self, user, rating=5, comment='Comfortable from day one'):
        return self.service.create(user, {'product': self.product.pk, 'rating': rating, 'comment': comment})

    def _rating(self):
        product = Product.objects.get(pk=self.product.pk)
        return product.average_rating, product.total_reviews

    def test_one_review_per_customer_and_product(self):
        self._review(self.alice)
        with self.assertRaises(AlreadyReviewed):
            self._review(self.alice, rating=1)
        self.assertEqual(Review.objects.count(), 1)

    def test_review_for_missing_product(self):
        with self.assertRaises(ProductNotFound):
            self.service.create(self.alice, {'product': 9999, 'rating': 4, 'comment': 'Never arrived at all'})

    def test_only_approved_reviews_count(self):
        first = self._review(self.alice, rating=5)
        second = self._review(self.bob, rating=4)
        self.assertEqual(self._rating(), (Decimal('0.0'), 0))

        self.service.set_status(first.pk, Review.Status.APPROVED)
        self.assertEqual(self._rating(), (Decimal('5.0'), 1))

        self.service.set_status(second.pk, Review.Status.APPROVED)
        self.assertEqual(self._rating(), (Decimal('4.5'), 2))

        self.service.set_status(first.pk, Review.Status.REJECTED, rejection_reason='Off topic')
        self.assertEqual(self._rating(), (Decimal('4.0'), 1))

        self.service.delete(self.bob, second.pk)
        self.assertEqual(self._rating(), (Decimal('0.0'), 0))

    def test_average_is_rounded_to_one_decimal(self):
        for user, rating in ((self.alice, 5), (self.bob, 4), (self.carol, 4)):
            review = self._review(user, rating=rating)
            self.service.set_status(review.pk, Review.Status.APPROVED)
        self.assertEqual(self._rating(), (Decimal('4.3'), 3))

    def test_rejection_reason_only_kept_while_rejected(self):
        review = self._review(self.alice)
        review = self.service.set_status(review.pk, Review.Status.REJECTED, rejection_reason='Spam')
        self.assertEqual(review.rejection_reason, 'Spam')

        review = self.service.set_status(review.pk, Review.Status.APPROVED, admin_response='Thanks!')
        self.assertIsNone(review.rejection_reason)
        self.assertEqual(review.admin_response, 'Thanks!')

    def test_helpful_marks(self):
        review = self._review(self.alice)
        with self.assertRaises(ReviewNotApproved):
            self.service.mark_helpful(self.bob, review.pk)

        self.service.set_status(review.pk, Review.Status.APPROVED)
        review = self.service.mark_helpful(self.bob, review.pk)
        self.assertEqual(review.helpful, 1)

        with self.assertRaises(AlreadyMarked):
            self.service.mark_helpful(self.bob, review.pk)

        self.service.mark_helpful(self.carol, review.pk)
        review = self.service.unmark_helpful(self.bob, review.pk)
        self.assertEqual(review.helpful, 1)
        self.assertEqual(review.helpful, review.helpful_by.count())

        with self.assertRaises(NotMarked):
            self.service.unmark_helpful(self.bob, review.pk)

    def test_only_author_edits_and_approved_reviews_are_locked(self):
        review = self._review(self.alice, rating=3)
        with self.assertRaises(NotResourceOwner):
            self.service.update(self.bob, review.pk, {'rating': 1})

        review = self.service.update(self.alice, review.pk, {'rating': 4})
        self.assertEqual(review.rating, 4)

        self.service.set_status(review.pk, Review.Status.APPROVED)
        with self.assertRaises(ReviewLocked):
            self.service.update(self.alice, review.pk, {'rating': 5})

    def test_image_cap(self):
        with self.assertRaises(ImageLimitExceeded):
            self.service.create(
                self.alice,
                {'product': self.product.pk, 'rating': 5, 'comment': 'Pictures say it all'},
                images=[object()] * 6,
            )
        self.blobs.store_many.assert_not_called()

    def test_replacing_images_drops_old_blobs(self):
        self.blobs.store_many.side_effect = [['https://img/v1/a.jpg'], ['https://img/v1/b.jpg']]
        review = self.service.create(
            self.alice,
            {'product': self.product.pk, 'rating': 5, 'comment': 'Pictures say it all'},
            images=[object()],
        )
        review = self.service.update(self.alice, review.pk, {}, images=[object()])

        self.assertEqual(review.images, ['https://img/v1/b.jpg'])
        self.blobs.delete_quietly.assert_called_once_with(['https://img/v1/a.jpg'])

    def test_failed_update_keeps_old_images(self):
        self.blobs.store_many.side_effect = [['https://img/v1/a.jpg'], ['https://img/v1/b.jpg']]
        review = self.service.create(
            self.alice,
            {'product': self.product.pk, 'rating': 5, 'comment': 'Pictures say it all'},
            images=[object()],
        )

        with patch.object(Review, 'save', side_effect=DatabaseError('write failed')):
            with self.assertRaises(DatabaseError):
                self.service.update(self.alice, review.pk, {}, images=[object()])

        self.blobs.delete_quietly.assert_called_once_with(['https://img/v1/b.jpg'])
        self.assertEqual(Review.objects.get(pk=review.pk).images, ['https://img/v1/a.jpg'])

    def test_admin_may_delete_any_review(self):
        review = self._review(self.alice)
        with self.assertRaises(NotResourceOwner):
            self.service.delete(self.bob, review.pk)
        self.service.delete(self.admin, review.pk)
        self.assertFalse(Review.objects.exists())

    def test_product_reviews_default_to_approved(self):
        approved = self._review(self.alice, rating=5)
        self._review(self.bob, rating=2)
        self.service.set_status(approved.pk, Review.Status.APPROVED)

        result = self.service.product_reviews(self.product.pk)
        self.assertEqual([r.pk for r in result['reviews']], [approved.pk])
        self.assertEqual(result['rating_distribution'], [{'rating': 5, 'count': 1}])
        self.assertEqual(result['pagination']['total_reviews'], 1)
        self.assertFalse(result['pagination']['has_next_page'])

    def test_statistics(self):
        first = self._review(self.alice, rating=5)
        self._review(self.bob, rating=1)
        self.service.set_status(first.pk, Review.Status.APPROVED)

        stats = self.service.statistics()
        self.assertEqual(stats['total_reviews'], 2)
        self.assertEqual(stats['average_rating'], Decimal('5.0'))
        self.assertEqual(
            stats['status_distribution'],
            [{'status': 'approved', 'count': 1}, {'status': 'pending', 'count': 1}],
        )
        self.assertEqual(stats['top_reviewed_products'][0]['product_slug'], self.product.slug)
