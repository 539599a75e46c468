import logging

from django.db import transaction

from authentication.core.exceptions import (
    DiscountNotFound,
    DuplicateName,
    InvalidDateRange,
    InvalidDiscountValue,
    TargetNotFound,
)
from catalog.models import Brand, Category, Discount, Product, SubCategory
from catalog.services.slugs import assign_slug

logger = logging.getLogger(__name__)

TARGET_MODELS = {
    'target_category': Category,
    'target_sub_category': SubCategory,
    'target_brand': Brand,
    'target_product': Product,
}


class DiscountService:
    """
    Creates discounts and keeps their single target link in step with the plan.
    A discount appears in its target's ``discounts`` set through the one
    foreign key that matches its plan; the other target fields stay empty.
    """

    editable_fields = (
        'description', 'discount_type', 'valid_from', 'valid_to',
        'value_by_amount', 'value_by_percentage', 'is_active',
    )

    def list(self):
        return Discount.objects.select_related(
            'target_category', 'target_sub_category', 'target_brand', 'target_product'
        )

    def get(self, slug):
        try:
            return Discount.objects.get(slug=slug)
        except Discount.DoesNotExist:
            raise DiscountNotFound()

    # ---------------------------
    # RULES
    # ---------------------------
    @staticmethod
    def _ensure_name_free(name, exclude_pk=None):
        qs = Discount.objects.filter(discount_name=name)
        if exclude_pk is not None:
            qs = qs.exclude(pk=exclude_pk)
        if qs.exists():
            raise DuplicateName("Discount with this name already exists")

    @staticmethod
    def _validate_values(discount):
        if discount.valid_to <= discount.valid_from:
            raise InvalidDateRange()
        if discount.value_by_percentage is not None and not 0 <= discount.value_by_percentage <= 100:
            raise InvalidDiscountValue()
        if discount.value_by_amount is not None and discount.value_by_amount < 0:
            raise InvalidDiscountValue("Discount amount cannot be negative")

    @staticmethod
    def _attach(discount, plan, target_id):
        """Point the discount at ``target_id`` for ``plan``, clearing every other target."""
        for field in TARGET_MODELS:
            setattr(discount, field, None)

        field = Discount.TARGET_FIELDS.get(plan)
        if field is None:
            return

        model = TARGET_MODELS[field]
        try:
            target = model.objects.get(pk=target_id)
        except (model.DoesNotExist, ValueError, TypeError):
            raise TargetNotFound(f"{model._meta.verbose_name.title()} does not exist")
        setattr(discount, field, target)

    # ---------------------------
    # CREATE
    # ---------------------------
    @transaction.atomic
    def create(self, data):
        self._ensure_name_free(data['discount_name'])

        discount = Discount(
            discount_name=data['discount_name'],
            slug=assign_slug(data['discount_name'], Discount),
            discount_plan=data['discount_plan'],
        )
        for field in self.editable_fields:
            if field in data:
                setattr(discount, field, data[field])
        self._validate_values(discount)
        self._attach(discount, discount.discount_plan, data.get('target'))

        discount.save()
        logger.info(f"Discount created: {discount.slug} (plan={discount.discount_plan})")
        return discount

    # ---------------------------
    # UPDATE
    # ---------------------------
    @transaction.atomic
    def update(self, slug, data):
        discount = self.get(slug)

        if 'discount_name' in data and data['discount_name'] != discount.discount_name:
            self._ensure_name_free(data['discount_name'], exclude_pk=discount.pk)
            discount.discount_name = data['discount_name']
            discount.slug = assign_slug(data['discount_name'], Discount, current_id=discount.pk)

        for field in self.editable_fields:
            if field in data:
                setattr(discount, field, data[field])
        self._validate_values(discount)

        old_plan = discount.discount_plan
        old_target = discount.target.pk if discount.target is not None else None
        new_plan = data.get('discount_plan', old_plan)
        if new_plan != old_plan:
            # a target of the old plan means nothing under the new one
            new_target = data.get('target')
        else:
            new_target = data.get('target', old_target)

        if (new_plan, new_target) != (old_plan, old_target):
            logger.info(
                f"Retargeting discount {discount.slug}: "
                f"{old_plan}:{old_target} -> {new_plan}:{new_target}"
            )
            discount.discount_plan = new_plan
            self._attach(discount, new_plan, new_target)

        discount.save()
        logger.info(f"Discount updated: {discount.slug}")
        return discount

    # ---------------------------
    # DELETE
    # ---------------------------
    @transaction.atomic
    def delete(self, slug):
        discount = self.get(slug)
        discount.delete()
        logger.info(f"Discount deleted: {slug}")
