from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models


# ==========================================
# Category Model
# ==========================================
class Category(models.Model):
    """
    Top of the catalog tree. Sub-categories hang off it through
    SubCategory.category (reverse accessor: ``subcategories``).
    """
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.CharField(max_length=500, blank=True, null=True)
    image = models.URLField(max_length=500, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Categories"
        ordering = ['name']

    def __str__(self):
        return self.name


# ==========================================
# Sub-category Model
# ==========================================
class SubCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.CharField(max_length=500, blank=True, null=True)
    image = models.URLField(max_length=500, blank=True, null=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='subcategories')
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Sub-categories"
        ordering = ['name']

    def __str__(self):
        return self.name


# ==========================================
# Brand Model
# ==========================================
class Brand(models.Model):
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.CharField(max_length=500, blank=True, null=True)
    image = models.URLField(max_length=500, blank=True, null=True)
    sub_category = models.ForeignKey(SubCategory, on_delete=models.PROTECT, related_name='brands')
    since = models.PositiveIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(1800)],
        help_text="Year the brand was founded"
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


# ==========================================
# Product Model
# ==========================================
class Product(models.Model):
    VARIANT_TYPES = [
        ('single', 'Single'),
        ('multiple', 'Multiple'),
    ]

    name = models.CharField(max_length=150, unique=True)
    slug = models.SlugField(max_length=180, unique=True)
    description = models.TextField(max_length=2000, blank=True, null=True)
    sku = models.CharField(max_length=80, unique=True, help_text="Stored uppercase")

    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='products')
    sub_category = models.ForeignKey(SubCategory, on_delete=models.PROTECT, related_name='products')
    brand = models.ForeignKey(Brand, on_delete=models.PROTECT, related_name='products')

    images = models.JSONField(default=list, blank=True, help_text="Ordered list of image URLs")
    tags = models.JSONField(default=list, blank=True)

    variant_type = models.CharField(max_length=10, choices=VARIANT_TYPES, default='single')
    retail_price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    wholesale_price = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    stock = models.PositiveIntegerField(default=0)
    alert_quantity = models.PositiveIntegerField(default=0)

    # Maintained from approved reviews
    average_rating = models.DecimalField(max_digits=2, decimal_places=1, default=0)
    total_reviews = models.PositiveIntegerField(default=0)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    @property
    def in_stock(self):
        return self.stock > 0

    def __str__(self):
        return self.name


# ==========================================
# Variant Model
# ==========================================
class Variant(models.Model):
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='variants')
    name = models.CharField(max_length=150)
    slug = models.SlugField(max_length=180, unique=True)
    description = models.TextField(max_length=1000, blank=True, null=True)
    size = models.CharField(max_length=50, blank=True, null=True)
    color = models.CharField(max_length=50, blank=True, null=True)
    stock = models.PositiveIntegerField(default=0)
    alert_stock = models.PositiveIntegerField(default=5)
    retail_price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    wholesale_price = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    images = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['product', 'name'], name='unique_variant_name_per_product')
        ]

    def __str__(self):
        return f"{self.product.name} / {self.name}"


# ==========================================
# Discount Model
# ==========================================
class Discount(models.Model):
    """
    A time-boxed discount. The plan decides which single target field is set;
    a ``flat`` discount has none.
    """
    class DiscountType(models.TextChoices):
        AMOUNT = 'amount', 'Amount'
        PERCENTAGE = 'percentage', 'Percentage'

    class Plan(models.TextChoices):
        FLAT = 'flat', 'Flat'
        CATEGORY = 'category', 'Category'
        SUBCATEGORY = 'subcategory', 'Sub-category'
        BRAND = 'brand', 'Brand'
        PRODUCT = 'product', 'Product'

    # plan -> target field
    TARGET_FIELDS = {
        Plan.CATEGORY: 'target_category',
        Plan.SUBCATEGORY: 'target_sub_category',
        Plan.BRAND: 'target_brand',
        Plan.PRODUCT: 'target_product',
    }

    discount_name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.CharField(max_length=500, blank=True, null=True)
    discount_type = models.CharField(max_length=20, choices=DiscountType.choices)
    discount_plan = models.CharField(max_length=20, choices=Plan.choices)

    target_category = models.ForeignKey(
        Category, on_delete=models.PROTECT, null=True, blank=True, related_name='discounts'
    )
    target_sub_category = models.ForeignKey(
        SubCategory, on_delete=models.PROTECT, null=True, blank=True, related_name='discounts'
    )
    target_brand = models.ForeignKey(
        Brand, on_delete=models.PROTECT, null=True, blank=True, related_name='discounts'
    )
    target_product = models.ForeignKey(
        Product, on_delete=models.PROTECT, null=True, blank=True, related_name='discounts'
    )

    valid_from = models.DateTimeField()
    valid_to = models.DateTimeField()
    value_by_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)]
    )
    value_by_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    @property
    def target(self):
        field = self.TARGET_FIELDS.get(self.discount_plan)
        return getattr(self, field) if field else None

    def __str__(self):
        return self.discount_name
