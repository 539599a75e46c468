from decimal import Decimal

from catalog.models import Brand, Category, Product, SubCategory, Variant


def make_tree(category='Shoes', sub_category='Sneakers', brand='Stride'):
    """Category -> sub-category -> brand chain, created directly."""
    cat = Category.objects.create(name=category, slug=category.lower())
    sub = SubCategory.objects.create(name=sub_category, slug=sub_category.lower(), category=cat)
    brd = Brand.objects.create(name=brand, slug=brand.lower(), sub_category=sub)
    return cat, sub, brd


def make_product(brand, name='Runner', sku=None, price='10.00', stock=10, images=None):
    sub = brand.sub_category
    return Product.objects.create(
        name=name,
        slug=name.lower().replace(' ', '-'),
        sku=sku or name.upper().replace(' ', '-'),
        category=sub.category,
        sub_category=sub,
        brand=brand,
        retail_price=Decimal(price),
        stock=stock,
        images=images or [],
    )


def make_variant(product, name='Red 42', images=None):
    return Variant.objects.create(
        product=product,
        name=name,
        slug=f"{product.slug}-{name.lower().replace(' ', '-')}",
        stock=3,
        retail_price=product.retail_price,
        images=images or [],
    )
