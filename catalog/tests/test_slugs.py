import random
from unittest.mock import MagicMock

from django.test import TestCase

from authentication.core.exceptions import InvalidName
from catalog.models import Category
from catalog.services import CategoryService
from catalog.services.slugs import assign_slug, normalize_slug


class NormalizeSlugTests(TestCase):
    def test_ascii_folds_and_lowercases(self):
        self.assertEqual(normalize_slug("Café Déjà Vu!"), "cafe-deja-vu")

    def test_underscores_and_repeated_dashes_collapse(self):
        self.assertEqual(normalize_slug("snake_case -- name"), "snake-case-name")

    def test_edge_dashes_stripped(self):
        self.assertEqual(normalize_slug("  -Trail Runner-  "), "trail-runner")


class AssignSlugTests(TestCase):
    def test_free_name_keeps_base_slug(self):
        self.assertEqual(assign_slug("Shoes", Category), "shoes")

    def test_name_without_slug_characters_is_rejected(self):
        with self.assertRaises(InvalidName):
            assign_slug("!!!", Category)

    def test_collision_appends_counter_past_existing_family(self):
        Category.objects.create(name="Shoes", slug="shoes")
        self.assertEqual(assign_slug("Shoes!", Category), "shoes-2")

        Category.objects.create(name="Shoes!", slug="shoes-2")
        self.assertEqual(assign_slug("SHOES", Category), "shoes-3")

    def test_counter_skips_taken_suffixes(self):
        Category.objects.create(name="Bags", slug="bags")
        Category.objects.create(name="Bags 3", slug="bags-3")
        # family size 2 -> start at 3, which is taken -> 4
        self.assertEqual(assign_slug("Bags?", Category), "bags-4")

    def test_similar_prefix_is_not_counted(self):
        Category.objects.create(name="Shoes", slug="shoes")
        Category.objects.create(name="Shoes Racks", slug="shoes-racks")
        self.assertEqual(assign_slug("Shoes.", Category), "shoes-2")

    def test_row_does_not_collide_with_itself(self):
        cat = Category.objects.create(name="Shoes", slug="shoes")
        self.assertEqual(assign_slug("shoes", Category, current_id=cat.pk), "shoes")


class SlugFamilyTests(TestCase):
    """Creates, renames and deletes with colliding names keep slugs distinct."""

    def setUp(self):
        self.service = CategoryService(blob_store=MagicMock())

    def _assert_family(self, base):
        slugs = list(Category.objects.values_list('slug', flat=True))
        self.assertEqual(len(slugs), len(set(slugs)))
        for slug in slugs:
            self.assertRegex(slug, rf'^{base}(-\d+)?$')

    def test_colliding_creates_and_renames(self):
        for name in ('Shoes', 'Shoes!', 'SHOES?', 'shoes.', 'Boots'):
            self.service.create({'name': name})

        self.service.update('boots', {'name': 'Shoes...'})
        self.service.update('shoes-2', {'name': 'Shoes!!'})
        self.service.delete('shoes')
        self.service.create({'name': '#Shoes'})
        self.service.update('shoes-3', {'name': ' shoes '})

        self.assertEqual(Category.objects.count(), 5)
        self._assert_family('shoes')

    def test_seeded_random_sequence(self):
        rng = random.Random(7)
        variants = ['Trail', 'trail!', 'TRAIL', 'Trail?', 'trail.', '-Trail-', 'Trail#', '(trail)']
        for _ in range(60):
            existing = list(Category.objects.order_by('pk').values_list('slug', flat=True))
            free = [name for name in variants if not Category.objects.filter(name=name).exists()]
            action = rng.choice(['create', 'rename', 'delete']) if existing else 'create'

            if action == 'create' and free:
                self.service.create({'name': rng.choice(free)})
            elif action == 'rename' and free:
                self.service.update(rng.choice(existing), {'name': rng.choice(free)})
            elif action == 'delete':
                self.service.delete(rng.choice(existing))
            self._assert_family('trail')
