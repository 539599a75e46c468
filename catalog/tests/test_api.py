from unittest.mock import MagicMock, patch

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from catalog.models import Category
from .factories import make_product, make_tree


@patch('catalog.services.hierarchy.get_blob_store', return_value=MagicMock())
class CatalogAPITests(APITestCase):
    def setUp(self):
        User = get_user_model()
        self.admin = User.objects.create_user(email='admin@example.com', password='pass123', role='ADMIN')
        self.customer = User.objects.create_user(email='cust@example.com', password='pass123')

    def test_anyone_can_list_categories(self, _blobs):
        make_tree()
        resp = self.client.get('/api/catalog/categories/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data'][0]['slug'], 'shoes')

    def test_customer_cannot_create_category(self, _blobs):
        self.client.force_authenticate(user=self.customer)
        resp = self.client.post('/api/catalog/categories/', {'name': 'Shoes'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Category.objects.exists())

    def test_admin_creates_category(self, _blobs):
        self.client.force_authenticate(user=self.admin)
        resp = self.client.post('/api/catalog/categories/', {'name': 'Running Shoes'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['data']['slug'], 'running-shoes')

    def test_delete_category_with_children_is_refused(self, _blobs):
        make_tree()
        self.client.force_authenticate(user=self.admin)
        resp = self.client.delete('/api/catalog/categories/shoes/')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error_code'], 'has_dependents')

    def test_unknown_product_is_404(self, _blobs):
        resp = self.client.get('/api/catalog/products/missing/')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data['error_code'], 'product_not_found')

    def test_product_list_filters_by_brand_slug(self, _blobs):
        cat, sub, brand = make_tree()
        make_product(brand, name='Runner')
        other = make_tree('Bags', 'Backpacks', 'Carry')[2]
        make_product(other, name='Daypack')

        resp = self.client.get('/api/catalog/products/', {'brand': 'stride'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([p['name'] for p in resp.data['data']], ['Runner'])

    def test_patch_product_stock_to_zero(self, _blobs):
        cat, sub, brand = make_tree()
        product = make_product(brand, stock=5)
        self.client.force_authenticate(user=self.admin)

        resp = self.client.patch(f'/api/catalog/products/{product.slug}/', {'stock': 0}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['stock'], 0)
