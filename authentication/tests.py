from django.contrib.auth import get_user_model
from rest_framework.test import APITestCase
from rest_framework import status


class RegistrationAndLoginTests(APITestCase):
    def test_register_creates_customer_and_returns_tokens(self):
        resp = self.client.post('/api/auth/register/', {
            'email': 'new@example.com',
            'password': 'Str0ng-Passw0rd!',
            'full_name': 'New Customer',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertTrue(resp.data['success'])
        self.assertEqual(resp.data['data']['user']['role'], 'CUSTOMER')
        self.assertIn('access_token', resp.data['data']['tokens'])

    def test_register_rejects_existing_email(self):
        get_user_model().objects.create_user(email='taken@example.com', password='Str0ng-Passw0rd!')
        resp = self.client.post('/api/auth/register/', {
            'email': 'taken@example.com',
            'password': 'Str0ng-Passw0rd!',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(resp.data['success'])

    def test_login_with_wrong_password(self):
        get_user_model().objects.create_user(email='cust@example.com', password='Str0ng-Passw0rd!')
        resp = self.client.post('/api/auth/login/', {
            'email': 'cust@example.com',
            'password': 'wrong-password',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_then_fetch_current_user(self):
        get_user_model().objects.create_user(email='cust@example.com', password='Str0ng-Passw0rd!')
        resp = self.client.post('/api/auth/login/', {
            'email': 'cust@example.com',
            'password': 'Str0ng-Passw0rd!',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        token = resp.data['data']['tokens']['access_token']

        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        me = self.client.get('/api/auth/me/')
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data['data']['email'], 'cust@example.com')
        self.assertEqual(me.data['data']['role'], 'CUSTOMER')
        self.assertNotIn('is_verified', me.data['data'])

    def test_current_user_requires_authentication(self):
        resp = self.client.get('/api/auth/me/')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data['success'])
