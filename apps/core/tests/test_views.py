import json
from unittest import mock

from django.test import TestCase, override_settings

from apps.core.exceptions import PersistenceError
from apps.core.models import AppSetting, User


class HealthCheckTests(TestCase):
    def test_healthy(self):
        data = self.client.get('/api/health/').json()

        self.assertEqual(data['status'], 'OK')
        self.assertEqual(data['message'], 'API server is running')
        self.assertFalse(data['ai_enabled'])

    @mock.patch('apps.core.views.cache')
    def test_unhealthy_cache_is_500(self, cache):
        cache.set.side_effect = ConnectionError('redis down')

        response = self.client.get('/api/health/')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['status'], 'unhealthy')
        self.assertIsNone(response.json()['error'])


class UserViewTests(TestCase):
    def setUp(self):
        self.ana = User.objects.create_user(username='ana', password='pw', name='Ana', role='Designer',
                                            skills=['Figma'])

    def test_user_list(self):
        users = self.client.get('/api/users/').json()

        self.assertEqual(len(users), 1)
        self.assertEqual(users[0]['name'], 'Ana')
        self.assertEqual(users[0]['skills'], ['Figma'])
        self.assertNotIn('password', users[0])

    def test_profile_requires_session(self):
        response = self.client.get('/api/users/profile/')

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {'message': 'Authentication required'})

    def test_profile_for_logged_in_user(self):
        self.client.force_login(self.ana)

        self.assertEqual(self.client.get('/api/users/profile/').json()['username'], 'ana')


class LlmUrlSettingTests(TestCase):
    url = '/api/settings/llm-url/'

    def post_json(self, data):
        return self.client.post(self.url, data=json.dumps(data), content_type='application/json')

    def test_default_comes_from_settings(self):
        self.assertEqual(self.client.get(self.url).json(), {'llmUrl': 'http://llm.test/v1'})

    def test_update(self):
        response = self.post_json({'llmUrl': 'http://192.168.0.10:1234/v1'})

        self.assertEqual(response.json(), {
            'message': 'LLM URL updated successfully',
            'llmUrl': 'http://192.168.0.10:1234/v1',
        })
        self.assertEqual(AppSetting.get_value(AppSetting.LLM_URL), 'http://192.168.0.10:1234/v1')
        self.assertEqual(self.client.get(self.url).json()['llmUrl'], 'http://192.168.0.10:1234/v1')

    def test_missing_url_is_400(self):
        response = self.post_json({})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'LLM URL is required')

    def test_invalid_url_is_400(self):
        response = self.post_json({'llmUrl': 'ftp://files.example.com'})

        self.assertEqual(response.status_code, 400)
        self.assertFalse(AppSetting.objects.exists())


class ApiErrorTests(TestCase):
    def test_unknown_api_route_is_json_404(self):
        response = self.client.get('/api/nothing/here/')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {
            'status': 'error',
            'message': 'API endpoint not found: /api/nothing/here/',
        })

    @mock.patch('apps.core.views.User.objects.all')
    def test_unexpected_errors_become_json_500(self, all_users):
        all_users.side_effect = RuntimeError('boom')

        response = self.client.get('/api/users/')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'message': 'Something went wrong!', 'error': None})

    @override_settings(DEBUG=True)
    @mock.patch('apps.core.views.User.objects.all')
    def test_domain_error_detail_only_in_debug(self, all_users):
        all_users.side_effect = PersistenceError(detail='disk full')

        response = self.client.get('/api/users/')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'message': 'Failed to save changes', 'error': 'disk full'})


class AuthViewTests(TestCase):
    def setUp(self):
        self.ana = User.objects.create_user(username='ana', email='ana@example.com', password='s3cret-pass', name='Ana')

    def post_json(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def test_login_opens_session(self):
        response = self.post_json('/api/auth/login/', {'username': 'ana', 'password': 's3cret-pass'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['user']['username'], 'ana')
        self.assertEqual(self.client.get('/api/users/profile/').json()['name'], 'Ana')

    def test_login_by_email(self):
        response = self.post_json('/api/auth/login/', {'username': 'ANA@example.com', 'password': 's3cret-pass'})

        self.assertEqual(response.status_code, 200)

    def test_wrong_password_is_401(self):
        response = self.post_json('/api/auth/login/', {'username': 'ana', 'password': 'nope'})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(self.client.get('/api/users/profile/').status_code, 401)

    def test_login_requires_both_fields(self):
        response = self.post_json('/api/auth/login/', {'username': 'ana'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Username and password are required')

    def test_register_creates_user_and_session(self):
        response = self.post_json('/api/auth/register/', {
            'username': 'bruno',
            'password': 'long-enough',
            'name': 'Bruno Lima',
        })

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['user']['role'], 'user')
        self.assertTrue(User.objects.get(username='bruno').check_password('long-enough'))
        self.assertEqual(self.client.get('/api/users/profile/').json()['username'], 'bruno')

    def test_register_rejects_taken_username(self):
        response = self.post_json('/api/auth/register/', {'username': 'ANA', 'password': 'long-enough', 'name': 'A'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Username already exists')

    def test_register_requires_name(self):
        response = self.post_json('/api/auth/register/', {'username': 'caio', 'password': 'long-enough'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Username, password, and name are required')

    def test_logout(self):
        self.client.force_login(self.ana)

        response = self.client.post('/api/auth/logout/')

        self.assertEqual(response.json(), {'status': 'success', 'message': 'Logged out successfully'})
        self.assertEqual(self.client.get('/api/users/profile/').status_code, 401)
