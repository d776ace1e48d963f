import json
from unittest import mock

from django.apps import apps
from django.test import TestCase

from apps.ai.services import SuggestionService
from apps.core.models import Task, User

from .stubs import StubCompletionClient, unavailable


class AiViewTestCase(TestCase):
    def use_replies(self, *replies):
        """Troca o cliente de LLM da app por um stub durante o teste"""
        client = StubCompletionClient(*replies)
        patcher = mock.patch.object(apps.get_app_config('ai'), 'suggestion_service', SuggestionService(client))
        patcher.start()
        self.addCleanup(patcher.stop)
        return client

    def post_json(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')


class TaskSuggestionViewTests(AiViewTestCase):
    def test_roster_comes_from_users_when_not_sent(self):
        User.objects.create_user(username='bruno', name='Bruno Lima', role='Developer')
        client = self.use_replies({'priority': 'high', 'suggested_assignee': 'BRUNO LIMA', 'reasoning': 'ok'})

        response = self.post_json('/api/ai/task-suggestions/', {'title': 'Build the sync job'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['suggested_assignee'], 'Bruno Lima')
        prompt = ' '.join(m['content'] for m in client.calls[0])
        self.assertIn('Bruno Lima', prompt)

    def test_upstream_failure_still_returns_200(self):
        self.use_replies(unavailable())

        response = self.post_json('/api/ai/task-suggestions/', {
            'title': 'Build the sync job',
            'currentPriority': 'high',
            'userList': [{'name': 'Ana'}],
        })

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['priority'], 'high')

    def test_task_modal_payload_resolves_current_assignee(self):
        bruno = User.objects.create_user(username='bruno', name='Bruno Lima', role='Developer')
        self.use_replies('not json at all')

        response = self.post_json('/api/ai/task-suggestions/', {
            'title': 'Build the sync job',
            'description': '',
            'currentPriority': 'medium',
            'currentCategory': '',
            'currentDeadline': '',
            'currentAssigneeId': bruno.id,
            'userList': [{'id': bruno.id, 'username': 'bruno', 'name': 'Bruno Lima', 'role': 'Developer'}],
        })

        self.assertEqual(response.status_code, 200, response.content)
        self.assertEqual(response.json()['suggested_assignee'], 'Bruno Lima')

    def test_empty_assignee_id_is_accepted(self):
        self.use_replies({'priority': 'low'})

        response = self.post_json('/api/ai/task-suggestions/', {
            'title': 'Tidy the backlog',
            'currentAssigneeId': '',
            'userList': [],
        })

        self.assertEqual(response.status_code, 200, response.content)
        self.assertEqual(response.json()['suggested_assignee'], '')

    def test_roster_members_without_name_are_dropped(self):
        client = self.use_replies({'suggested_assignee': 'Ana'})

        response = self.post_json('/api/ai/task-suggestions/', {
            'title': 'Build the sync job',
            'userList': [{'id': 9, 'name': ''}, {'name': 'Ana', 'role': 'Designer'}],
        })

        self.assertEqual(response.status_code, 200, response.content)
        self.assertEqual(response.json()['suggested_assignee'], 'Ana')
        self.assertEqual(len(client.calls), 1)

    def test_missing_text_is_400(self):
        self.use_replies({})

        response = self.post_json('/api/ai/task-suggestions/', {'currentPriority': 'high'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Title or description is required')

    def test_invalid_roster_is_400(self):
        self.use_replies({})

        response = self.post_json('/api/ai/task-suggestions/', {'title': 'x', 'userList': 'Ana'})

        self.assertEqual(response.status_code, 400)


class QueryViewTests(AiViewTestCase):
    def test_answer(self):
        self.use_replies({'response': 'Start with the schema.'})

        response = self.post_json('/api/ai/query/', {'query': 'Where do I begin?'})

        self.assertEqual(response.json(), {'response': 'Start with the schema.'})

    def test_query_is_required(self):
        self.use_replies({})

        response = self.post_json('/api/ai/query/', {'taskId': 1})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Query is required')

    def test_upstream_failure_is_502(self):
        self.use_replies(unavailable())

        response = self.post_json('/api/ai/query/', {'query': 'Hello?'})

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()['message'], 'The AI service is unavailable')


class AnalysisViewTests(AiViewTestCase):
    def test_empty_board(self):
        self.use_replies({})

        self.assertEqual(self.client.get('/api/ai/priorities/').json(), [])
        self.assertEqual(self.client.get('/api/ai/workflow-improvements/').json(), [])
        self.assertEqual(self.client.get('/api/ai/bottlenecks/').json(), [])
        self.assertIsNone(self.client.get('/api/ai/predictions/').json())

    def test_upstream_failure_is_502(self):
        Task.objects.create(title='Build API')
        self.use_replies(unavailable())

        response = self.client.get('/api/ai/workflow-improvements/')

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()['message'], 'The AI service is unavailable')

    def test_priorities_survive_upstream_failure(self):
        Task.objects.create(title='Build API', priority='high')
        self.use_replies(unavailable())

        response = self.client.get('/api/ai/priorities/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]['suggested_priority'], 'high')

    def test_post_not_allowed(self):
        response = self.client.post('/api/ai/bottlenecks/')

        self.assertEqual(response.status_code, 405)
