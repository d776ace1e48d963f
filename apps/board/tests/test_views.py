import json

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase
from django.test.client import BOUNDARY, MULTIPART_CONTENT, encode_multipart

from apps.core.models import Task, TaskHistory, User


class TaskApiTestCase(TestCase):
    def setUp(self):
        self.alice = User.objects.create_user(username='alice', password='pw', name='Alice', role='Developer')

    def post_json(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def put_json(self, url, data):
        return self.client.put(url, data=json.dumps(data), content_type='application/json')

    def create_task(self, **fields):
        fields.setdefault('title', 'Write docs')
        response = self.post_json('/api/tasks/', fields)
        self.assertEqual(response.status_code, 201, response.content)
        return response.json()


class TaskCrudViewTests(TaskApiTestCase):
    def test_create_returns_201_with_defaults(self):
        task = self.create_task(assignee_id=self.alice.id, tags='api, backend')

        self.assertEqual(task['status'], 'todo')
        self.assertEqual(task['priority'], 'medium')
        self.assertEqual(task['tags'], ['api', 'backend'])
        self.assertEqual(task['assignee']['name'], 'Alice')
        self.assertEqual(TaskHistory.objects.filter(task_identifier=task['id']).count(), 1)

    def test_create_without_title_is_400(self):
        response = self.post_json('/api/tasks/', {'description': 'no title'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Task title is required')
        self.assertFalse(Task.objects.exists())

    def test_unknown_keys_are_rejected(self):
        response = self.post_json('/api/tasks/', {'title': 'x', 'colour': 'red'})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Unknown fields: colour')

    def test_read_only_keys_are_ignored(self):
        task = self.create_task(id=42, createdAt='2024-01-01T00:00:00Z', assignee={'id': 1})

        self.assertNotEqual(task['id'], 42)

    def test_invalid_assignee_is_400(self):
        response = self.post_json('/api/tasks/', {'title': 'x', 'assignee_id': 999})

        self.assertEqual(response.status_code, 400)
        self.assertIn('assignee_id', response.json()['errors'])

    def test_deadline_accepts_datetime_strings(self):
        task = self.create_task(deadline='2024-05-01T00:00:00.000Z')

        self.assertEqual(task['deadline'], '2024-05-01')

    def test_list_and_detail(self):
        first = self.create_task(title='First')
        second = self.create_task(title='Second')

        listed = self.client.get('/api/tasks/').json()
        self.assertEqual([t['id'] for t in listed], [second['id'], first['id']])

        detail = self.client.get(f"/api/tasks/{first['id']}/")
        self.assertEqual(detail.json()['title'], 'First')

    def test_missing_task_is_404_json(self):
        response = self.client.get('/api/tasks/999/')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['message'], 'Task not found')

    def test_update_and_history(self):
        task = self.create_task()

        response = self.put_json(f"/api/tasks/{task['id']}/", {**task, 'title': 'Better docs', 'priority': 'high'})
        self.assertEqual(response.status_code, 200, response.content)
        self.assertEqual(response.json()['title'], 'Better docs')

        history = self.client.get(f"/api/tasks/{task['id']}/history/").json()
        self.assertEqual(len(history), 3)
        self.assertEqual(history[-1]['change_type'], 'create')
        self.assertEqual({h['field'] for h in history[:2]}, {'title', 'priority'})

    def test_status_patch(self):
        task = self.create_task()

        response = self.client.patch(
            f"/api/tasks/{task['id']}/status/",
            data=json.dumps({'status': 'in_progress'}),
            content_type='application/json'
        )

        self.assertEqual(response.json(), {
            'message': 'Task status updated successfully',
            'id': task['id'],
            'status': 'in_progress',
        })

    def test_status_patch_on_missing_task(self):
        response = self.client.patch(
            '/api/tasks/999/status/',
            data=json.dumps({'status': 'done'}),
            content_type='application/json'
        )

        self.assertEqual(response.status_code, 404)
        self.assertFalse(TaskHistory.objects.exists())

    def test_delete(self):
        task = self.create_task()

        response = self.client.delete(f"/api/tasks/{task['id']}/")

        self.assertEqual(response.json()['id'], task['id'])
        self.assertEqual(self.client.get('/api/tasks/').json(), [])

    def test_invalid_json_is_400(self):
        response = self.client.post('/api/tasks/', data='{not json', content_type='application/json')

        self.assertEqual(response.status_code, 400)


class TaskFilterViewTests(TaskApiTestCase):
    def test_filters_from_querystring(self):
        login = self.create_task(title='Fix login bug', tags=['auth'])
        self.create_task(title='Docs', tags=['docs'])
        ui = self.create_task(title='Polish board', tags=['frontend'])

        by_search = self.client.get('/api/tasks/filtered/', {'search': 'LOGIN'}).json()
        self.assertEqual([t['id'] for t in by_search], [login['id']])

        by_tags = self.client.get('/api/tasks/filtered/?tags=auth&tags=frontend').json()
        self.assertEqual({t['id'] for t in by_tags}, {login['id'], ui['id']})

    def test_invalid_date_is_400(self):
        response = self.client.get('/api/tasks/filtered/', {'deadline_before': 'soon'})

        self.assertEqual(response.status_code, 400)


class AttachmentViewTests(TaskApiTestCase):
    def test_multipart_create_stores_files(self):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')

        response = self.client.post('/api/tasks/', {'title': 'With file', 'tags': 'a,b', 'files': [upload]})

        self.assertEqual(response.status_code, 201, response.content)
        attachments = response.json()['file_attachments']
        self.assertEqual(len(attachments), 1)
        self.assertEqual(attachments[0]['original_name'], 'notes.txt')
        self.assertEqual(attachments[0]['size'], 5)
        self.assertTrue(attachments[0]['path'].startswith('uploads/'))

    def test_multipart_update_appends_files(self):
        task = self.create_task()
        upload = SimpleUploadedFile('brief.pdf', b'%PDF-1.4', content_type='application/pdf')

        response = self.client.put(
            f"/api/tasks/{task['id']}/",
            data=encode_multipart(BOUNDARY, {'notes': 'see attached', 'files': upload}),
            content_type=MULTIPART_CONTENT
        )

        self.assertEqual(response.status_code, 200, response.content)
        self.assertEqual(response.json()['notes'], 'see attached')
        self.assertEqual(len(response.json()['file_attachments']), 1)

    def test_disallowed_file_type_is_400(self):
        upload = SimpleUploadedFile('run.exe', b'MZ', content_type='application/x-msdownload')

        response = self.client.post('/api/tasks/', {'title': 'Bad file', 'files': [upload]})

        self.assertEqual(response.status_code, 400)
        self.assertFalse(Task.objects.exists())

    def test_delete_attachment(self):
        upload = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
        task = self.client.post('/api/tasks/', {'title': 'With file', 'files': [upload]}).json()
        filename = task['file_attachments'][0]['filename']

        response = self.client.delete(f"/api/tasks/{task['id']}/files/{filename}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['file_attachments'], [])

        missing = self.client.delete(f"/api/tasks/{task['id']}/files/{filename}/")
        self.assertEqual(missing.status_code, 404)


class HeuristicSuggestionViewTests(TaskApiTestCase):
    def test_keyword_suggestions(self):
        task = self.create_task(title='Urgent: fix the failing test')

        data = self.client.get(f"/api/tasks/{task['id']}/ai-suggestions/").json()

        self.assertEqual(data['priority'], 'high')
        self.assertEqual(data['category'], 'Testing')
        self.assertEqual(data['confidence'], 0.85)

    def test_custom_query_uses_board_context(self):
        task = self.create_task(title='Implement the code for login')

        data = self.client.get(
            f"/api/tasks/{task['id']}/ai-suggestions/",
            {'requestType': 'custom_query', 'query': 'Who should take this?'}
        ).json()

        self.assertEqual(data['assignee_id'], str(self.alice.id))
        self.assertIn('Alice', data['response'])

    def test_custom_query_requires_query(self):
        task = self.create_task()

        response = self.client.get(f"/api/tasks/{task['id']}/ai-suggestions/", {'requestType': 'custom_query'})

        self.assertEqual(response.status_code, 400)


class AuthenticatedChangeTests(TaskApiTestCase):
    def setUp(self):
        super().setUp()
        login = self.post_json('/api/auth/login/', {'username': 'alice', 'password': 'pw'})
        self.assertEqual(login.status_code, 200)

    def test_create_records_creator_and_author(self):
        task = self.create_task()

        self.assertEqual(task['created_by'], self.alice.id)
        self.assertEqual(task['creator']['name'], 'Alice')
        entry = TaskHistory.objects.get(task_identifier=task['id'])
        self.assertEqual(entry.changed_by, self.alice)

    def test_history_names_who_changed_the_status(self):
        task = self.create_task()

        self.client.patch(
            f"/api/tasks/{task['id']}/status/",
            data=json.dumps({'status': 'done'}),
            content_type='application/json'
        )

        latest = self.client.get(f"/api/tasks/{task['id']}/history/").json()[0]
        self.assertEqual(latest['changed_by'], {'id': self.alice.id, 'name': 'Alice'})
