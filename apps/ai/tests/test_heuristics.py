from datetime import date

from django.test import SimpleTestCase

from apps.ai.heuristics import answer_query, guess_category, guess_priority, suggest_task_fields

TODAY = date(2024, 3, 1)


class SuggestTaskFieldsTests(SimpleTestCase):
    def test_urgent_tasks_get_three_days(self):
        result = suggest_task_fields('URGENT: database migration', today=TODAY)

        self.assertEqual(result['priority'], 'high')
        self.assertEqual(result['deadline'], '2024-03-04')
        self.assertEqual(result['confidence'], 0.85)

    def test_low_priority_wording(self):
        result = suggest_task_fields('Clean old branches', 'do it when possible', today=TODAY)

        self.assertEqual(result['priority'], 'low')
        self.assertEqual(result['deadline'], '2024-03-15')
        self.assertIsNone(result['category'])

    def test_category_in_recommendation(self):
        result = suggest_task_fields('Write docs for the API', today=TODAY)

        self.assertEqual(result['category'], 'Documentation')
        self.assertIn('in the Documentation category', result['recommendation'])
        self.assertIn('approximately 7 days', result['recommendation'])

    def test_first_matching_category_wins(self):
        self.assertEqual(guess_category('design review'), 'Design')
        self.assertEqual(guess_category('review the legal terms'), 'Review')
        self.assertEqual(guess_priority('nothing special'), 'medium')


class AnswerQueryTests(SimpleTestCase):
    def setUp(self):
        self.context = {
            'totalTasks': 10,
            'statusCounts': {'todo': 6, 'in_progress': 4},
            'priorityCounts': {'high': 1},
            'userWorkloads': [
                {'id': 1, 'name': 'Ana', 'role': 'Designer', 'activeTasks': 3},
                {'id': 2, 'name': 'Bruno', 'role': 'Backend Engineer', 'activeTasks': 1},
                {'id': 3, 'name': 'Carla', 'role': 'Software Developer', 'activeTasks': 0},
            ],
            'categories': ['Operations'],
        }

    def test_deadline_scales_with_active_work(self):
        result = answer_query('When should this be due?', {'title': 'x'}, self.context, today=TODAY)

        # 10 tarefas ativas -> 3 + 0.5 * 11 = 8 dias
        self.assertEqual(result['deadline'], '2024-03-09')
        self.assertIn('3/9/2024', result['response'])

    def test_assignee_prefers_matching_role_with_least_work(self):
        result = answer_query('Who should I assign?', {'title': 'Implement code for sync'}, self.context)

        self.assertEqual(result['assignee_id'], '3')
        self.assertIn('Carla', result['response'])

    def test_assignee_falls_back_to_whole_team(self):
        result = answer_query('Who?', {'title': 'Plan the offsite'}, self.context)

        self.assertEqual(result['assignee_id'], '3')

    def test_assignee_without_workloads(self):
        result = answer_query('Who?', {'title': 'x'}, {})

        self.assertIsNone(result['assignee_id'])
        self.assertIn('No user workload data', result['response'])

    def test_priority_avoids_inflation(self):
        context = dict(self.context, priorityCounts={'high': 5})

        result = answer_query('What priority?', {'title': 'Fix bug in export'}, context)

        self.assertEqual(result['priority'], 'medium')
        self.assertIn('50% of all tasks', result['response'])

    def test_priority_for_bug_fix(self):
        result = answer_query('What priority?', {'title': 'Fix bug in export'}, self.context)

        self.assertEqual(result['priority'], 'high')

    def test_category_falls_back_to_existing(self):
        result = answer_query('What category fits?', {'title': 'Plan the offsite'}, self.context)

        self.assertEqual(result['category'], 'Operations')

    def test_general_advice(self):
        result = answer_query('Any thoughts?', {'title': 'x', 'priority': 'low'}, self.context)

        self.assertIn('low priority item', result['response'])
        self.assertIn('6 items in the backlog', result['response'])
        self.assertIsNone(result['priority'])
