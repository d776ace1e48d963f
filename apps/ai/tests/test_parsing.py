from django.test import SimpleTestCase

from apps.ai.parsing import parse_json_reply, strip_markup


class StripMarkupTests(SimpleTestCase):
    def test_removes_think_blocks(self):
        text = '<think>The user wants JSON.\nLet me think.</think>\n{"response": "ok"}'

        self.assertEqual(strip_markup(text), '{"response": "ok"}')

    def test_removes_dangling_closing_tag(self):
        text = 'reasoning without an opening tag</think>{"a": 1}'

        self.assertEqual(strip_markup(text), '{"a": 1}')

    def test_removes_code_fences(self):
        self.assertEqual(strip_markup('```json\n{"a": 1}\n```'), '{"a": 1}')
        self.assertEqual(strip_markup('```\n[1, 2]\n```'), '[1, 2]')


class ParseJsonReplyTests(SimpleTestCase):
    def test_plain_json(self):
        self.assertEqual(parse_json_reply('{"priority": "high"}'), {'priority': 'high'})

    def test_object_embedded_in_prose(self):
        reply = 'Sure! Here is my suggestion:\n{"priority": "low", "reasoning": "no rush"}\nHope it helps.'

        self.assertEqual(parse_json_reply(reply, expect=dict), {'priority': 'low', 'reasoning': 'no rush'})

    def test_nested_objects_survive_extraction(self):
        reply = 'Result: {"alerts": [{"title": "x"}], "on_schedule": true} done'

        self.assertEqual(parse_json_reply(reply, expect=dict), {'alerts': [{'title': 'x'}], 'on_schedule': True})

    def test_array_after_thinking(self):
        reply = '<think>four ideas</think>Here you go: [{"title": "WIP limits"}, {"title": "Daily sync"}]'

        self.assertEqual(parse_json_reply(reply, expect=list), [{'title': 'WIP limits'}, {'title': 'Daily sync'}])

    def test_unexpected_type_is_rejected(self):
        self.assertIsNone(parse_json_reply('[1, 2, 3]', expect=dict))

    def test_garbage_returns_none(self):
        self.assertIsNone(parse_json_reply('I cannot help with that.'))
        self.assertIsNone(parse_json_reply(''))
        self.assertIsNone(parse_json_reply(None))
