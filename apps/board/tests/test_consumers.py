from asgiref.sync import sync_to_async
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.test import SimpleTestCase

from apps.board.broadcast import TASK_DELETED, BoardBroadcaster
from apps.board.routing import websocket_urlpatterns


class BoardConsumerTests(SimpleTestCase):
    # o dispatch do consumer fecha conexões antigas do banco
    databases = '__all__'

    async def connect(self):
        communicator = WebsocketCommunicator(URLRouter(websocket_urlpatterns), '/ws/board/')
        connected, _ = await communicator.connect()
        self.assertTrue(connected)
        return communicator

    async def test_published_events_reach_every_client(self):
        first = await self.connect()
        second = await self.connect()

        broadcaster = BoardBroadcaster(get_channel_layer(), 'board')
        await sync_to_async(broadcaster.publish)(TASK_DELETED, {'id': 7})

        for communicator in (first, second):
            message = await communicator.receive_json_from()
            self.assertEqual(message, {'event': 'task:deleted', 'payload': {'id': 7}})
            await communicator.disconnect()

    async def test_ping_pong(self):
        communicator = await self.connect()

        await communicator.send_json_to({'type': 'ping'})
        message = await communicator.receive_json_from()

        self.assertEqual(message['type'], 'pong')
        await communicator.disconnect()

    async def test_join_and_leave_task_room(self):
        communicator = await self.connect()

        await communicator.send_json_to({'type': 'join:task', 'taskId': 3})
        self.assertEqual(await communicator.receive_json_from(), {'event': 'task:joined', 'payload': {'id': 3}})

        await get_channel_layer().group_send('task_3', {
            'type': 'task.event',
            'event': 'task:updated',
            'payload': {'id': 3},
        })
        self.assertEqual(await communicator.receive_json_from(), {'event': 'task:updated', 'payload': {'id': 3}})

        await communicator.send_json_to({'type': 'leave:task', 'taskId': 3})
        self.assertEqual(await communicator.receive_json_from(), {'event': 'task:left', 'payload': {'id': 3}})
        await communicator.disconnect()

    async def test_malformed_messages_are_ignored(self):
        communicator = await self.connect()

        await communicator.send_to(text_data='not json')
        await communicator.send_json_to({'type': 'join:task', 'taskId': 'abc'})

        self.assertTrue(await communicator.receive_nothing())
        await communicator.disconnect()


class FailingLayer:
    async def group_send(self, group, message):
        raise ConnectionError('redis is down')


class RecordingLayer:
    def __init__(self):
        self.sent = []

    async def group_send(self, group, message):
        self.sent.append((group, message))


class BoardBroadcasterTests(SimpleTestCase):
    def test_publish_wraps_event_for_the_group(self):
        layer = RecordingLayer()

        BoardBroadcaster(layer, 'board').publish('task:created', {'id': 1})

        self.assertEqual(layer.sent, [
            ('board', {'type': 'task.event', 'event': 'task:created', 'payload': {'id': 1}}),
        ])

    def test_delivery_failures_are_not_raised(self):
        BoardBroadcaster(FailingLayer()).publish('task:created', {'id': 1})
        BoardBroadcaster(None).publish('task:created', {'id': 1})
