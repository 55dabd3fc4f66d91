"""Tests for the websocket consumer."""

import pytest
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser

from apps.board.broadcast import BoardBroadcaster
from apps.board.consumers import BoardConsumer

pytestmark = pytest.mark.django_db(transaction=True)


async def connect(user, broadcaster):
    communicator = WebsocketCommunicator(BoardConsumer.as_asgi(broadcaster=broadcaster), '/ws/')
    communicator.scope['user'] = user
    connected, _ = await communicator.connect()
    return communicator, connected


async def test_anonymous_socket_is_closed():
    broadcaster = BoardBroadcaster()
    communicator, connected = await connect(AnonymousUser(), broadcaster)

    assert not connected
    assert broadcaster.stats()['connections'] == 0


async def test_ping_pong(user):
    communicator, connected = await connect(user, BoardBroadcaster())
    assert connected

    await communicator.send_json_to({'type': 'ping'})
    assert await communicator.receive_json_from() == {'type': 'pong'}

    await communicator.disconnect()


async def test_malformed_frames_are_ignored(user):
    communicator, _ = await connect(user, BoardBroadcaster())

    await communicator.send_to(text_data='not json')
    await communicator.send_to(text_data='[1, 2]')
    await communicator.send_json_to({'type': 'dance'})
    await communicator.send_json_to({'type': 'subscribe', 'boardId': 'abc'})
    await communicator.send_json_to({'type': 'subscribe', 'boardId': 2 ** 70})
    await communicator.send_json_to({'type': 'subscribe', 'boardId': '-4'})
    assert await communicator.receive_nothing()

    await communicator.send_json_to({'type': 'ping'})
    assert await communicator.receive_json_from() == {'type': 'pong'}

    await communicator.disconnect()


async def test_subscribe_receives_board_events(user, board):
    broadcaster = BoardBroadcaster()
    communicator, _ = await connect(user, broadcaster)

    await communicator.send_json_to({'type': 'subscribe', 'boardId': board['id']})
    assert await communicator.receive_json_from() == {'type': 'subscribed', 'boardId': board['id']}

    message = {'type': 'card:deleted', 'boardId': board['id'], 'payload': {'cardId': 9}}
    assert await broadcaster.broadcast(board['id'], message) == 1
    assert await communicator.receive_json_from() == message

    await communicator.send_json_to({'type': 'unsubscribe'})
    assert await communicator.receive_json_from() == {'type': 'unsubscribed', 'boardId': board['id']}
    assert broadcaster.stats()['boards'] == {}

    await communicator.disconnect()


async def test_non_member_subscription_is_refused(other_user, board):
    broadcaster = BoardBroadcaster()
    communicator, _ = await connect(other_user, broadcaster)

    await communicator.send_json_to({'type': 'subscribe', 'boardId': board['id']})
    response = await communicator.receive_json_from()

    assert response['type'] == 'error'
    assert broadcaster.stats()['boards'] == {}

    await communicator.disconnect()


async def test_disconnect_cleans_up(user, board):
    broadcaster = BoardBroadcaster()
    communicator, _ = await connect(user, broadcaster)
    await communicator.send_json_to({'type': 'subscribe', 'boardId': board['id']})
    await communicator.receive_json_from()

    await communicator.disconnect()

    assert broadcaster.stats() == {'connections': 0, 'boards': {}}
