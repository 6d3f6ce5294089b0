import asyncio

from fastapi import WebSocketDisconnect

from app.sslg.model.enums import ChangeEventEnum
from app.sslg.realtime import ChangeBroker, stream_changes


def test_filtered_subscription_only_gets_matching_rows():
    async def scenario():
        broker = ChangeBroker()
        section_1 = broker.subscribe("students", section_id=1)
        section_2 = broker.subscribe("students", section_id=2)

        await broker.publish("students", ChangeEventEnum.insert, {"section_id": 1})

        assert section_1.queue.qsize() == 1
        assert section_2.queue.qsize() == 0
        assert await section_1.get() == {"table": "students", "event": "INSERT"}

    asyncio.run(scenario())


def test_other_tables_are_ignored():
    async def scenario():
        broker = ChangeBroker()
        votes = broker.subscribe("votes")

        await broker.publish("students", ChangeEventEnum.update, {"section_id": 1})
        await broker.publish("votes", ChangeEventEnum.insert, {"section_id": 3})

        assert votes.queue.qsize() == 1

    asyncio.run(scenario())


def test_bulk_change_reaches_every_subscription_of_the_table():
    async def scenario():
        broker = ChangeBroker()
        section_1 = broker.subscribe("votes", section_id=1)
        everything = broker.subscribe("votes")

        await broker.publish("votes", ChangeEventEnum.delete)

        assert section_1.queue.qsize() == 1
        assert everything.queue.qsize() == 1

    asyncio.run(scenario())


def test_closed_subscription_is_released():
    async def scenario():
        broker = ChangeBroker()
        subscription = broker.subscribe("votes")
        subscription.close()

        await broker.publish("votes", ChangeEventEnum.insert, {"section_id": 1})

        assert broker.subscriptions == []
        assert subscription.queue.qsize() == 0

    asyncio.run(scenario())


class ClosingWebSocket(object):
    """
    Websocket whose client leaves as soon as a notification is sent.
    """

    def __init__(self, fail_on_send=False):
        self.fail_on_send = fail_on_send
        self.sent = []
        self.left = asyncio.Event()

    async def send_json(self, data):
        self.left.set()
        if self.fail_on_send:
            raise RuntimeError("websocket is closed")
        self.sent.append(data)

    async def receive_text(self):
        await self.left.wait()
        raise WebSocketDisconnect()


def test_stream_forwards_until_the_client_leaves():
    async def scenario():
        broker = ChangeBroker()
        subscription = broker.subscribe("votes")
        websocket = ClosingWebSocket()

        await broker.publish("votes", ChangeEventEnum.insert, {"section_id": 1})
        await stream_changes(websocket, subscription)

        assert websocket.sent == [{"table": "votes", "event": "INSERT"}]
        assert broker.subscriptions == []

    asyncio.run(scenario())


def test_stream_releases_the_subscription_when_sending_fails():
    async def scenario():
        broker = ChangeBroker()
        subscription = broker.subscribe("students", section_id=1)
        websocket = ClosingWebSocket(fail_on_send=True)

        await broker.publish("students", ChangeEventEnum.update, {"section_id": 1})
        await stream_changes(websocket, subscription)

        assert broker.subscriptions == []

    asyncio.run(scenario())
