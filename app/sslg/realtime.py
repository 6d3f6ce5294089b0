"""
Change notifications for SSLG.

Listeners subscribe to a table, optionally narrowed by an equality filter
on one column (e.g. students of one section). A notification only says
that something changed; listeners refetch what they show.

18-10-2026
"""

import asyncio

from fastapi import WebSocket, WebSocketDisconnect

from app.logger import logger
from app.sslg.model.enums import ChangeEventEnum


class Subscription(object):
    def __init__(self, broker, table: str, filters: dict | None = None) -> None:
        self.broker = broker
        self.table = table
        self.filters = filters or {}
        self.queue: asyncio.Queue = asyncio.Queue()

    def matches(self, table: str, row: dict) -> bool:
        if table != self.table:
            return False
        return all(row.get(column) == value for column, value in self.filters.items())

    async def get(self) -> dict:
        return await self.queue.get()

    def close(self):
        self.broker.unsubscribe(self)


class ChangeBroker(object):
    """
    In-process publish/subscribe hub used as a refetch trigger.
    """

    def __init__(self) -> None:
        self.subscriptions: list[Subscription] = []

    def subscribe(self, table: str, **filters) -> Subscription:
        subscription = Subscription(self, table, filters)
        self.subscriptions.append(subscription)
        logger.debug("Realtime subscription on %s %s" % (table, filters))
        return subscription

    def unsubscribe(self, subscription: Subscription):
        if subscription in self.subscriptions:
            self.subscriptions.remove(subscription)

    async def publish(self, table: str, event: ChangeEventEnum, row: dict | None = None):
        """
        Notify every subscription whose table and filter match the changed row.

        A row of None (bulk changes) reaches every subscription of the table.
        """
        notification = {"table": table, "event": event.value}
        for subscription in list(self.subscriptions):
            if row is None and subscription.table == table:
                subscription.queue.put_nowait(notification)
            elif row is not None and subscription.matches(table, row):
                subscription.queue.put_nowait(notification)


broker = ChangeBroker()


async def stream_changes(websocket: WebSocket, subscription: Subscription):
    """
    Forward notifications to an accepted websocket until the client leaves,
    then release the subscription.
    """

    async def forward():
        while True:
            notification = await subscription.get()
            await websocket.send_json(notification)

    task = asyncio.create_task(forward())
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Realtime listener left %s" % subscription.table)
    finally:
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.warning("Realtime notification to %s listener failed: %s" % (subscription.table, e))
        subscription.close()
