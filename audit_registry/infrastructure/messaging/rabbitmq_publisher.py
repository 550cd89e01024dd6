# audit_registry/infrastructure/messaging/rabbitmq_publisher.py

import json
from typing import Any, Dict

import aio_pika

EXCHANGE_AUDIT_EVENTS = "audit_events"


class RabbitMQPublisher:
    """Publishes committed registry changes to a durable topic exchange. Implements AuditEventPublisher."""

    def __init__(self, rabbitmq_url: str, exchange_name: str = EXCHANGE_AUDIT_EVENTS):
        self._url = rabbitmq_url
        self._exchange_name = exchange_name
        self._connection = None
        self._channel = None

    async def connect(self):
        self._connection = await aio_pika.connect_robust(self._url)
        self._channel = await self._connection.channel()
        await self._channel.set_qos(prefetch_count=10)

    async def publish_audit_event(self, routing_key: str, payload: Dict[str, Any]) -> None:

        if not self._channel:
            await self.connect()

        exchange = await self._channel.declare_exchange(
            self._exchange_name,
            aio_pika.ExchangeType.TOPIC,
            durable=True,
        )

        msg = aio_pika.Message(
            body=json.dumps(payload).encode(),
            content_type="application/json",
            delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
            headers={
                "audit_id": payload.get("audit_id"),
                "logical_time": payload.get("timestamp"),
            },
        )

        await exchange.publish(msg, routing_key=routing_key)

    async def close(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            self._channel = None
