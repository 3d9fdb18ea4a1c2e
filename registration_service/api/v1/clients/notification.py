from typing import Optional, Protocol

from aiokafka import AIOKafkaProducer
from aiokafka.errors import KafkaError
from loguru import logger

from registration_service.api.v1.schemas.registration import RegistrationNotification


class NotificationDispatcher(Protocol):
    async def send(self, notification: RegistrationNotification) -> None: ...


class KafkaNotificationDispatcher:
    """
    Publishes registration notifications to a Kafka topic.

    Fire-and-forget: `send` never raises. Delivery is not awaited, failures
    are logged and dropped.
    """

    def __init__(self, bootstrap_servers: str, topic: str):
        self.bootstrap_servers = bootstrap_servers
        self.topic = topic
        self.producer: Optional[AIOKafkaProducer] = None

    def create_producer(self) -> AIOKafkaProducer:
        return AIOKafkaProducer(bootstrap_servers=self.bootstrap_servers)

    async def start(self) -> None:
        producer = self.create_producer()
        try:
            await producer.start()
        except KafkaError as e:
            logger.error(f"Could not connect to Kafka at {self.bootstrap_servers}: {e!r}; notifications will be dropped")
            return
        self.producer = producer
        logger.info(f"Kafka producer started, topic '{self.topic}'")

    async def stop(self) -> None:
        if self.producer is not None:
            await self.producer.stop()
            self.producer = None

    async def send(self, notification: RegistrationNotification) -> None:
        if self.producer is None:
            logger.warning(f"Kafka producer is not running, dropping notification {notification}")
            return
        logger.info(f"Sending notification: '{notification}'")
        try:
            await self.producer.send(self.topic, notification.model_dump_json(by_alias=True).encode())
        except Exception as e:
            logger.error(f"Failed to publish notification {notification} to '{self.topic}': {e!r}")


class LoggingNotificationDispatcher:
    """Used when Kafka is disabled: notifications only end up in the log."""

    async def send(self, notification: RegistrationNotification) -> None:
        logger.info(f"Kafka disabled, notification not published: '{notification}'")
