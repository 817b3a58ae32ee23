import json
import logging

import pika
from pika.exceptions import AMQPError

from app import models

logger = logging.getLogger(__name__)

EXCHANGE = "ums_events"
ROUTING_KEY = "registration.events"


def publish_event(rabbitmq_url: str, routing_key: str, event: dict):
    params = pika.URLParameters(rabbitmq_url)
    connection = pika.BlockingConnection(params)
    try:
        channel = connection.channel()
        channel.exchange_declare(exchange=EXCHANGE, exchange_type="topic", durable=True)
        body = json.dumps(event, default=str)
        channel.basic_publish(exchange=EXCHANGE, routing_key=routing_key, body=body)
    finally:
        connection.close()


def registration_event(etype: str, registration: models.Registration) -> dict:
    return {
        "type": etype,
        "payload": {
            "registration_id": registration.id,
            "student_id": registration.student_id,
            "course_id": registration.course_id,
            "course_code": registration.course_code,
            "status": registration.status,
        },
    }


def publish_registration_event(rabbitmq_url: str, event: dict):
    """Background-task entry point; a broker outage never fails the request."""
    if not rabbitmq_url:
        return
    try:
        publish_event(rabbitmq_url, ROUTING_KEY, event)
    except AMQPError:
        logger.exception("Failed to publish %s", event.get("type"))
