"""Publishing and subscribing to game messages over AMQP."""

import json
import logging
from enum import IntEnum

import pika
from pika.exceptions import AMQPError

from peril.gob import decode_game_log, encode_game_log

DEAD_LETTER_EXCHANGE = "peril_dlx"
PREFETCH_COUNT = 10

_log = logging.getLogger(__name__)


class QueueType(IntEnum):
    DURABLE = 0
    TRANSIENT = 1


class AckType(IntEnum):
    ACK = 0
    NACK_REQUEUE = 1
    NACK_DISCARD = 2


def _publish(channel, exchange, key, body, content_type):
    channel.basic_publish(
        exchange=exchange,
        routing_key=key,
        body=body,
        properties=pika.BasicProperties(content_type=content_type),
    )


def publish_json(channel, exchange, key, value):
    """Publish a value, or anything with to_dict, as JSON."""
    if callable(getattr(value, "to_dict", None)):
        value = value.to_dict()
    body = json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    _publish(channel, exchange, key, body, "application/json")


def publish_gob(channel, exchange, key, gamelog):
    _publish(channel, exchange, key, encode_game_log(gamelog), "application/gob")


def declare_and_bind(connection, exchange, queue_name, key, queue_type):
    """Open a channel, declare a queue and bind it; return the channel and queue name."""
    channel = connection.channel()
    transient = queue_type == QueueType.TRANSIENT
    result = channel.queue_declare(
        queue=queue_name,
        durable=not transient,
        exclusive=transient,
        auto_delete=transient,
        arguments={"x-dead-letter-exchange": DEAD_LETTER_EXCHANGE},
    )
    channel.queue_bind(queue=queue_name, exchange=exchange, routing_key=key)
    return channel, result.method.queue


def _subscribe(connection, exchange, queue_name, key, queue_type, handler, decode):
    channel, queue = declare_and_bind(connection, exchange, queue_name, key, queue_type)
    try:
        channel.basic_qos(prefetch_count=PREFETCH_COUNT)
    except AMQPError as exc:
        _log.warning("failed to set qos: %s", exc)

    def on_message(ch, method, properties, body):
        try:
            message = decode(body)
        except (ValueError, TypeError, KeyError) as exc:
            _log.warning("could not decode message: %s", exc)
            return
        ack = handler(message)
        if ack == AckType.ACK:
            ch.basic_ack(delivery_tag=method.delivery_tag)
        elif ack in (AckType.NACK_REQUEUE, AckType.NACK_DISCARD):
            ch.basic_nack(delivery_tag=method.delivery_tag, requeue=ack == AckType.NACK_REQUEUE)
        _log.info("%s occurred", getattr(ack, "name", ack))

    channel.basic_consume(queue=queue_name, on_message_callback=on_message, auto_ack=False)
    return channel, queue


def subscribe_json(connection, exchange, queue_name, key, queue_type, handler, decoder=None):
    """Consume JSON messages, passing each decoded value to the handler."""
    convert = decoder or (lambda value: value)
    return _subscribe(connection, exchange, queue_name, key, queue_type, handler,
                      lambda body: convert(json.loads(body)))


def subscribe_gob(connection, exchange, queue_name, key, queue_type, handler,
                  unmarshaller=decode_game_log):
    """Consume gob messages, passing each decoded value to the handler."""
    return _subscribe(connection, exchange, queue_name, key, queue_type, handler, unmarshaller)