# notifications/tasks.py

from celery import shared_task
from kombu.exceptions import OperationalError

from .push import send_topic_push


@shared_task
def send_topic_push_task(topic: str, message: dict):
    """
    Async wrapper for a topic broadcast. Failures are logged, never retried.
    """
    return send_topic_push(topic, message)


def dispatch_topic_push(topic: str, message: dict) -> None:
    """
    Queue the broadcast; send it inline when the broker is unreachable.
    """
    try:
        send_topic_push_task.delay(topic, message)
    except OperationalError:
        send_topic_push(topic, message)
