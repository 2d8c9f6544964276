# notifications/push.py
"""
Topic push notifications over the Firebase Cloud Messaging HTTP v1 API.

The sender is chosen by ``settings.HUB_PUSH_SENDER``. Every failure is
raised as IntegrationError; callers decide whether to swallow it.
"""
import logging

import requests
from django.conf import settings
from django.utils.module_loading import import_string
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from core.exceptions import IntegrationError

logger = logging.getLogger("devfest.notifications")

FCM_SCOPES = ["https://www.googleapis.com/auth/firebase.messaging"]
FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"


class PushSender:
    def send_to_topic(self, topic: str, message: dict) -> None:
        """``message`` carries ``title``, ``body`` and an optional ``link``."""
        raise NotImplementedError


class FCMPushSender(PushSender):

    def __init__(self):
        self.project_id = settings.FCM_PROJECT_ID
        self.credentials_file = settings.FCM_CREDENTIALS_FILE
        self.timeout = settings.FCM_TIMEOUT_SECONDS
        self._session = None

    def _get_session(self) -> AuthorizedSession:
        if self._session is None:
            if not self.project_id or not self.credentials_file:
                raise IntegrationError("FCM is not configured (FCM_PROJECT_ID / FCM_CREDENTIALS_FILE).")
            try:
                credentials = service_account.Credentials.from_service_account_file(
                    self.credentials_file, scopes=FCM_SCOPES
                )
            except (OSError, ValueError) as exc:
                raise IntegrationError(f"Could not load FCM credentials: {exc}") from exc
            self._session = AuthorizedSession(credentials)
        return self._session

    @staticmethod
    def build_message(topic: str, message: dict) -> dict:
        link = message.get("link") or "/"
        return {
            "message": {
                "topic": topic,
                "notification": {
                    "title": message.get("title", ""),
                    "body": message.get("body", ""),
                },
                "data": {"link": link},
                "webpush": {"fcm_options": {"link": link}},
            }
        }

    def send_to_topic(self, topic, message):
        session = self._get_session()
        url = FCM_SEND_URL.format(project_id=self.project_id)

        try:
            response = session.post(url, json=self.build_message(topic, message), timeout=self.timeout)
        except (requests.RequestException, GoogleAuthError) as exc:
            raise IntegrationError(f"FCM request failed: {exc}") from exc

        if response.status_code >= 400:
            raise IntegrationError(f"FCM returned {response.status_code}: {response.text[:200]}")

        try:
            name = response.json().get("name")
        except ValueError as exc:
            raise IntegrationError(f"FCM returned an unreadable response: {exc}") from exc

        logger.info(f"Push sent: topic={topic}, name={name}")


def get_push_sender() -> PushSender:
    return import_string(settings.HUB_PUSH_SENDER)()


def send_topic_push(topic: str, message: dict) -> bool:
    """
    Best-effort send. Returns False (and logs) instead of raising when the
    integration fails.
    """
    try:
        get_push_sender().send_to_topic(topic, message)
    except IntegrationError as exc:
        logger.warning(f"Push to topic '{topic}' failed: {exc}")
        return False
    except Exception:
        logger.exception(f"Unexpected error pushing to topic '{topic}'")
        return False
    return True
