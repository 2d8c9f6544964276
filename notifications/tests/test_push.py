from unittest import mock

import requests
from django.test import SimpleTestCase, override_settings
from google.auth.exceptions import RefreshError

from core.exceptions import IntegrationError
from notifications.push import FCMPushSender, send_topic_push
from notifications.tests.fakes import RecordingPushSender


@override_settings(FCM_PROJECT_ID="devfest-test", FCM_CREDENTIALS_FILE="/tmp/creds.json")
class FCMPushSenderTestCase(SimpleTestCase):
    def setUp(self):
        self.sender = FCMPushSender()
        self.session = mock.Mock()
        self.sender._session = self.session

    def test_posts_topic_message(self):
        self.session.post.return_value = mock.Mock(status_code=200, json=lambda: {"name": "msg/1"})

        self.sender.send_to_topic("announcements", {"title": "Hi", "body": "Doors open", "link": "/agenda"})

        url = self.session.post.call_args.args[0]
        body = self.session.post.call_args.kwargs["json"]["message"]
        self.assertEqual(url, "https://fcm.googleapis.com/v1/projects/devfest-test/messages:send")
        self.assertEqual(body["topic"], "announcements")
        self.assertEqual(body["notification"], {"title": "Hi", "body": "Doors open"})
        self.assertEqual(body["webpush"]["fcm_options"]["link"], "/agenda")

    def test_error_status_raises_integration_error(self):
        self.session.post.return_value = mock.Mock(status_code=403, text="forbidden")

        with self.assertRaises(IntegrationError):
            self.sender.send_to_topic("announcements", {"title": "Hi", "body": "x"})

    def test_network_error_raises_integration_error(self):
        self.session.post.side_effect = requests.ConnectionError("down")

        with self.assertRaises(IntegrationError):
            self.sender.send_to_topic("announcements", {"title": "Hi", "body": "x"})

    @override_settings(FCM_PROJECT_ID=None)
    def test_unconfigured_sender_raises(self):
        with self.assertRaises(IntegrationError):
            FCMPushSender().send_to_topic("announcements", {"title": "Hi", "body": "x"})


class SendTopicPushTestCase(SimpleTestCase):
    def setUp(self):
        RecordingPushSender.reset()

    def test_failure_is_reported_not_raised(self):
        RecordingPushSender.fail = True
        self.assertFalse(send_topic_push("announcements", {"title": "Hi", "body": "x"}))

    def test_success(self):
        self.assertTrue(send_topic_push("announcements", {"title": "Hi", "body": "x"}))
        self.assertEqual(RecordingPushSender.sent[0][0], "announcements")


@override_settings(FCM_PROJECT_ID="devfest-test", FCM_CREDENTIALS_FILE="/tmp/creds.json")
class FCMPushSenderFailureTestCase(SimpleTestCase):
    def setUp(self):
        self.sender = FCMPushSender()
        self.session = mock.Mock()
        self.sender._session = self.session

    def test_token_refresh_failure_raises_integration_error(self):
        self.session.post.side_effect = RefreshError("invalid_grant")

        with self.assertRaises(IntegrationError):
            self.sender.send_to_topic("announcements", {"title": "Hi", "body": "x"})

    def test_unreadable_success_body_raises_integration_error(self):
        response = mock.Mock(status_code=200)
        response.json.side_effect = ValueError("not json")
        self.session.post.return_value = response

        with self.assertRaises(IntegrationError):
            self.sender.send_to_topic("announcements", {"title": "Hi", "body": "x"})

    def test_unexpected_sender_error_is_logged_not_raised(self):
        sender = mock.Mock()
        sender.send_to_topic.side_effect = RuntimeError("boom")

        with mock.patch("notifications.push.get_push_sender", return_value=sender):
            with self.assertLogs("devfest.notifications", level="ERROR"):
                self.assertFalse(send_topic_push("announcements", {"title": "Hi", "body": "x"}))
