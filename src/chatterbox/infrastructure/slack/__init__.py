"""Slack integration."""

from chatterbox.infrastructure.slack.client import SlackAppRunner, create_slack_app
from chatterbox.infrastructure.slack.event_adapter import SlackEventAdapter
from chatterbox.infrastructure.slack.messaging import SlackMessagingService

__all__ = [
    "SlackAppRunner",
    "SlackEventAdapter",
    "SlackMessagingService",
    "create_slack_app",
]
