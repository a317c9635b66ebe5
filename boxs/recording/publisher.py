"""Recording lifecycle publisher for pub/sub notifications."""

import logging
from pubsub import pub
from ..models.events import RecordingEvent

logger = logging.getLogger(__name__)


class RecordingEventPublisher:
    """Publishes recording lifecycle events using pubsub.pub."""

    def __init__(self, topic_prefix: str = "recording"):
        """Initialize recording event publisher.

        Args:
            topic_prefix: Parent topic; events go to ``<prefix>.<event_type>``
        """
        self.topic_prefix = topic_prefix
        logger.debug(f"RecordingEventPublisher initialized with topic prefix: {topic_prefix}")

    def topic_for(self, event_type: str) -> str:
        return f"{self.topic_prefix}.{event_type}"

    def publish(self, event: RecordingEvent) -> None:
        """Publish a recording event to its topic.

        Args:
            event: RecordingEvent to publish
        """
        pub.sendMessage(self.topic_for(event.event_type), event=event)
        logger.debug(f"Published recording event: {event.event_type} ({event.file_path})")
