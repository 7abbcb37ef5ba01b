"""SQS publisher handing uploads to the processing worker."""

from __future__ import annotations

import json
from typing import Any, Dict


class ProcessingQueue:
    def __init__(self, client, queue_url: str) -> None:
        self.client = client
        self.queue_url = queue_url

    def publish(self, message: Dict[str, Any]) -> str:
        if not self.queue_url:
            raise RuntimeError("PROCESSING_QUEUE_URL environment variable not configured")
        response = self.client.send_message(QueueUrl=self.queue_url, MessageBody=json.dumps(message))
        return response.get("MessageId", "")


__all__ = ["ProcessingQueue"]
