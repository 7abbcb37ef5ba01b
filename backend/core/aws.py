"""Factories for the boto3 clients shared by the services."""

from __future__ import annotations

from typing import Any, Dict

import boto3
from botocore.config import Config

from .config import Settings


_CLIENT_CONFIGS: Dict[str, Config] = {
    "cognito-idp": Config(retries={"max_attempts": 3, "mode": "standard"}, connect_timeout=5, read_timeout=10),
    "dynamodb": Config(retries={"max_attempts": 10, "mode": "adaptive"}, connect_timeout=5, read_timeout=10),
    "s3": Config(
        retries={"max_attempts": 10, "mode": "adaptive"},
        connect_timeout=5,
        read_timeout=60,
        signature_version="s3v4",
    ),
    "sqs": Config(retries={"max_attempts": 5, "mode": "standard"}, connect_timeout=5, read_timeout=10),
}


def aws_client(service: str, settings: Settings) -> Any:
    """Create a low-level client for ``service`` in the configured region."""

    return boto3.client(service, region_name=settings.AWS_REGION, config=_CLIENT_CONFIGS.get(service))


def dynamodb_resource(settings: Settings) -> Any:
    return boto3.resource("dynamodb", region_name=settings.AWS_REGION, config=_CLIENT_CONFIGS["dynamodb"])


__all__ = ["aws_client", "dynamodb_resource"]
