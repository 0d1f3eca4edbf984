"""
Moto-backed AWS fixtures.

Every test gets a freshly created bucket and queue with random uuid names,
so no state leaks between tests.
"""
import uuid

import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from messages_api.adapters.queue import SQSQueue
from messages_api.adapters.storage import ObjectStore
from messages_api.config.settings import RelayConfig, Settings
from messages_api.main import create_app
from tests.consts import TEST_REGION


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Keep boto3 away from real credentials and endpoints."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("SQS_QUEUE_URL", raising=False)


@pytest.fixture
def bucket_name() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def queue_name() -> str:
    return str(uuid.uuid4())


@pytest.fixture
def mocked_aws(bucket_name, queue_name):
    """Start moto and create the test bucket and queue."""
    with mock_aws():
        boto3.client("s3", region_name=TEST_REGION).create_bucket(Bucket=bucket_name)
        boto3.client("sqs", region_name=TEST_REGION).create_queue(QueueName=queue_name)
        yield


@pytest.fixture
def s3_client(mocked_aws):
    return boto3.client("s3", region_name=TEST_REGION)


@pytest.fixture
def sqs_client(mocked_aws):
    return boto3.client("sqs", region_name=TEST_REGION)


@pytest.fixture
def queue_url(sqs_client, queue_name) -> str:
    return sqs_client.get_queue_url(QueueName=queue_name)["QueueUrl"]


@pytest.fixture
def relay_config(bucket_name, queue_name) -> RelayConfig:
    return RelayConfig(queue_name=queue_name, bucket_name=bucket_name)


@pytest.fixture
def store(s3_client) -> ObjectStore:
    return ObjectStore(s3_client)


@pytest.fixture
def queue(sqs_client, queue_name) -> SQSQueue:
    return SQSQueue(sqs_client, queue_name, wait_time_seconds=0)


def make_settings(bucket_name: str, queue_name: str, **overrides) -> Settings:
    values = {
        "deployment_mode": "aws-mock",
        "relay_mode": "direct",
        "consumer_enabled": False,
        "aws_region": TEST_REGION,
        "s3_bucket_name": bucket_name,
        "sqs_queue_name": queue_name,
        "sqs_wait_time_seconds": 0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(bucket_name, queue_name) -> Settings:
    return make_settings(bucket_name, queue_name)


@pytest.fixture
def client(mocked_aws, settings) -> TestClient:
    """Test client for a direct-mode app."""
    app = create_app(settings=settings)
    return TestClient(app)


@pytest.fixture
def delegated_settings(bucket_name, queue_name) -> Settings:
    return make_settings(bucket_name, queue_name, relay_mode="delegated")


@pytest.fixture
def delegated_client(mocked_aws, delegated_settings) -> TestClient:
    """Test client for a delegated-mode app whose consumer is driven by the test."""
    app = create_app(settings=delegated_settings)
    return TestClient(app)
