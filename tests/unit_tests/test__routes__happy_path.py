import asyncio
import json
import time
import uuid

from fastapi import status
from fastapi.testclient import TestClient

from messages_api.main import create_app
from tests.consts import TEST_CONTENT, TEST_OTHER_CONTENT
from tests.fixtures.aws_fixtures import make_settings


def test__create_message__generates_uuid(client: TestClient):
    response = client.post("/api/messages", json={"content": TEST_CONTENT})

    assert response.status_code == status.HTTP_200_OK
    created = response.json()
    assert set(created) == {"uuid"}
    assert uuid.UUID(created["uuid"]).version == 4


def test__create_message__keeps_client_uuid(client: TestClient):
    message_uuid = str(uuid.uuid4())

    response = client.post("/api/messages", json={"uuid": message_uuid, "content": TEST_CONTENT})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"uuid": message_uuid}


def test__create_then_get__round_trip(client: TestClient):
    created = client.post("/api/messages", json={"content": TEST_CONTENT}).json()

    response = client.get(f"/api/messages/{created['uuid']}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"uuid": created["uuid"], "content": TEST_CONTENT}


def test__create_message__publishes_to_queue(client: TestClient, sqs_client, queue_url):
    created = client.post("/api/messages", json={"content": TEST_CONTENT}).json()

    body = sqs_client.receive_message(QueueUrl=queue_url)["Messages"][0]["Body"]
    assert json.loads(body) == {"uuid": created["uuid"], "content": TEST_CONTENT}


def test__messages_are_isolated(client: TestClient):
    first = client.post("/api/messages", json={"content": TEST_CONTENT}).json()["uuid"]
    second = client.post("/api/messages", json={"content": TEST_OTHER_CONTENT}).json()["uuid"]

    assert first != second
    assert client.get(f"/api/messages/{first}").json()["content"] == TEST_CONTENT
    assert client.get(f"/api/messages/{second}").json()["content"] == TEST_OTHER_CONTENT


def test__create_message__same_uuid_overwrites(client: TestClient):
    message_uuid = str(uuid.uuid4())
    client.post("/api/messages", json={"uuid": message_uuid, "content": TEST_CONTENT})
    client.post("/api/messages", json={"uuid": message_uuid, "content": TEST_OTHER_CONTENT})

    response = client.get(f"/api/messages/{message_uuid}")

    assert response.json() == {"uuid": message_uuid, "content": TEST_OTHER_CONTENT}


def test__delegated_mode__retrievable_after_consumer(delegated_client: TestClient):
    created = delegated_client.post("/api/messages", json={"content": TEST_CONTENT}).json()

    # not yet materialized
    response = delegated_client.get(f"/api/messages/{created['uuid']}")
    assert response.status_code == status.HTTP_404_NOT_FOUND

    assert asyncio.run(delegated_client.app.state.consumer.poll_once())

    response = delegated_client.get(f"/api/messages/{created['uuid']}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"uuid": created["uuid"], "content": TEST_CONTENT}


def test__delegated_mode__in_process_consumer(mocked_aws, bucket_name, queue_name):
    settings = make_settings(bucket_name, queue_name, relay_mode="delegated", consumer_enabled=True)

    with TestClient(create_app(settings=settings)) as client:
        created = client.post("/api/messages", json={"content": TEST_CONTENT}).json()

        deadline = time.monotonic() + 10
        response = client.get(f"/api/messages/{created['uuid']}")
        while response.status_code == status.HTTP_404_NOT_FOUND and time.monotonic() < deadline:
            time.sleep(0.2)
            response = client.get(f"/api/messages/{created['uuid']}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["content"] == TEST_CONTENT


def test__health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["ready"] is True
    assert body["relay_mode"] == "direct"
    assert body["deployment_mode"] == "aws-mock"
    assert body["components"] == {"api": "ready", "queue": "ready", "storage": "ready"}
