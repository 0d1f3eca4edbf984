import boto3

from messages_api.s3.write_objects import upload_s3_object
from tests.consts import TEST_REGION


def test__upload_s3_object(mocked_aws, bucket_name):
    s3_client = boto3.client("s3", region_name=TEST_REGION)

    object_key = "test.txt"
    file_content = b"Hello, world!"
    content_type = "text/plain"
    upload_s3_object(
        bucket_name=bucket_name,
        object_key=object_key,
        file_content=file_content,
        s3_client=s3_client,
        content_type=content_type,
    )

    response = s3_client.get_object(Bucket=bucket_name, Key=object_key)
    assert response["ContentType"] == content_type
    assert response["Body"].read() == file_content


def test__upload_s3_object__defaults_content_type(mocked_aws, bucket_name):
    s3_client = boto3.client("s3", region_name=TEST_REGION)

    upload_s3_object(bucket_name, "blob", b"\x00\x01", s3_client)

    response = s3_client.get_object(Bucket=bucket_name, Key="blob")
    assert response["ContentType"] == "application/octet-stream"
