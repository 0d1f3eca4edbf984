"""
Object store adapter over S3.
"""

import logging
from typing import TYPE_CHECKING, BinaryIO, Union

from botocore.exceptions import BotoCoreError, ClientError

from messages_api.errors import (
    MessageNotFoundError,
    StorageReadError,
    UploadError,
)
from messages_api.s3.read_objects import (
    fetch_s3_object,
    is_missing_object_error,
    object_exists_in_s3,
)
from messages_api.s3.write_objects import upload_s3_object

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


class ObjectStore:
    """Uploads message content by bucket and key and reads it back as text."""

    def __init__(self, s3_client: "S3Client"):
        self.s3_client = s3_client

    def upload(self, bucket: str, key: str, data: Union[bytes, BinaryIO]) -> None:
        """Write data under key, overwriting any prior object at that key."""
        try:
            upload_s3_object(
                bucket_name=bucket,
                object_key=key,
                file_content=data,
                s3_client=self.s3_client,
                content_type=TEXT_CONTENT_TYPE,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error uploading '{key}' to bucket '{bucket}': {str(e)}")
            raise UploadError(f"Failed to upload '{key}' to bucket '{bucket}': {e}") from e
        logger.info(f"Uploaded '{key}' to bucket '{bucket}'")

    def download_as_string(self, bucket: str, key: str) -> str:
        """Read the object under key and decode it as UTF-8."""
        try:
            response = fetch_s3_object(bucket, key, self.s3_client)
            body = response["Body"]
            try:
                return body.read().decode("utf-8")
            finally:
                body.close()
        except ClientError as e:
            if is_missing_object_error(e):
                raise MessageNotFoundError(key) from e
            logger.error(f"Error reading '{key}' from bucket '{bucket}': {str(e)}")
            raise StorageReadError(f"Failed to read '{key}' from bucket '{bucket}': {e}") from e
        except (BotoCoreError, UnicodeDecodeError) as e:
            logger.error(f"Error reading '{key}' from bucket '{bucket}': {str(e)}")
            raise StorageReadError(f"Failed to read '{key}' from bucket '{bucket}': {e}") from e

    def exists(self, bucket: str, key: str) -> bool:
        return object_exists_in_s3(bucket, key, self.s3_client)
