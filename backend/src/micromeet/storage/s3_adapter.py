"""S3 storage adapter - ObjectStoragePort implementation using boto3.

Works against AWS S3, MinIO and other S3-compatible services.
"""

import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .ports import ObjectStoragePort, StorageError

logger = logging.getLogger(__name__)


class S3StorageAdapter(ObjectStoragePort):
    """S3-compatible storage adapter using boto3.

    Example:
        storage = S3StorageAdapter(
            endpoint_url="http://localhost:9000",
            access_key="minioadmin",
            secret_key="minioadmin",
            bucket_name="micromeet-files",
        )
        url = storage.generate_upload_url(key, "image/png", 3600)
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
    ):
        self.s3_client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )
        self.bucket_name = bucket_name
        self.region = region

        logger.info(
            f"Initialized S3 storage adapter: bucket={bucket_name}, "
            f"endpoint={endpoint_url or 'AWS S3'}, region={region}"
        )

    @staticmethod
    def _error_code(e: ClientError) -> str:
        return e.response.get("Error", {}).get("Code", "Unknown")

    def generate_upload_url(self, storage_key: str, content_type: str, expires_in_seconds: int = 3600) -> str:
        try:
            return self.s3_client.generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": self.bucket_name,
                    "Key": storage_key,
                    "ContentType": content_type,
                },
                ExpiresIn=expires_in_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Presigned upload URL failed: storage_key={storage_key}, error={e}")
            raise StorageError(f"Failed to generate upload URL: {e}")

    def generate_download_url(self, storage_key: str, expires_in_seconds: int = 3600) -> str:
        if not self.file_exists(storage_key):
            raise FileNotFoundError(f"File not found: {storage_key}")

        try:
            return self.s3_client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": storage_key},
                ExpiresIn=expires_in_seconds,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Presigned download URL failed: storage_key={storage_key}, error={e}")
            raise StorageError(f"Failed to generate presigned URL: {e}")

    def file_exists(self, storage_key: str) -> bool:
        """HEAD the object. Errors other than 404 raise StorageError."""
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=storage_key)
            return True
        except ClientError as e:
            if self._error_code(e) in ("404", "NoSuchKey", "NotFound"):
                return False
            logger.warning(f"Error checking file existence: storage_key={storage_key}, error={self._error_code(e)}")
            raise StorageError(f"Failed to check file: {self._error_code(e)}")
        except BotoCoreError as e:
            raise StorageError(f"Failed to check file: {e}")

    def delete_file(self, storage_key: str) -> bool:
        if not self.file_exists(storage_key):
            logger.info(f"File not found for deletion: storage_key={storage_key}")
            return False

        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=storage_key)
        except ClientError as e:
            logger.error(f"S3 deletion failed: storage_key={storage_key}, error={self._error_code(e)}")
            raise StorageError(f"Failed to delete file: {self._error_code(e)}")
        except BotoCoreError as e:
            raise StorageError(f"Failed to delete file: {e}")

        logger.info(f"Deleted file: storage_key={storage_key}")
        return True
