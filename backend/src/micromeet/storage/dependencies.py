"""FastAPI dependency providing the configured storage adapter"""

from functools import lru_cache

from ..config import get_settings
from .ports import ObjectStoragePort
from .s3_adapter import S3StorageAdapter


@lru_cache()
def get_storage() -> ObjectStoragePort:
    settings = get_settings()
    return S3StorageAdapter(
        endpoint_url=settings.S3_ENDPOINT_URL,
        access_key=settings.S3_ACCESS_KEY_ID,
        secret_key=settings.S3_SECRET_ACCESS_KEY,
        bucket_name=settings.S3_BUCKET_NAME,
        region=settings.S3_REGION,
    )
