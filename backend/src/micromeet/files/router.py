"""File endpoints.

Uploads and downloads go straight to object storage via presigned URLs.
Every key is prefixed with the caller's organization id; keys belonging to
another organization are rejected as not found.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from ..auth.dependencies import TenantContext
from ..config import get_settings
from ..errors import ExternalServiceFailure, NotFound
from ..storage.dependencies import get_storage
from ..storage.keys import ensure_own_key, new_storage_key
from ..storage.ports import ObjectStoragePort, StorageError
from .schemas import DownloadUrlResponse, UploadUrlRequest, UploadUrlResponse

router = APIRouter(prefix="/files", tags=["Files"])

Storage = Annotated[ObjectStoragePort, Depends(get_storage)]


@router.post("/upload-url", response_model=UploadUrlResponse)
def create_upload_url(data: UploadUrlRequest, ctx: TenantContext, storage: Storage):
    expires_in = get_settings().S3_PRESIGN_EXPIRY_SECONDS
    storage_key = new_storage_key(ctx, data.category, data.filename)
    try:
        url = storage.generate_upload_url(storage_key, data.content_type, expires_in)
    except StorageError as e:
        raise ExternalServiceFailure(f"Penyimpanan file gagal: {e}") from e
    return UploadUrlResponse(upload_url=url, storage_key=storage_key, expires_in=expires_in)


@router.get("/url", response_model=DownloadUrlResponse)
def get_download_url(ctx: TenantContext, storage: Storage, key: str = Query(..., min_length=1)):
    ensure_own_key(ctx, key)
    expires_in = get_settings().S3_PRESIGN_EXPIRY_SECONDS
    try:
        url = storage.generate_download_url(key, expires_in)
    except FileNotFoundError:
        raise NotFound("File tidak ditemukan")
    except StorageError as e:
        raise ExternalServiceFailure(f"Penyimpanan file gagal: {e}") from e
    return DownloadUrlResponse(url=url, expires_in=expires_in)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(ctx: TenantContext, storage: Storage, key: str = Query(..., min_length=1)):
    ensure_own_key(ctx, key)
    try:
        storage.delete_file(key)
    except StorageError as e:
        raise ExternalServiceFailure(f"Penyimpanan file gagal: {e}") from e
