"""Pydantic schemas for file endpoints"""

from typing import Literal

from pydantic import BaseModel, Field

FileCategory = Literal["logo", "signature", "stamp", "avatar", "attachment"]


class UploadUrlRequest(BaseModel):
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., min_length=1, max_length=100)
    category: FileCategory = "attachment"


class UploadUrlResponse(BaseModel):
    upload_url: str
    storage_key: str
    expires_in: int


class DownloadUrlResponse(BaseModel):
    url: str
    expires_in: int
