"""
Schemas for the generic upload endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class UploadUrlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_name: str | None = Field(default=None, alias="originalname", max_length=255)
    file_type: str | None = Field(default=None, alias="fileType", max_length=255)


class UploadUrlResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    upload_url: str = Field(..., alias="uploadUrl")
    filename: str
    file_path: str = Field(..., alias="filePath")
