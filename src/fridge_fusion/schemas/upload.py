from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Response schema for POST /api/upload/profile-image."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    file_url: str = Field(alias="fileUrl")
    message: str = "Image uploaded successfully"


class ErrorResponse(BaseModel):
    """Body returned for rejected or failed uploads."""
    message: str
    error: str | None = None
