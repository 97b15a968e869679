"""Router – profile image upload."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import FormData, UploadFile

from src.fridge_fusion.auth import CurrentUser, get_current_user
from src.fridge_fusion.config import PROFILE_UPLOAD_DIR
from src.fridge_fusion.errors import resolve_upload_error
from src.fridge_fusion.exceptions import MalformedUploadError
from src.fridge_fusion.schemas.upload import ErrorResponse, UploadResponse
from src.fridge_fusion.services.upload_service import ProfileImageUploader

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["Upload"])

IMAGE_FIELD = "image"


def get_profile_uploader() -> ProfileImageUploader:
    return ProfileImageUploader(PROFILE_UPLOAD_DIR)


def extract_image(form: FormData) -> UploadFile | None:
    """
    Return the single file sent under ``image``.

    Files under any other field, or more than one ``image`` file, are
    rejected. Parts without a filename count as "no file selected".
    """
    images = [
        value for value in form.getlist(IMAGE_FIELD)
        if isinstance(value, UploadFile) and value.filename
    ]
    unexpected = [
        key for key, value in form.multi_items()
        if key != IMAGE_FIELD and isinstance(value, UploadFile)
    ]
    if unexpected or len(images) > 1:
        raise MalformedUploadError("Unexpected field")
    return images[0] if images else None


@router.post(
    "/profile-image",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_profile_image(
    request: Request,
    user: CurrentUser = Depends(get_current_user),
    uploader: ProfileImageUploader = Depends(get_profile_uploader),
) -> UploadResponse | JSONResponse:
    """
    Upload a profile image for the authenticated user.

    Expects a multipart form with a single file in the ``image`` field
    (any ``image/*`` type, at most 5 MB). Returns the URL the stored file
    is served from.
    """
    logger.info("Received upload request from user %s", user.id)

    try:
        async with request.form() as form:
            image = extract_image(form)
            stored = await uploader.save(user.id, image)
    except Exception as exc:
        return resolve_upload_error(exc)

    logger.info("File URL: %s", stored.url)
    return UploadResponse(file_url=stored.url)
