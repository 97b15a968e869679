"""Exceptions raised by the upload pipeline.

Every error carries the HTTP status it maps to and the JSON payload the
client receives, so the route never has to know which failure happened.
"""

from __future__ import annotations

from typing import Any


class UploadError(Exception):
    """Base class for upload failures; ``status_code`` selects the response."""

    status_code = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message}


class MissingFileError(UploadError):
    """Raised when the request carries no file under the ``image`` field."""

    def __init__(self) -> None:
        super().__init__("Please upload an image file")


class MalformedUploadError(UploadError):
    """Raised when the multipart body cannot be parsed or has unexpected files."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Upload error: {reason}")


class InvalidFileTypeError(UploadError):
    """Raised when the declared content type is not an image."""

    def __init__(self, content_type: str | None) -> None:
        self.content_type = content_type
        super().__init__("Upload error: Not an image! Please upload only images.")


class FileTooLargeError(UploadError):
    """Raised when the payload exceeds the upload size ceiling."""

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes
        super().__init__("Upload error: File too large")


class ServerError(UploadError):
    """Raised for failures that are not the client's fault."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__("Server error")

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "error": self.detail}


class StorageError(ServerError):
    """Raised when the file cannot be written to local storage."""
