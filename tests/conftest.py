"""Shared fixtures: isolated upload root, signed tokens, test client."""

import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

# Must be set before the application modules read their settings
os.environ.setdefault("UPLOAD_ROOT", tempfile.mkdtemp(prefix="fridge-fusion-uploads-"))
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-signing-tokens-0123456789")
os.environ.pop("MONGODB_URI", None)

import jwt  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from src.fridge_fusion.config import settings  # noqa: E402
from src.fridge_fusion.main import app  # noqa: E402
from src.fridge_fusion.router.upload import get_profile_uploader  # noqa: E402
from src.fridge_fusion.services.upload_service import ProfileImageUploader  # noqa: E402


def make_token(user_id: str = "u1", **claims: object) -> str:
    payload = {"id": user_id, **claims}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def bearer(user_id: str = "u1") -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def profile_dir(tmp_path: Path) -> Path:
    """Profiles directory that does not exist yet."""
    return tmp_path / "uploads" / "profiles"


@pytest.fixture
def client(profile_dir: Path) -> Iterator[TestClient]:
    app.dependency_overrides[get_profile_uploader] = lambda: ProfileImageUploader(profile_dir)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return bearer("u1")


@pytest.fixture
def headers_for():
    """Build an Authorization header for an arbitrary user id."""
    return bearer
