"""Pytest configuration: repo root on sys.path plus shared form fixtures.

The packages (``common``, ``registration``, ``apps``) are plain directories at
the repository root, so tests import them the same way the gateway does.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from common.models import FormDraft, ProfilePic  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def make_pic(name: str = "me.png", content: bytes = PNG_BYTES, content_type: str = "image/png") -> ProfilePic:
    return ProfilePic(filename=name, content_type=content_type, content=content)


@pytest.fixture
def pic() -> ProfilePic:
    return make_pic()


@pytest.fixture
def valid_draft(pic) -> FormDraft:
    return FormDraft(
        full_name="Jane Doe",
        email="jane@x.com",
        phone="1234567890",
        gender="Female",
        skills=("HTML", "CSS"),
        profile_pic=pic,
    )
