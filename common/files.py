import base64
import binascii
import mimetypes
from typing import Optional

from common.models import ProfilePic

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(filename: str, declared: Optional[str] = None) -> str:
    if declared:
        return declared
    ctype, _ = mimetypes.guess_type(filename)
    return ctype or DEFAULT_CONTENT_TYPE


def read_as_data_url(pic: ProfilePic) -> str:
    """
    Encode the picture bytes as a `data:` URI, usable directly as an <img src>.
    Raises ValueError for a file with no bytes (nothing to preview).
    """
    if not pic.content:
        raise ValueError(f"{pic.filename}: file is empty")
    ctype = guess_content_type(pic.filename, pic.content_type)
    b64 = base64.b64encode(pic.content).decode("ascii")
    return f"data:{ctype};base64,{b64}"


def profile_pic_from_base64(filename: str, content_base64: str, content_type: Optional[str] = None) -> ProfilePic:
    """
    Build a ProfilePic from an upload of the shape
      { "filename": str, "content_type": str | None, "content_base64": str }
    Raises ValueError when content_base64 is not valid base64.
    """
    try:
        content = base64.b64decode(content_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"{filename}: content_base64 is not valid base64") from e
    return ProfilePic(
        filename=filename or "file.bin",
        content_type=guess_content_type(filename or "", content_type),
        content=content,
    )
