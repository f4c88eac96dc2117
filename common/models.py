from __future__ import annotations
import uuid
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal, Dict, Tuple

Gender = Literal["Male", "Female"]
FieldKind = Literal["text", "radio", "checkbox", "file"]

SKILL_OPTIONS: Tuple[str, ...] = ("HTML", "CSS", "JavaScript", "React")
GENDER_OPTIONS: Tuple[str, ...] = ("Male", "Female")

ValidationErrors = Dict[str, str]


class _Record(BaseModel):
    # persisted/rendered with the camelCase keys the form uses (fullName, profilePic, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ProfilePic(_Record):
    """A selected picture file. `ref` tells two selections apart even if the bytes match."""
    filename: str
    content_type: Optional[str] = None
    content: bytes = Field(default=b"", repr=False, exclude=True)
    ref: str = Field(default_factory=lambda: uuid.uuid4().hex)

    def info(self) -> "PictureInfo":
        return PictureInfo(filename=self.filename, content_type=self.content_type, byte_size=len(self.content))


class PictureInfo(_Record):
    filename: str
    content_type: Optional[str] = None
    byte_size: Optional[int] = None


class FormDraft(_Record):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    gender: Optional[Gender] = None
    skills: Tuple[str, ...] = ()
    profile_pic: Optional[ProfilePic] = None

    @field_validator("gender", mode="before")
    @classmethod
    def _blank_gender_is_unset(cls, v):
        return v or None

    @field_validator("skills")
    @classmethod
    def _known_unique_skills(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        unknown = [s for s in v if s not in SKILL_OPTIONS]
        if unknown:
            raise ValueError(f"unknown skills: {', '.join(unknown)}")
        if len(set(v)) != len(v):
            raise ValueError("skills must not repeat")
        return v


EMPTY_DRAFT = FormDraft()


class Entry(_Record):
    id: int
    full_name: str
    email: str
    phone: str
    gender: Optional[Gender] = None
    skills: List[str] = []
    profile_pic: Optional[PictureInfo] = None
    preview: Optional[str] = None

    @classmethod
    def from_draft(cls, entry_id: int, draft: FormDraft, preview: Optional[str]) -> "Entry":
        return cls(
            id           = entry_id,
            full_name    = draft.full_name,
            email        = draft.email,
            phone        = draft.phone,
            gender       = draft.gender,
            skills       = list(draft.skills),
            profile_pic  = draft.profile_pic.info() if draft.profile_pic else None,
            preview      = preview,
        )


class FormState(_Record):
    draft: FormDraft = EMPTY_DRAFT
    preview: Optional[str] = None
    # ref of the picture the preview was read from
    preview_ref: Optional[str] = None
    errors: ValidationErrors = {}


class FieldChange(BaseModel):
    name: str
    value: Optional[str] = None
    kind: FieldKind = "text"


class SubmitResult(BaseModel):
    ok: bool
    entry: Optional[Entry] = None
    errors: ValidationErrors = {}


class FormView(_Record):
    """What the view layer renders: current draft, errors, preview and entries."""
    draft: FormDraft
    errors: ValidationErrors = {}
    preview: Optional[str] = None
    entries: List[Entry] = []
    skill_options: List[str] = list(SKILL_OPTIONS)
    gender_options: List[str] = list(GENDER_OPTIONS)
