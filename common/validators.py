import re
from common.models import FormDraft, ValidationErrors

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^[0-9]{10}$")

MIN_SKILLS = 2

def validate_draft(draft: FormDraft) -> ValidationErrors:
    """
    Field name -> message for every rule the draft breaks; {} means it can be submitted.
    Every field is checked on each call. Trimming only decides "required";
    format checks run on the value as typed.
    """
    errs: ValidationErrors = {}

    # requireds
    if not draft.full_name.strip():
        errs["fullName"] = "Full Name is required"

    if not draft.email.strip():
        errs["email"] = "Email is required"
    elif not EMAIL_RE.fullmatch(draft.email):
        errs["email"] = "Invalid email format"

    if not draft.phone.strip():
        errs["phone"] = "Phone is required"
    elif not PHONE_RE.fullmatch(draft.phone):
        errs["phone"] = "Phone must be 10 digits"

    if not draft.gender:
        errs["gender"] = "Gender is required"
    if len(draft.skills) < MIN_SKILLS:
        errs["skills"] = "Select at least two skills"
    if draft.profile_pic is None:
        errs["profilePic"] = "Profile picture is required"

    return errs

def is_valid(draft: FormDraft) -> bool:
    return not validate_draft(draft)
