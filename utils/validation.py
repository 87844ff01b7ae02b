import re
from datetime import datetime
from typing import Iterable, List, Optional
from urllib.parse import urlparse
from pydantic import BaseModel, Field

LINKEDIN_RE = re.compile(r"^https?://(www\.)?linkedin\.com/in/[a-zA-Z0-9-]+/?$")


class ValidationResult(BaseModel):
    is_valid: bool = True
    errors: List[str] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=errors)


class ValidationFailedError(ValueError):
    """Raised when user input fails one of the validators below."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def ensure_valid(*results: ValidationResult) -> None:
    errors = [e for r in results for e in r.errors]
    if errors:
        raise ValidationFailedError(errors)


def validate_linkedin_url(url: Optional[str]) -> ValidationResult:
    errors = []
    if url and url.strip() and not LINKEDIN_RE.match(url):
        errors.append("Please enter a valid LinkedIn profile URL")
    return ValidationResult.from_errors(errors)


def _validate_url(url: Optional[str], message: str) -> ValidationResult:
    errors = []
    if url and url.strip():
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append(message)
    return ValidationResult.from_errors(errors)


def validate_project_url(url: Optional[str]) -> ValidationResult:
    return _validate_url(url, "Please enter a valid project URL")


def validate_resume_url(url: Optional[str]) -> ValidationResult:
    return _validate_url(url, "Please enter a valid resume URL")


def validate_required_fields(values: dict, fields: Iterable[str]) -> ValidationResult:
    """Partial updates may omit these fields but may not set them to null."""
    errors = [
        f"{field.replace('_', ' ').capitalize()} cannot be empty"
        for field in fields
        if field in values and values[field] is None
    ]
    return ValidationResult.from_errors(errors)


def validate_project(
    title: Optional[str],
    description: Optional[str] = None,
    technologies: Optional[List[str]] = None,
    require_title: bool = True,
) -> ValidationResult:
    errors = []
    if title is None and not require_title:
        pass
    elif not (title or "").strip():
        errors.append("Project title is required")
    elif len(title) > 100:
        errors.append("Project title must be less than 100 characters")

    if description and len(description) > 1000:
        errors.append("Project description must be less than 1000 characters")

    if technologies and len(technologies) > 20:
        errors.append("Maximum 20 technologies allowed")

    return ValidationResult.from_errors(errors)


def _validate_name(value: str, label: str) -> ValidationResult:
    errors = []
    if not value.strip():
        errors.append(f"{label} name is required")
    elif len(value) > 50:
        errors.append(f"{label} name must be less than 50 characters")
    elif len(value) < 2:
        errors.append(f"{label} name must be at least 2 characters")
    return ValidationResult.from_errors(errors)


def validate_skill(skill: str) -> ValidationResult:
    return _validate_name(skill, "Skill")


def validate_interest(interest: str) -> ValidationResult:
    return _validate_name(interest, "Interest")


def validate_graduation_year(year: Optional[int]) -> ValidationResult:
    errors = []
    if year is not None:
        max_year = datetime.utcnow().year + 10
        if year < 1900 or year > max_year:
            errors.append(f"Year must be between 1900 and {max_year}")
    return ValidationResult.from_errors(errors)


def validate_profile_info(
    name: Optional[str] = None,
    location: Optional[str] = None,
    hometown: Optional[str] = None,
    cohort: Optional[str] = None,
    year: Optional[int] = None,
    require_name: bool = True,
) -> ValidationResult:
    errors = []
    if name is None and not require_name:
        pass
    elif not (name or "").strip():
        errors.append("Name is required")
    elif len(name) > 100:
        errors.append("Name must be less than 100 characters")

    if location and len(location) > 100:
        errors.append("Location must be less than 100 characters")
    if hometown and len(hometown) > 100:
        errors.append("Hometown must be less than 100 characters")
    if cohort and len(cohort) > 50:
        errors.append("Cohort must be less than 50 characters")

    errors.extend(validate_graduation_year(year).errors)
    return ValidationResult.from_errors(errors)


def sanitize_text(text: str) -> str:
    return re.sub(r"[<>]", "", text.strip())
