import logging
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError, field_validator

logger = logging.getLogger("profile_store")


def _string_list(value) -> List[str]:
    """Lenient read of a list of strings: non-strings and repeats are dropped."""
    if not isinstance(value, list):
        return []
    result: List[str] = []
    for item in value:
        if isinstance(item, str) and item not in result:
            result.append(item)
    return result


def _model_list(model, value) -> list:
    if not isinstance(value, list):
        return []
    items = []
    for raw in value:
        try:
            items.append(model.model_validate(raw))
        except ValidationError as e:
            logger.warning("Skipping malformed %s entry: %s", model.__name__, e.errors())
    return items


# ─────────────────────────────────────────────
# links document
# ─────────────────────────────────────────────
class Organization(BaseModel):
    id: str
    name: str
    description: str = ""
    role: Literal["admin", "member"] = "member"
    status: Literal["active", "past"] = "active"
    type: Literal["usc", "non-usc"] = "usc"


class FavoriteTool(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    link: Optional[str] = None


class ContentIngestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    podcasts: List[str] = Field(default_factory=list)
    youtube_channels: List[str] = Field(default_factory=list, alias="youtubeChannels")
    influencers: List[str] = Field(default_factory=list)
    news_sources: List[str] = Field(default_factory=list, alias="newsSources")


class ProfileLinks(BaseModel):
    """
    Typed view of the profiles.links JSON document.
    Stored with camelCase keys; reading is lenient so one bad entry does not
    hide the rest of a profile.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    hobbies_and_sports: List[str] = Field(default_factory=list, alias="hobbiesAndSports")
    can_teach: List[str] = Field(default_factory=list, alias="canTeach")
    want_to_learn: List[str] = Field(default_factory=list, alias="wantToLearn")
    organizations: List[Organization] = Field(default_factory=list)
    favorite_tools: List[FavoriteTool] = Field(default_factory=list, alias="favoriteTools")
    content_ingestion: ContentIngestion = Field(default_factory=ContentIngestion, alias="contentIngestion")
    linkedin_url: Optional[str] = Field(default=None, alias="linkedinUrl")
    resume_url: Optional[str] = Field(default=None, alias="resumeUrl")
    personal_website: Optional[str] = Field(default=None, alias="personalWebsite")
    github: Optional[str] = None

    @field_validator("skills", "interests", "hobbies_and_sports", "can_teach", "want_to_learn", mode="before")
    @classmethod
    def _lenient_strings(cls, value):
        return _string_list(value)

    @field_validator("organizations", mode="before")
    @classmethod
    def _lenient_organizations(cls, value):
        return _model_list(Organization, value)

    @field_validator("favorite_tools", mode="before")
    @classmethod
    def _lenient_tools(cls, value):
        return _model_list(FavoriteTool, value)

    @field_validator("content_ingestion", mode="before")
    @classmethod
    def _lenient_content(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("linkedin_url", "resume_url", "personal_website", "github", mode="before")
    @classmethod
    def _lenient_url(cls, value):
        return value if isinstance(value, str) and value else None

    @classmethod
    def from_document(cls, raw) -> "ProfileLinks":
        return cls.model_validate(raw if isinstance(raw, dict) else {})

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# keys of ProfileLinks holding plain string lists, by URL segment
LIST_LINK_KINDS = {
    "skills": "skills",
    "interests": "interests",
    "hobbies_and_sports": "hobbiesAndSports",
    "can_teach": "canTeach",
    "want_to_learn": "wantToLearn",
}


class OrganizationIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    role: Literal["admin", "member"] = "member"
    status: Literal["active", "past"] = "active"
    type: Literal["usc", "non-usc"] = "usc"


class OrganizationUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    role: Optional[Literal["admin", "member"]] = None
    status: Optional[Literal["active", "past"]] = None
    type: Optional[Literal["usc", "non-usc"]] = None


class FavoriteToolIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    categories: List[str] = Field(default_factory=list)
    link: Optional[str] = None


class FavoriteToolUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    categories: Optional[List[str]] = None
    link: Optional[str] = None


class ContentIngestionUpdate(BaseModel):
    """Only the lists present in the body replace the stored ones."""
    model_config = ConfigDict(populate_by_name=True)

    podcasts: Optional[List[str]] = None
    youtube_channels: Optional[List[str]] = Field(default=None, alias="youtubeChannels")
    influencers: Optional[List[str]] = None
    news_sources: Optional[List[str]] = Field(default=None, alias="newsSources")


class ResumeIn(BaseModel):
    url: Optional[str] = None


# ─────────────────────────────────────────────
# classes / projects
# ─────────────────────────────────────────────
class ClassOut(BaseModel):
    id: str
    code: str
    title: str
    model_config = ConfigDict(from_attributes=True)


class ClassCatalogOut(ClassOut):
    school: str
    description: Optional[str] = None


class ProjectIn(BaseModel):
    title: str
    summary: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    technologies: List[str] = Field(default_factory=list)
    visibility: Literal["public", "private", "unlisted"] = "public"


class ProjectUpdate(BaseModel):
    title: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    technologies: Optional[List[str]] = None
    visibility: Optional[Literal["public", "private", "unlisted"]] = None


class ProjectOut(BaseModel):
    id: str
    title: str
    summary: Optional[str] = None
    description: Optional[str] = None
    links: Optional[dict] = None
    visibility: str
    model_config = ConfigDict(from_attributes=True)


# ─────────────────────────────────────────────
# profiles
# ─────────────────────────────────────────────
class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    graduation_year: Optional[int] = None
    location: Optional[str] = None
    hometown: Optional[str] = None
    cohort: Optional[str] = None
    modality: Optional[Literal["in-person", "online", "hybrid"]] = None
    visibility: Optional[Literal["public", "private", "unlisted"]] = None
    linkedin_url: Optional[str] = None
    personal_website: Optional[str] = None
    github: Optional[str] = None


class DirectoryProfileOut(BaseModel):
    """A profile with its links document resolved into typed fields."""
    id: str
    full_name: str
    email: str
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    graduation_year: Optional[int] = None
    location: Optional[str] = None
    hometown: Optional[str] = None
    cohort: Optional[str] = None
    modality: Optional[str] = None
    status: str
    role: str
    visibility: str
    created_at: datetime
    updated_at: datetime

    skills: List[str] = Field(default_factory=list)
    interests: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)  # alias of interests for older clients
    classes: List[ClassOut] = Field(default_factory=list)
    projects: List[ProjectOut] = Field(default_factory=list)
    organizations: List[Organization] = Field(default_factory=list)
    content_ingestion: ContentIngestion = Field(default_factory=ContentIngestion)
    favorite_tools: List[FavoriteTool] = Field(default_factory=list)
    hobbies_and_sports: List[str] = Field(default_factory=list)
    can_teach: List[str] = Field(default_factory=list)
    want_to_learn: List[str] = Field(default_factory=list)
    linkedin_url: Optional[str] = None
    resume_url: Optional[str] = None
    personal_website: Optional[str] = None
    github: Optional[str] = None

    @classmethod
    def from_profile(cls, profile, include_private_projects: bool = False) -> "DirectoryProfileOut":
        links = ProfileLinks.from_document(profile.links)
        projects = [
            ProjectOut.model_validate(p)
            for p in profile.projects
            if include_private_projects or p.visibility != "private"
        ]
        return cls(
            id=profile.id,
            full_name=profile.full_name,
            email=profile.email,
            avatar_url=profile.avatar_url,
            bio=profile.bio,
            graduation_year=profile.graduation_year,
            location=profile.location,
            hometown=profile.hometown,
            cohort=profile.cohort,
            modality=profile.modality,
            status=profile.status,
            role=profile.role,
            visibility=profile.visibility,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
            skills=links.skills,
            interests=links.interests,
            tags=links.interests,
            classes=[ClassOut.model_validate(c) for c in profile.classes],
            projects=projects,
            organizations=links.organizations,
            content_ingestion=links.content_ingestion,
            favorite_tools=links.favorite_tools,
            hobbies_and_sports=links.hobbies_and_sports,
            can_teach=links.can_teach,
            want_to_learn=links.want_to_learn,
            linkedin_url=links.linkedin_url,
            resume_url=links.resume_url,
            personal_website=links.personal_website,
            github=links.github,
        )


class ProfileStatusOut(BaseModel):
    id: str
    full_name: str
    email: str
    status: str
    role: str
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class AdminProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    graduation_year: Optional[int] = None
    bio: Optional[str] = None
