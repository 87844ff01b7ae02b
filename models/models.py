import uuid
from datetime import datetime
from sqlalchemy import JSON, Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from db import Base


def _uuid() -> str:
    return str(uuid.uuid4())


PROFILE_STATUSES = ("pending", "active", "suspended")


class ProfileClass(Base):
    __tablename__ = "profile_classes"

    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)
    class_id = Column(String(36), ForeignKey("classes.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)

    course = relationship("ClassRecord", lazy="joined")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    avatar_url = Column(String(1024))
    bio = Column(Text)
    graduation_year = Column(Integer)
    location = Column(String(255))
    hometown = Column(String(255))
    cohort = Column(String(64))
    modality = Column(String(16))

    # schema-on-read document: skills, interests, organizations, tools ...
    links = Column(JSON, nullable=False, default=dict)

    status = Column(String(16), nullable=False, default="pending", index=True)
    role = Column(String(16), nullable=False, default="user")
    visibility = Column(String(16), nullable=False, default="public")
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    profile_classes = relationship(
        "ProfileClass",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ProfileClass.created_at",
    )
    projects = relationship(
        "Project",
        back_populates="owner",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Project.created_at",
    )

    @property
    def classes(self):
        return [pc.course for pc in self.profile_classes if pc.course is not None]


class ClassRecord(Base):
    __tablename__ = "classes"

    id = Column(String(36), primary_key=True, default=_uuid)
    school = Column(String(255), nullable=False, default="USC")
    code = Column(String(32), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_uuid)
    owner_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    summary = Column(Text)
    description = Column(Text)
    visibility = Column(String(16), nullable=False, default="public")
    links = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    owner = relationship("Profile", back_populates="projects")


class ActivityLog(Base):
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    entity_type = Column(String(32), nullable=False)
    entity_id = Column(String(36), nullable=False, index=True)
    actor_id = Column(String(36), nullable=False)
    action = Column(String(64), nullable=False)
    # "metadata" is reserved on declarative classes
    details = Column("metadata", JSON, default=dict)
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
