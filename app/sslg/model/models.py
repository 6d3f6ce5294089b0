"""
SQLAlchemy Models for SSLG.

18-10-2026
"""

from __future__ import annotations

from sqlalchemy.orm import relationship
from sqlalchemy import Column, ForeignKey
from sqlalchemy.types import Boolean, Integer, String, Text, Enum, DateTime

from app.sslg import utils
from app.sslg.model.enums import PositionEnum
from app.database import Base
from app.config import DEFAULT_PARTYLIST_COLOR


class Section(Base):
    __tablename__ = "sslg_sections"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    grade_level = Column(Integer, nullable=False)

    students = relationship("Student", cascade="all, delete", back_populates="section")


class Partylist(Base):
    __tablename__ = "sslg_partylists"

    id = Column(String(36), primary_key=True, default=utils.new_uuid)
    name = Column(String(100), nullable=False, unique=True)
    color_hex = Column(String(7), nullable=False, default=DEFAULT_PARTYLIST_COLOR)
    acronym = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    candidates = relationship("Candidate", cascade="all, delete", back_populates="partylist")


class Candidate(Base):
    __tablename__ = "sslg_candidates"

    id = Column(String(36), primary_key=True, default=utils.new_uuid)
    full_name = Column(String(150), nullable=False)
    position = Column(Enum(PositionEnum), nullable=False)
    partylist_id = Column(
        String(36),
        ForeignKey("sslg_partylists.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
    )
    # Only set for Grade Level Representatives: the grade the candidate will serve
    target_grade_level = Column(Integer, nullable=True)

    partylist = relationship("Partylist", back_populates="candidates", lazy="joined")


class Student(Base):
    __tablename__ = "sslg_students"

    id = Column(String(36), primary_key=True, default=utils.new_uuid)
    full_name = Column(String(150), nullable=False)
    section_id = Column(
        Integer,
        ForeignKey("sslg_sections.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
    )
    has_voted = Column(Boolean, nullable=False, default=False)
    voted_at = Column(DateTime, nullable=True)

    section = relationship("Section", back_populates="students", lazy="joined")


class Vote(Base):
    __tablename__ = "sslg_votes"

    id = Column(String(36), primary_key=True, default=utils.new_uuid)
    candidate_id = Column(
        String(36),
        ForeignKey("sslg_candidates.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    section_id = Column(
        Integer,
        ForeignKey("sslg_sections.id", onupdate="CASCADE", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    cast_at = Column(DateTime, default=utils.tz_now)


class ElectionLog(Base):
    __tablename__ = "sslg_election_logs"

    id = Column(Integer, primary_key=True, index=True)

    log_level = Column(String(200), nullable=False)

    event = Column(String(200), nullable=False)
    event_params = Column(Text, nullable=False)

    created_at = Column(DateTime, default=utils.tz_now)
