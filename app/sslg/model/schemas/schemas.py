"""
Pydantic schemas (FastAPI) for SSLG.

18-10-2026


Pydantic schemas are a way to give a 'type' to a group
of related data.

When we deal with SQLAlchemy we must note the following:

    Let 'TestModel' be a SQLAlchemy model, the API can:
        - Create/modify an instance of TestModel.
        - Out an instance of TestModel.

    To achieve this we create up to 3 schemas:
        - TestModelBase: Inherits from SSLGSchema and holds
          the common data from both creating and returning an
          instance of TestModel.

        - TestModelIn: Inherits from TestModelBase and
          contains the specific data needed to create/modify an
          instance of TestModel.

        - TestModelOut: Inherits from TestModelBase and contains
          the data that we want the API to return to the user.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.config import CANDIDATE_GRADE_LEVELS, DEFAULT_PARTYLIST_COLOR, SECTION_GRADE_LEVELS
from app.sslg.model.enums import PositionEnum
from app.sslg.utils import clean_name, from_json


class SSLGSchema(BaseModel):
    """
    Base class for a SSLG schema.
    """

    model_config = ConfigDict(from_attributes=True)


def _required_name(value: str) -> str:
    name = clean_name(value)
    if name is None:
        raise ValueError("name cannot be empty")
    return name


# ------------------ model-related schemas ------------------

#  Section-related schemas


class SectionBase(SSLGSchema):
    """
    Basic section schema.
    """

    name: str
    grade_level: int


class SectionIn(SectionBase):
    """
    Schema for creating/editing a section.
    """

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return _required_name(value)

    @field_validator("grade_level")
    @classmethod
    def check_grade_level(cls, grade_level):
        if grade_level not in SECTION_GRADE_LEVELS:
            raise ValueError(f"grade level must be one of {SECTION_GRADE_LEVELS}")
        return grade_level


class SectionOut(SectionBase):
    id: int


#  Partylist-related schemas


class PartylistBase(SSLGSchema):
    """
    Basic partylist schema.
    """

    name: str
    color_hex: str = DEFAULT_PARTYLIST_COLOR
    acronym: str | None = None
    description: str | None = None
    is_active: bool = True


class PartylistIn(PartylistBase):
    """
    Schema for creating/editing a partylist.
    """

    color_hex: str = Field(DEFAULT_PARTYLIST_COLOR, pattern=r"^#[0-9a-fA-F]{6}$")

    @field_validator("name")
    @classmethod
    def check_name(cls, value):
        return _required_name(value)

    @field_validator("acronym", "description")
    @classmethod
    def blank_to_none(cls, value):
        return clean_name(value)


class PartylistOut(PartylistBase):
    id: str


class PartylistDisplay(SSLGSchema):
    """
    Partylist fields embedded in candidate listings.
    """

    id: str
    name: str
    color_hex: str


#  Candidate-related schemas


class CandidateBase(SSLGSchema):
    """
    Basic candidate schema.
    """

    full_name: str
    position: PositionEnum
    partylist_id: str
    target_grade_level: int | None = None


class CandidateIn(CandidateBase):
    """
    Schema for creating/editing a candidate.

    The target grade level only survives for Grade Level Representatives.
    """

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, value):
        return _required_name(value)

    @model_validator(mode="after")
    def normalize_target_grade(self):
        if not self.position.is_grade_level:
            self.target_grade_level = None
        elif self.target_grade_level not in CANDIDATE_GRADE_LEVELS:
            raise ValueError(
                f"Grade Level Representatives need a target grade level in {CANDIDATE_GRADE_LEVELS}"
            )
        return self


class CandidateOut(CandidateBase):
    id: str
    partylist: PartylistDisplay | None = None


#  Student-related schemas


class StudentIn(SSLGSchema):
    """
    Schema for creating/renaming a student.
    """

    full_name: str

    @field_validator("full_name")
    @classmethod
    def check_full_name(cls, value):
        return _required_name(value)


class StudentOut(SSLGSchema):
    id: str
    full_name: str
    section_id: int
    has_voted: bool
    voted_at: datetime | None = None


class RosterStudentOut(StudentOut):
    section: SectionOut | None = None


class SectionStudentsOut(SSLGSchema):
    section: SectionOut
    students: list[StudentOut]
    voted_count: int
    total_count: int


#  Vote-related schemas


class VoteEntry(SSLGSchema):
    """
    A single ballot choice as handed to the vote procedure.
    """

    candidate_id: str
    section_id: int


class ProcessVoteIn(SSLGSchema):
    student_id: str
    votes: list[VoteEntry]


class VoteOutcome(SSLGSchema):
    success: bool
    error: str | None = None


class BallotSubmitIn(SSLGSchema):
    """
    Candidate picks in click order; a later pick for the same slot replaces an earlier one.
    """

    candidate_ids: list[str] = []


#  Gate-related schemas


class PinIn(SSLGSchema):
    pin: str


#  Log-related schemas


class ElectionLogOut(SSLGSchema):
    id: int
    log_level: str
    event: str
    event_params: dict | None = None
    created_at: datetime | None = None

    @field_validator("event_params", mode="before")
    @classmethod
    def parse_params(cls, value):
        return from_json(value)
