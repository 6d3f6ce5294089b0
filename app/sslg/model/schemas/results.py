from app.sslg.model.enums import PositionEnum
from app.sslg.model.schemas.schemas import (
    SSLGSchema,
    CandidateOut,
    PartylistOut,
    RosterStudentOut,
)


class CandidateResult(SSLGSchema):
    candidate: CandidateOut
    vote_count: int
    percentage: float = 0.0


class ResultGroup(SSLGSchema):
    """
    Tallies of one ballot slot, highest count first.
    """
    key: str
    label: str
    position: PositionEnum
    target_grade_level: int | None = None
    total_votes: int
    results: list[CandidateResult]
    leaders: list[CandidateResult]
    is_tie: bool


class ResultsOut(SSLGSchema):
    section_id: int | None = None
    groups: list[ResultGroup]


class QuickWinner(SSLGSchema):
    label: str
    leaders: list[CandidateResult]
    is_tie: bool


class BallotGroup(SSLGSchema):
    key: str
    label: str
    position: PositionEnum
    target_grade_level: int | None = None
    candidates: list[CandidateOut]


class BallotOut(SSLGSchema):
    student: RosterStudentOut
    groups: list[BallotGroup]


class PartylistCandidates(SSLGSchema):
    partylist: PartylistOut
    positions: dict[str, list[CandidateOut]]
    total: int
