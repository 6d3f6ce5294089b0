"""
Vote procedure for SSLG.

process_vote is the only write path for ballots: either every vote row is
stored and the student is marked as voted, or nothing is.

18/10/2026
"""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session
from sqlalchemy import update, delete

from app.database import db_handler
from app.logger import logger
from app.sslg import ballot, utils
from app.sslg.model import models
from app.sslg.model.cruds import crud
from app.sslg.model.enums import VoteErrorEnum
from app.sslg.model.schemas.schemas import VoteEntry, VoteOutcome


def _rejected(error: VoteErrorEnum) -> VoteOutcome:
    return VoteOutcome(success=False, error=error.value)


async def check_votes(session: Session | AsyncSession, student: models.Student, votes: list[VoteEntry]):
    """
    Validates the selections against the student; returns the first
    problem found or None.
    """
    if any(entry.section_id != student.section_id for entry in votes):
        return VoteErrorEnum.section_mismatch

    candidates = await crud.get_candidates_by_ids(
        session=session, candidate_ids=[entry.candidate_id for entry in votes]
    )
    candidates = {c.id: c for c in candidates}

    slots = set()
    for entry in votes:
        candidate = candidates.get(entry.candidate_id)
        if candidate is None:
            return VoteErrorEnum.invalid_candidate
        if not ballot.is_eligible(candidate, student.section.grade_level):
            return VoteErrorEnum.ineligible_candidate

        key = ballot.candidate_slot_key(candidate)
        if key in slots:
            return VoteErrorEnum.duplicate_position
        slots.add(key)

    return None


async def process_vote(session: Session | AsyncSession, student_id: str, votes: list[VoteEntry]) -> VoteOutcome:
    if not votes:
        return _rejected(VoteErrorEnum.no_votes)

    student = await crud.get_student_by_id(session=session, student_id=student_id)
    if student is None:
        return _rejected(VoteErrorEnum.student_not_found)
    if student.has_voted:
        return _rejected(VoteErrorEnum.already_voted)

    error = await check_votes(session=session, student=student, votes=votes)
    if error is not None:
        return _rejected(error)

    try:
        # Only one concurrent submission can flip the flag
        query = update(models.Student).where(
            models.Student.id == student_id,
            models.Student.has_voted.is_(False),
        ).values(has_voted=True, voted_at=utils.tz_now())
        result = await db_handler.execute(session, query)
        if result.rowcount != 1:
            await db_handler.rollback(session)
            return _rejected(VoteErrorEnum.already_voted)

        db_handler.add_all(session, [
            models.Vote(candidate_id=entry.candidate_id, section_id=entry.section_id)
            for entry in votes
        ])
        await db_handler.commit(session)

    except SQLAlchemyError:
        await db_handler.rollback(session)
        logger.exception("Vote procedure failed for student %s" % student_id)
        return _rejected(VoteErrorEnum.internal_error)

    return VoteOutcome(success=True)


async def reset_votes(session: Session | AsyncSession) -> int:
    """
    Deletes every vote row and clears the voted flag of every student.
    """
    total_votes = await crud.count_votes(session=session)
    try:
        await db_handler.execute(session, delete(models.Vote))
        await db_handler.execute(
            session, update(models.Student).values(has_voted=False, voted_at=None)
        )
        await db_handler.commit(session)
    except SQLAlchemyError:
        await db_handler.rollback(session)
        raise

    return total_votes
