"""
CRUD utils for SSLG
(Create - Read - Update - delete)

18/10/2026
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session
from sqlalchemy import select, update, delete, func

from app.sslg.model import models
from app.sslg.model.schemas import schemas
from app.database import db_handler


# ----- Section CRUD Utils -----


async def get_sections(session: Session | AsyncSession):
    query = select(models.Section).order_by(models.Section.grade_level, models.Section.name)
    result = await db_handler.execute(session, query)
    return result.scalars().all()


async def get_section_by_id(session: Session | AsyncSession, section_id: int):
    query = select(models.Section).where(models.Section.id == section_id)
    result = await db_handler.execute(session, query)
    return result.scalars().first()


async def create_section(session: Session | AsyncSession, section: schemas.SectionIn):
    db_section = models.Section(**section.model_dump())
    db_handler.add(session, db_section)
    await db_handler.commit(session)
    await db_handler.refresh(session, db_section)
    return db_section


async def edit_section(session: Session | AsyncSession, section_id: int, section: schemas.SectionIn):
    query = update(models.Section).where(
        models.Section.id == section_id
    ).values(section.model_dump())
    await db_handler.execute(session, query)
    await db_handler.commit(session)

    db_section = await get_section_by_id(session=session, section_id=section_id)
    await db_handler.refresh(session, db_section)
    return db_section


async def delete_section(session: Session | AsyncSession, section_id: int):
    query = delete(models.Section).where(models.Section.id == section_id)
    await db_handler.execute(session, query)
    await db_handler.commit(session)


# ----- Partylist CRUD Utils -----


async def get_partylists(session: Session | AsyncSession, active_only: bool = False):
    query = select(models.Partylist).order_by(models.Partylist.name)
    if active_only:
        query = query.where(models.Partylist.is_active.is_(True))
    result = await db_handler.execute(session, query)
    return result.scalars().all()


async def get_partylist_by_id(session: Session | AsyncSession, partylist_id: str):
    query = select(models.Partylist).where(models.Partylist.id == partylist_id)
    result = await db_handler.execute(session, query)
    return result.scalars().first()


async def get_partylist_by_name(session: Session | AsyncSession, name: str):
    query = select(models.Partylist).where(models.Partylist.name == name)
    result = await db_handler.execute(session, query)
    return result.scalars().first()


async def create_partylist(session: Session | AsyncSession, partylist: schemas.PartylistIn):
    db_partylist = models.Partylist(**partylist.model_dump())
    db_handler.add(session, db_partylist)
    await db_handler.commit(session)
    await db_handler.refresh(session, db_partylist)
    return db_partylist


async def edit_partylist(session: Session | AsyncSession, partylist_id: str, partylist: schemas.PartylistIn):
    query = update(models.Partylist).where(
        models.Partylist.id == partylist_id
    ).values(partylist.model_dump())
    await db_handler.execute(session, query)
    await db_handler.commit(session)

    db_partylist = await get_partylist_by_id(session=session, partylist_id=partylist_id)
    await db_handler.refresh(session, db_partylist)
    return db_partylist


async def delete_partylist(session: Session | AsyncSession, partylist_id: str):
    query = delete(models.Partylist).where(models.Partylist.id == partylist_id)
    await db_handler.execute(session, query)
    await db_handler.commit(session)


# ----- Candidate CRUD Utils -----


async def get_candidates(session: Session | AsyncSession):
    query = select(models.Candidate).order_by(models.Candidate.position, models.Candidate.full_name)
    result = await db_handler.execute(session, query)
    return result.scalars().all()


async def get_candidate_by_id(session: Session | AsyncSession, candidate_id: str):
    query = select(models.Candidate).where(models.Candidate.id == candidate_id)
    result = await db_handler.execute(session, query)
    return result.scalars().first()


async def get_candidates_by_ids(session: Session | AsyncSession, candidate_ids: list[str]):
    query = select(models.Candidate).where(models.Candidate.id.in_(candidate_ids))
    result = await db_handler.execute(session, query)
    return result.scalars().all()


async def get_conflicting_candidate(session: Session | AsyncSession, candidate: schemas.CandidateIn, exclude_id: str = None):
    """
    Returns the candidate already holding the partylist/position/target grade
    slot that `candidate` wants, if any.
    """
    query = select(models.Candidate).where(
        models.Candidate.partylist_id == candidate.partylist_id,
        models.Candidate.position == candidate.position,
    )
    if candidate.position.is_grade_level:
        query = query.where(models.Candidate.target_grade_level == candidate.target_grade_level)
    if exclude_id is not None:
        query = query.where(models.Candidate.id != exclude_id)
    result = await db_handler.execute(session, query)
    return result.scalars().first()


async def create_candidate(session: Session | AsyncSession, candidate: schemas.CandidateIn):
    db_candidate = models.Candidate(**candidate.model_dump())
    db_handler.add(session, db_candidate)
    await db_handler.commit(session)
    await db_handler.refresh(session, db_candidate)
    return db_candidate


async def edit_candidate(session: Session | AsyncSession, candidate_id: str, candidate: schemas.CandidateIn):
    query = update(models.Candidate).where(
        models.Candidate.id == candidate_id
    ).values(candidate.model_dump())
    await db_handler.execute(session, query)
    await db_handler.commit(session)

    db_candidate = await get_candidate_by_id(session=session, candidate_id=candidate_id)
    await db_handler.refresh(session, db_candidate)
    return db_candidate


async def delete_candidate(session: Session | AsyncSession, candidate_id: str):
    query = delete(models.Candidate).where(models.Candidate.id == candidate_id)
    await db_handler.execute(session, query)
    await db_handler.commit(session)


# ----- Student CRUD Utils -----


async def get_students(session: Session | AsyncSession):
    query = select(models.Student).order_by(models.Student.full_name)
    result = await db_handler.execute(session, query)
    return result.scalars().all()


async def get_students_by_section_id(session: Session | AsyncSession, section_id: int):
    query = select(models.Student).where(
        models.Student.section_id == section_id
    ).order_by(models.Student.full_name)
    result = await db_handler.execute(session, query)
    return result.scalars().all()


async def get_student_by_id(session: Session | AsyncSession, student_id: str):
    query = select(models.Student).where(models.Student.id == student_id)
    result = await db_handler.execute(session, query)
    return result.scalars().first()


async def create_student(session: Session | AsyncSession, section_id: int, student: schemas.StudentIn):
    db_student = models.Student(section_id=section_id, **student.model_dump())
    db_handler.add(session, db_student)
    await db_handler.commit(session)
    await db_handler.refresh(session, db_student)
    return db_student


async def edit_student(session: Session | AsyncSession, student_id: str, fields: dict):
    query = update(models.Student).where(
        models.Student.id == student_id
    ).values(fields)
    await db_handler.execute(session, query)
    await db_handler.commit(session)

    db_student = await get_student_by_id(session=session, student_id=student_id)
    await db_handler.refresh(session, db_student)
    return db_student


async def delete_student(session: Session | AsyncSession, student_id: str):
    query = delete(models.Student).where(models.Student.id == student_id)
    await db_handler.execute(session, query)
    await db_handler.commit(session)


# ----- Vote CRUD Utils -----


async def get_votes(session: Session | AsyncSession, section_id: int = None):
    query = select(models.Vote.candidate_id, models.Vote.section_id)
    if section_id is not None:
        query = query.where(models.Vote.section_id == section_id)
    result = await db_handler.execute(session, query)
    return result.all()


async def count_votes(session: Session | AsyncSession):
    query = select(func.count(models.Vote.id))
    result = await db_handler.execute(session, query)
    return result.scalar()


# ----- ElectionLog CRUD Utils -----


async def log_to_db(session: Session | AsyncSession, log_level: str, event: str, event_params: str):
    db_log = models.ElectionLog(
        log_level=log_level,
        event=event,
        event_params=event_params,
    )
    db_handler.add(session, db_log)
    await db_handler.commit(session)
    await db_handler.refresh(session, db_log)
    return db_log


async def get_logs(session: Session | AsyncSession, event: str = None):
    query = select(models.ElectionLog).order_by(models.ElectionLog.id)
    if event is not None:
        query = query.where(models.ElectionLog.event == event)
    result = await db_handler.execute(session, query)
    return result.scalars().all()
