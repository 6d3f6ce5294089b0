from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from app.config import USE_ASYNC_ENGINE
from app.database import SessionLocal
from app.sslg.model.cruds import crud


async def get_session() -> Session | AsyncSession:
    """
    Database dependency: allows a single Session per request.
    """
    if USE_ASYNC_ENGINE:
        async with SessionLocal() as session:
            yield session
    else:
        with SessionLocal() as session:
            yield session


async def get_section_or_404(session: Session | AsyncSession, section_id: int):
    section = await crud.get_section_by_id(session=session, section_id=section_id)
    if not section:
        raise HTTPException(status_code=404, detail="Section not found")
    return section


async def get_section_student_or_404(session: Session | AsyncSession, section_id: int, student_id: str):
    student = await crud.get_student_by_id(session=session, student_id=student_id)
    if not student or student.section_id != section_id:
        raise HTTPException(status_code=404, detail="Student not found")
    return student


async def valid_section(section_id: int, session: Session | AsyncSession = Depends(get_session)):
    """
    Path dependency resolving `section_id` to an existing section.
    """
    return await get_section_or_404(session=session, section_id=section_id)
