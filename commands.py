"""
Maintenance commands for the SSLG election database.

    python commands.py reset_db
    python commands.py create_section <name> <grade level>
    python commands.py add_student <section id> <full name>
    python commands.py reset_votes
"""

from app.config import USE_ASYNC_ENGINE
from app.database import Base, engine, db_handler
from app.sslg.model import models  # noqa: F401 registers the tables
from app.sslg.model.cruds import crud
from app.sslg.model.cruds import votes as votes_crud
from app.sslg.model.schemas import schemas
import asyncio
import sys


async def init_models():
    method = sys.argv[1] if len(sys.argv) > 1 else None
    methods = {
        "reset_db": reset_db,
        "create_section": create_section,
        "add_student": add_student,
        "reset_votes": reset_votes,
    }
    if method not in methods:
        print(f"Unknown method: {method}. Available methods: {', '.join(methods.keys())}")
        return

    await methods[method](*sys.argv[2:])


async def reset_db():
    if USE_ASYNC_ENGINE:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    else:
        Base.metadata.drop_all(bind=engine)
        Base.metadata.create_all(bind=engine)
    print("Tables dropped and created again")


@db_handler.func_with_session
async def create_section(session, name: str, grade_level: str):
    section = await crud.create_section(
        session=session, section=schemas.SectionIn(name=name, grade_level=int(grade_level))
    )
    print(f"Section {section.name} (Grade {section.grade_level}) created with id {section.id}")


@db_handler.func_with_session
async def add_student(session, section_id: str, *full_name: str):
    section = await crud.get_section_by_id(session=session, section_id=int(section_id))
    if not section:
        print(f"Section {section_id} not found")
        return

    student = await crud.create_student(
        session=session, section_id=section.id, student=schemas.StudentIn(full_name=" ".join(full_name))
    )
    print(f"Student {student.full_name} added to {section.name} with id {student.id}")


@db_handler.func_with_session
async def reset_votes(session):
    deleted_votes = await votes_crud.reset_votes(session=session)
    print(f"Votes reset successfully ({deleted_votes} votes deleted)")

if __name__ == "__main__":
    asyncio.run(init_models())
