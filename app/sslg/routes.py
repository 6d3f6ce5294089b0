from fastapi import Depends, HTTPException, APIRouter, Request, WebSocket, status
from sqlalchemy.orm import Session
from sqlalchemy.ext.asyncio import AsyncSession
from starlette_context import context

from app.database import db_handler
from app.dependencies import get_session, get_section_or_404, get_section_student_or_404, valid_section
from app.logger import sslg_logger, logger
from app.sslg import tally, utils as sslg_utils
from app.sslg.ballot import Ballot, slot_label
from app.sslg.model.cruds import crud
from app.sslg.model.cruds import votes as votes_crud
from app.sslg.model.enums import ChangeEventEnum, ElectionAdminEventEnum, ElectionPublicEventEnum
from app.sslg.model.schemas import schemas
from app.sslg.model.schemas import results as results_schemas
from app.sslg.realtime import broker, stream_changes
from app.sslg_auth.gates import AdminGate, FacilitatorGate, admin_unlocked, facilitator_unlocked

api_router = APIRouter()


async def get_student_for_ballot(session: Session | AsyncSession, student_id: str):
    student = await crud.get_student_by_id(session=session, student_id=student_id)
    if not student:
        raise HTTPException(status_code=404, detail="Student not found")
    if student.has_voted:
        raise HTTPException(status_code=400, detail="This student has already voted")
    return student


# ----- Public Routes -----


@api_router.get("/sections", response_model=list[schemas.SectionOut], status_code=200)
async def get_sections(session: Session | AsyncSession = Depends(get_session)):
    """
    Sections ordered by grade level and name
    """
    return await crud.get_sections(session=session)


@api_router.get("/sections/{section_id}", response_model=schemas.SectionOut, status_code=200)
async def get_section(section=Depends(valid_section)):
    return section


@api_router.get("/partylists", response_model=list[schemas.PartylistOut], status_code=200)
async def get_partylists(active_only: bool = False, session: Session | AsyncSession = Depends(get_session)):
    return await crud.get_partylists(session=session, active_only=active_only)


@api_router.get("/candidates", response_model=list[schemas.CandidateOut], status_code=200)
async def get_candidates(session: Session | AsyncSession = Depends(get_session)):
    return await crud.get_candidates(session=session)


# ----- Ballot Routes -----


@api_router.get("/ballot/{student_id}", response_model=results_schemas.BallotOut, status_code=200)
async def get_ballot(student_id: str, session: Session | AsyncSession = Depends(get_session)):
    """
    Ballot of a student: eligible candidates grouped by position in ballot order
    """
    student = await get_student_for_ballot(session=session, student_id=student_id)
    candidates = await crud.get_candidates(session=session)
    ballot = Ballot(student, candidates)
    return {"student": student, "groups": ballot.groups}


@api_router.post("/ballot/{student_id}/submit", status_code=200)
async def submit_ballot(
    request: Request,
    student_id: str,
    ballot_in: schemas.BallotSubmitIn,
    session: Session | AsyncSession = Depends(get_session),
):
    """
    Route for casting the ballot of a student
    """
    student = await get_student_for_ballot(session=session, student_id=student_id)
    candidates = await crud.get_candidates(session=session)
    ballot = Ballot(student, candidates)

    try:
        ballot.select_all(ballot_in.candidate_ids)
    except KeyError as e:
        raise HTTPException(status_code=400, detail=f"Candidate {e.args[0]} is not on this ballot")

    if len(ballot.selections) == 0:
        raise HTTPException(status_code=400, detail="Please select at least one candidate")

    section_id = student.section_id
    votes = [schemas.VoteEntry(**vote) for vote in ballot.to_votes()]
    outcome = await votes_crud.process_vote(session=session, student_id=student_id, votes=votes)

    if not outcome.success:
        logger.error("%s - Rejected ballot: %s (%s)" % (request.client.host, student_id, outcome.error))
        await sslg_logger.warning(
            event=ElectionAdminEventEnum.BALLOT_REJECTED, student_id=student_id, error=outcome.error
        )
        raise HTTPException(status_code=400, detail=outcome.error)

    logger.log("SSLG", "%s - Ballot cast: %s (section %s)" % (request.client.host, student_id, section_id))
    await sslg_logger.info(
        event=ElectionPublicEventEnum.BALLOT_CAST,
        student_id=student_id,
        section_id=section_id,
        votes=len(votes),
        forwarded_for=context.get("X-Forwarded-For"),
    )
    await broker.publish("votes", ChangeEventEnum.insert, {"section_id": section_id})
    await broker.publish("students", ChangeEventEnum.update, {"section_id": section_id})

    return {"message": "Vote submitted successfully!", "votes": len(votes)}


@api_router.post("/rpc/process-vote", response_model=schemas.VoteOutcome, status_code=200)
async def process_vote(
    vote_in: schemas.ProcessVoteIn,
    session: Session | AsyncSession = Depends(get_session),
):
    """
    Vote procedure: stores all selections and marks the student as voted, or
    nothing at all. Failures come back as {success: false, error: reason}.
    """
    outcome = await votes_crud.process_vote(
        session=session, student_id=vote_in.student_id, votes=vote_in.votes
    )
    if outcome.success:
        section_ids = {vote.section_id for vote in vote_in.votes}
        for section_id in section_ids:
            await broker.publish("votes", ChangeEventEnum.insert, {"section_id": section_id})
            await broker.publish("students", ChangeEventEnum.update, {"section_id": section_id})
    return outcome


# ----- Results Routes -----


async def compute_results(session: Session | AsyncSession, section_id: int | None):
    if section_id is not None:
        await get_section_or_404(session=session, section_id=section_id)

    candidates = await crud.get_candidates(session=session)
    votes = await crud.get_votes(session=session, section_id=section_id)
    return tally.group_results(candidates, votes)


@api_router.get("/results", response_model=results_schemas.ResultsOut, status_code=200)
async def get_results(section_id: int | None = None, session: Session | AsyncSession = Depends(get_session)):
    """
    Vote counts per candidate, overall or for one section
    """
    groups = await compute_results(session=session, section_id=section_id)
    return {"section_id": section_id, "groups": groups}


@api_router.get("/results/winners", response_model=list[results_schemas.QuickWinner], status_code=200)
async def get_quick_winners(section_id: int | None = None, session: Session | AsyncSession = Depends(get_session)):
    groups = await compute_results(session=session, section_id=section_id)
    return tally.quick_winners(groups)


@api_router.websocket("/ws/results")
async def results_changes(websocket: WebSocket, section_id: int | None = None):
    filters = {"section_id": section_id} if section_id is not None else {}
    await websocket.accept()
    subscription = broker.subscribe("votes", **filters)
    await stream_changes(websocket, subscription)


# ----- Admin Routes -----


@api_router.post("/admin/create-section", response_model=schemas.SectionOut, status_code=201)
async def create_section(
    section_in: schemas.SectionIn,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    section = await crud.create_section(session=session, section=section_in)
    await broker.publish("sections", ChangeEventEnum.insert, {"id": section.id})
    return section


@api_router.post("/admin/edit-section/{section_id}", response_model=schemas.SectionOut, status_code=200)
async def edit_section(
    section_id: int,
    section_in: schemas.SectionIn,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    await get_section_or_404(session=session, section_id=section_id)
    section = await crud.edit_section(session=session, section_id=section_id, section=section_in)
    await broker.publish("sections", ChangeEventEnum.update, {"id": section_id})
    return section


@api_router.post("/admin/delete-section/{section_id}", status_code=200)
async def delete_section(
    section_id: int,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    section = await get_section_or_404(session=session, section_id=section_id)
    await crud.delete_section(session=session, section_id=section_id)
    await sslg_logger.warning(
        event=ElectionPublicEventEnum.SECTION_DELETED, section_id=section_id, name=section.name
    )
    await broker.publish("sections", ChangeEventEnum.delete, {"id": section_id})
    return {"message": "Section deleted"}


@api_router.post("/admin/create-partylist", response_model=schemas.PartylistOut, status_code=201)
async def create_partylist(
    partylist_in: schemas.PartylistIn,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    if await crud.get_partylist_by_name(session=session, name=partylist_in.name):
        raise HTTPException(status_code=409, detail="The partylist already exists.")

    partylist = await crud.create_partylist(session=session, partylist=partylist_in)
    await broker.publish("partylists", ChangeEventEnum.insert, {"id": partylist.id})
    return partylist


@api_router.post("/admin/edit-partylist/{partylist_id}", response_model=schemas.PartylistOut, status_code=200)
async def edit_partylist(
    partylist_id: str,
    partylist_in: schemas.PartylistIn,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    if not await crud.get_partylist_by_id(session=session, partylist_id=partylist_id):
        raise HTTPException(status_code=404, detail="Partylist not found")

    same_name = await crud.get_partylist_by_name(session=session, name=partylist_in.name)
    if same_name and same_name.id != partylist_id:
        raise HTTPException(status_code=409, detail="The partylist already exists.")

    partylist = await crud.edit_partylist(session=session, partylist_id=partylist_id, partylist=partylist_in)
    await broker.publish("partylists", ChangeEventEnum.update, {"id": partylist_id})
    return partylist


@api_router.post("/admin/delete-partylist/{partylist_id}", status_code=200)
async def delete_partylist(
    partylist_id: str,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    partylist = await crud.get_partylist_by_id(session=session, partylist_id=partylist_id)
    if not partylist:
        raise HTTPException(status_code=404, detail="Partylist not found")

    await crud.delete_partylist(session=session, partylist_id=partylist_id)
    await sslg_logger.warning(
        event=ElectionPublicEventEnum.PARTYLIST_DELETED, partylist_id=partylist_id, name=partylist.name
    )
    await broker.publish("partylists", ChangeEventEnum.delete, {"id": partylist_id})
    return {"message": "Partylist deleted"}


async def check_candidate_slot(session: Session | AsyncSession, candidate_in: schemas.CandidateIn, candidate_id: str = None):
    """
    Blocks a candidate form whose partylist/position/target grade slot is
    already taken by someone else.
    """
    partylist = await crud.get_partylist_by_id(session=session, partylist_id=candidate_in.partylist_id)
    if not partylist:
        raise HTTPException(status_code=404, detail="Partylist not found")

    conflict = await crud.get_conflicting_candidate(
        session=session, candidate=candidate_in, exclude_id=candidate_id
    )
    if conflict:
        label = slot_label(candidate_in.position, candidate_in.target_grade_level)
        await sslg_logger.info(
            event=ElectionAdminEventEnum.CANDIDATE_CONFLICT,
            partylist_id=partylist.id,
            slot=label,
            existing_candidate_id=conflict.id,
        )
        raise HTTPException(
            status_code=409,
            detail=(
                f"{partylist.name} already has a candidate for {label}: {conflict.full_name}. "
                "Please edit the existing candidate instead."
            ),
        )


@api_router.post("/admin/create-candidate", response_model=schemas.CandidateOut, status_code=201)
async def create_candidate(
    candidate_in: schemas.CandidateIn,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    """
    Admin's route for adding a candidate to a partylist
    """
    await check_candidate_slot(session=session, candidate_in=candidate_in)
    candidate = await crud.create_candidate(session=session, candidate=candidate_in)
    await broker.publish("candidates", ChangeEventEnum.insert, {"id": candidate.id})
    return candidate


@api_router.post("/admin/edit-candidate/{candidate_id}", response_model=schemas.CandidateOut, status_code=200)
async def edit_candidate(
    candidate_id: str,
    candidate_in: schemas.CandidateIn,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    if not await crud.get_candidate_by_id(session=session, candidate_id=candidate_id):
        raise HTTPException(status_code=404, detail="Candidate not found")

    await check_candidate_slot(session=session, candidate_in=candidate_in, candidate_id=candidate_id)
    candidate = await crud.edit_candidate(session=session, candidate_id=candidate_id, candidate=candidate_in)
    await broker.publish("candidates", ChangeEventEnum.update, {"id": candidate_id})
    return candidate


@api_router.post("/admin/delete-candidate/{candidate_id}", status_code=200)
async def delete_candidate(
    candidate_id: str,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    candidate = await crud.get_candidate_by_id(session=session, candidate_id=candidate_id)
    if not candidate:
        raise HTTPException(status_code=404, detail="Candidate not found")

    await crud.delete_candidate(session=session, candidate_id=candidate_id)
    await sslg_logger.warning(
        event=ElectionPublicEventEnum.CANDIDATE_DELETED, candidate_id=candidate_id, name=candidate.full_name
    )
    await broker.publish("candidates", ChangeEventEnum.delete, {"id": candidate_id})
    return {"message": "Candidate deleted"}


@api_router.get(
    "/admin/candidates-by-partylist", response_model=list[results_schemas.PartylistCandidates], status_code=200
)
async def get_candidates_by_partylist(
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    partylists = await crud.get_partylists(session=session)
    candidates = await crud.get_candidates(session=session)
    return sslg_utils.group_by_partylist(partylists, candidates)


@api_router.get("/admin/students", response_model=list[schemas.RosterStudentOut], status_code=200)
async def get_student_roster(
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    """
    Every student with their section and voting status
    """
    return await crud.get_students(session=session)


@api_router.post("/admin/reset-votes", status_code=200)
async def reset_votes(
    request: Request,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    """
    Deletes all votes and reopens the ballot for every student
    """
    deleted_votes = await votes_crud.reset_votes(session=session)
    logger.warning("%s - Votes reset (%s votes deleted)" % (request.client.host, deleted_votes))
    await sslg_logger.warning(event=ElectionPublicEventEnum.VOTES_RESET, deleted_votes=deleted_votes)
    await broker.publish("votes", ChangeEventEnum.delete)
    await broker.publish("students", ChangeEventEnum.update)
    return {"message": "Votes reset", "deleted_votes": deleted_votes}


@api_router.get("/admin/logs", response_model=list[schemas.ElectionLogOut], status_code=200)
async def get_logs(
    event: str | None = None,
    _: bool = Depends(AdminGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    if event is not None and not (
        ElectionPublicEventEnum.has_member_key(event) or ElectionAdminEventEnum.has_member_key(event)
    ):
        raise HTTPException(status_code=400, detail=f"Unknown log event: {event}")

    return await crud.get_logs(session=session, event=event)


# ----- Facilitator Routes -----


@api_router.get(
    "/facilitator/{section_id}/students", response_model=schemas.SectionStudentsOut, status_code=200
)
async def get_section_students(
    section_id: int = Depends(FacilitatorGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    section = await get_section_or_404(session=session, section_id=section_id)
    students = await crud.get_students_by_section_id(session=session, section_id=section_id)
    return {
        "section": section,
        "students": students,
        "voted_count": len([s for s in students if s.has_voted]),
        "total_count": len(students),
    }


@api_router.post(
    "/facilitator/{section_id}/create-student", response_model=schemas.StudentOut, status_code=201
)
async def create_student(
    student_in: schemas.StudentIn,
    section_id: int = Depends(FacilitatorGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    await get_section_or_404(session=session, section_id=section_id)
    student = await crud.create_student(session=session, section_id=section_id, student=student_in)
    await broker.publish("students", ChangeEventEnum.insert, {"section_id": section_id})
    return student


@api_router.post(
    "/facilitator/{section_id}/edit-student/{student_id}", response_model=schemas.StudentOut, status_code=200
)
async def edit_student(
    student_id: str,
    student_in: schemas.StudentIn,
    section_id: int = Depends(FacilitatorGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    await get_section_student_or_404(session=session, section_id=section_id, student_id=student_id)
    student = await crud.edit_student(
        session=session, student_id=student_id, fields={"full_name": student_in.full_name}
    )
    await broker.publish("students", ChangeEventEnum.update, {"section_id": section_id})
    return student


@api_router.post("/facilitator/{section_id}/delete-student/{student_id}", status_code=200)
async def delete_student(
    student_id: str,
    section_id: int = Depends(FacilitatorGate()),
    session: Session | AsyncSession = Depends(get_session),
):
    student = await get_section_student_or_404(session=session, section_id=section_id, student_id=student_id)
    if student.has_voted:
        raise HTTPException(status_code=400, detail="Cannot delete a student who has already voted")

    await crud.delete_student(session=session, student_id=student_id)
    await sslg_logger.warning(
        event=ElectionPublicEventEnum.STUDENT_DELETED, student_id=student_id, section_id=section_id
    )
    await broker.publish("students", ChangeEventEnum.delete, {"section_id": section_id})
    return {"message": "Student deleted"}


@db_handler.func_with_session
async def section_exists(session, section_id: int) -> bool:
    return await crud.get_section_by_id(session=session, section_id=section_id) is not None


@api_router.websocket("/ws/facilitator/{section_id}")
async def section_students_changes(websocket: WebSocket, section_id: int):
    """
    Roster change notifications of one section, behind the facilitator gate
    """
    if not await section_exists(section_id) or not (
        admin_unlocked(websocket) or facilitator_unlocked(websocket, section_id)
    ):
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    subscription = broker.subscribe("students", section_id=section_id)
    await stream_changes(websocket, subscription)
