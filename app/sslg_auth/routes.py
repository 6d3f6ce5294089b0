from fastapi import APIRouter, HTTPException, Request, Depends

from app.dependencies import valid_section
from app.logger import sslg_logger, logger
from app.sslg.model.enums import ElectionAdminEventEnum
from app.sslg.model.schemas import schemas
from app.sslg_auth import gates

auth_router = APIRouter()


# Admin gate


@auth_router.post("/admin/unlock", status_code=200)
async def unlock_admin(request: Request, pin_in: schemas.PinIn):
    """
    Unlock the admin portal for this browsing session
    """
    if not gates.unlock_admin(request, pin_in.pin):
        logger.warning("%s - Wrong admin PIN" % request.client.host)
        await sslg_logger.warning(event=ElectionAdminEventEnum.ADMIN_PIN_FAIL)
        raise HTTPException(status_code=401, detail=gates.WRONG_PIN_MESSAGE)

    return {"unlocked": True}


@auth_router.post("/admin/lock", status_code=200)
async def lock_admin(request: Request):
    """
    Lock the admin portal again
    """
    gates.lock_admin(request)
    return {"unlocked": False}


@auth_router.get("/admin/status", status_code=200)
async def admin_status(request: Request):
    return {"unlocked": gates.admin_unlocked(request)}


# Facilitator gate


@auth_router.post("/facilitator/{section_id}/unlock", status_code=200)
async def unlock_facilitator(
    request: Request,
    section_id: int,
    pin_in: schemas.PinIn,
    section=Depends(valid_section),
):
    """
    Unlock student management of one section for this browsing session
    """
    if not gates.unlock_facilitator(request, section_id, pin_in.pin):
        logger.warning("%s - Wrong facilitator PIN for section %s" % (request.client.host, section_id))
        await sslg_logger.warning(
            event=ElectionAdminEventEnum.FACILITATOR_PIN_FAIL, section_id=section_id
        )
        raise HTTPException(status_code=401, detail=gates.WRONG_PIN_MESSAGE)

    return {"unlocked": True, "section_id": section.id}


@auth_router.post("/facilitator/{section_id}/lock", status_code=200)
async def lock_facilitator(request: Request, section_id: int):
    gates.lock_facilitator(request, section_id)
    return {"unlocked": False, "section_id": section_id}


@auth_router.get("/facilitator/{section_id}/status", status_code=200)
async def facilitator_status(request: Request, section_id: int):
    return {"unlocked": gates.facilitator_unlocked(request, section_id), "section_id": section_id}
