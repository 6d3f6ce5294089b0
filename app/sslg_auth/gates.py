"""
PIN gates for the admin and facilitator panels.

Both gates compare a typed PIN against a shared value from the config and
keep an unlock flag in the session cookie. The PIN is shared by everyone
who runs the election, so this is a convenience lock for the kiosk, not an
authentication mechanism.
"""

import hmac

from fastapi import HTTPException, Request
from starlette.requests import HTTPConnection

from app.config import ADMIN_PIN, FACILITATOR_PIN

ADMIN_KEY = "sslg-admin-unlocked"
FACILITATOR_KEY = "sslg-facilitator-sections"

WRONG_PIN_MESSAGE = "Incorrect PIN. Try again."


def pin_matches(pin: str, expected: str) -> bool:
    return hmac.compare_digest(pin.encode(), expected.encode())


# ----- Admin gate -----


def unlock_admin(request: Request, pin: str) -> bool:
    if not pin_matches(pin, ADMIN_PIN):
        return False
    request.session[ADMIN_KEY] = True
    return True


def lock_admin(request: Request):
    request.session.pop(ADMIN_KEY, None)


def admin_unlocked(request: HTTPConnection) -> bool:
    return bool(request.session.get(ADMIN_KEY))


# ----- Facilitator gate -----


def unlock_facilitator(request: Request, section_id: int, pin: str) -> bool:
    if not pin_matches(pin, FACILITATOR_PIN):
        return False
    sections = set(request.session.get(FACILITATOR_KEY, []))
    sections.add(section_id)
    request.session[FACILITATOR_KEY] = sorted(sections)
    return True


def lock_facilitator(request: Request, section_id: int):
    sections = [s for s in request.session.get(FACILITATOR_KEY, []) if s != section_id]
    request.session[FACILITATOR_KEY] = sections


def facilitator_unlocked(request: HTTPConnection, section_id: int) -> bool:
    return section_id in request.session.get(FACILITATOR_KEY, [])


class AdminGate(object):
    """
    Dependency that lets a request through only once the admin PIN was
    entered in this session.
    """

    async def __call__(self, request: Request):
        if not admin_unlocked(request):
            raise HTTPException(status_code=403, detail="Admin portal is locked.")
        return True


class FacilitatorGate(object):
    """
    Dependency for the facilitator panel of one section; the admin unlock
    also opens every section.
    """

    async def __call__(self, request: Request, section_id: int):
        if admin_unlocked(request) or facilitator_unlocked(request, section_id):
            return section_id
        raise HTTPException(status_code=403, detail="Facilitator portal is locked for this section.")
