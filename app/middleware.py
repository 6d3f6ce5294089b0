from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette_context import context, middleware, plugins

from app.config import SECRET_KEY, ORIGINS
from app.logger import logger


async def bind_request_context(request: Request, call_next):
    """
    Tags every log line written while serving the request with its id and method.
    """
    with logger.contextualize(request_id=context.get("X-Request-ID"), method=request.method):
        return await call_next(request)


def register_middlewares(app):
    # Session cookie holds the gate unlock flags for the browsing session
    app.add_middleware(SessionMiddleware, secret_key=SECRET_KEY, max_age=None)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(BaseHTTPMiddleware, dispatch=bind_request_context)

    # Outermost, so the request id exists before the log context is bound
    app.add_middleware(
        middleware.ContextMiddleware,
        plugins=(
            plugins.RequestIdPlugin(),
            plugins.ForwardedForPlugin(),
        ),
    )
