from contextlib import asynccontextmanager

from fastapi import FastAPI

from .sslg.routes import api_router
from .sslg_auth.routes import auth_router

from app.config import USE_ASYNC_ENGINE
from app.database import engine
from app.logger import logger
from app.middleware import register_middlewares


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("SSLG election backend ready (async engine: %s)" % USE_ASYNC_ENGINE)
    yield
    if USE_ASYNC_ENGINE:
        await engine.dispose()
    else:
        engine.dispose()


app = FastAPI(title="SSLG Election", lifespan=lifespan)

app.logger = logger

register_middlewares(app)

# Routes
app.include_router(api_router)
app.include_router(auth_router)
