from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.database import init_db
from app.core.dependencies import PASSWORD_RESET, REGISTRATION, create_verification_store
from app.routers import general, tickets, verification
from app.services.verification_reaper import VerificationReaper

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.VERIFICATION_STORE_BACKEND.lower() == "database":
        init_db()

    stores = {
        REGISTRATION: create_verification_store(REGISTRATION),
        PASSWORD_RESET: create_verification_store(PASSWORD_RESET),
    }
    app.state.verification_stores = stores

    reaper = None
    if settings.VERIFICATION_REAPER_INTERVAL_SECONDS > 0:
        reaper = VerificationReaper(stores.values(), settings.VERIFICATION_REAPER_INTERVAL_SECONDS)
        reaper.start()

    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} started")
    yield

    if reaper is not None:
        await reaper.stop()
    for store in stores.values():
        store.close()
    logger.info(f"{settings.APP_NAME} stopped")


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(general.router)
app.include_router(verification.password_router)
app.include_router(verification.registration_router)
app.include_router(tickets.router)


@app.get("/")
def root():
    return {"status": f"{settings.APP_NAME} running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
