import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.logging import configure_logging
from app.db.mongo import close_mongo_connection, connect_to_mongo
from app.services.auth_service import AuthService
from app.services.settings_service import SettingsService
from app.utils.validation import BillingError

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.DESCRIPTION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def startup():
    await connect_to_mongo()
    await AuthService.ensure_admin()
    await SettingsService.seed_defaults()


app.add_event_handler("startup", startup)
app.add_event_handler("shutdown", close_mongo_connection)


@app.exception_handler(BillingError)
async def billing_error_handler(request: Request, exc: BillingError):
    logger.warning("Rejected billing input on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME}"}


@app.get("/health")
async def health():
    return {"status": "ok", "environment": settings.ENVIRONMENT}


app.include_router(api_router, prefix=settings.API_V1_STR)
