import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.db import Base, get_engine, get_sessionmaker
from app.core.errors import FreightError, ServerFault, ValidationError
from app.core.logging import setup_logging
from app.routers.admin import router as admin_router
from app.routers.alerts import router as alerts_router
from app.routers.auth import router as auth_router
from app.routers.clients import router as clients_router
from app.routers.freight_jobs import router as freight_jobs_router
from app.routers.users import router as users_router
from app.routers.vehicles import router as vehicles_router
from app.services.notifications import get_dispatcher
from app.services.seed import seed_admin

# Import models so SQLAlchemy registers them before create_all()
import app.models.user  # noqa: F401
import app.models.vehicle  # noqa: F401
import app.models.client  # noqa: F401
import app.models.freight_job  # noqa: F401
import app.models.event  # noqa: F401
import app.models.alert  # noqa: F401

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging()
    Base.metadata.create_all(bind=get_engine())
    with get_sessionmaker()() as db:
        seed_admin(db)
    logger.info(f"{settings.APP_NAME} started")
    yield
    await get_dispatcher().provider.close()


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FreightError)
async def freight_error_handler(request: Request, exc: FreightError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    body = {"detail": exc.message, "code": exc.code}
    if exc.details:
        body["details"] = exc.details
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={
            "detail": "Invalid input",
            "code": ValidationError.code,
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    detail = f"{type(exc).__name__}: {exc}" if settings.DEBUG else ServerFault.default_message
    return JSONResponse(status_code=ServerFault.status_code, content={"detail": detail, "code": ServerFault.code})


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(vehicles_router)
app.include_router(freight_jobs_router)
app.include_router(clients_router)
app.include_router(alerts_router)
app.include_router(admin_router)


@app.get("/")
def root():
    return {"name": settings.APP_NAME, "docs": "/docs", "health": "/health"}


@app.get("/health")
def health():
    return {"ok": True}
