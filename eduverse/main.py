from contextlib import asynccontextmanager
from time import perf_counter

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from eduverse.application.errors import (
    AuthorizationError,
    ConflictError,
    NoOutstandingInvoiceError,
    NotFoundError,
    ValidationError,
)
from eduverse.config import settings
from eduverse.infrastructure.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)
from eduverse.interfaces.api.v1.router import api_router

logger = get_logger(__name__)

OPENAPI_DESCRIPTION = """
School management API for users, classes, notices, invoices, payments and student fee ledgers.

How to call this API:
- Authenticate at `POST /api/v1/auth/token` with email and password.
- Use `Authorization: Bearer <access_token>` in protected endpoints.
- What each role may read or change is decided by its capability set (admin, accountant, teacher, student, ...).
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Service health and connectivity checks."},
    {"name": "auth", "description": "Authentication and token issuance."},
    {"name": "users", "description": "User accounts, roles and class enrollment."},
    {"name": "classes", "description": "Academic classes."},
    {"name": "notices", "description": "Notice board scoped by audience tier."},
    {"name": "invoices", "description": "Fee invoices issued to students."},
    {"name": "payments", "description": "Payments recorded against invoices."},
    {"name": "ledgers", "description": "Per-student totals, balance and fee status."},
]


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    logger.info("app_startup", app_name=settings.app_name, version=settings.app_version)
    yield
    logger.info("app_shutdown", app_name=settings.app_name)


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=OPENAPI_DESCRIPTION,
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url, "http://localhost:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = bind_request_context(
        method=request.method,
        path=request.url.path,
        request_id=request.headers.get("X-Request-ID"),
    )
    started = perf_counter()
    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((perf_counter() - started) * 1000, 2),
        )
        return response
    finally:
        clear_request_context()


@app.get("/")
def root():
    return {"message": "EduVerse school management API is running"}


@app.exception_handler(NotFoundError)
async def handle_not_found(_: Request, exc: NotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(NoOutstandingInvoiceError)
async def handle_no_outstanding_invoice(_: Request, exc: NoOutstandingInvoiceError):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc), "code": "NoOutstandingInvoice"},
    )


@app.exception_handler(ConflictError)
async def handle_conflict(_: Request, exc: ConflictError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(AuthorizationError)
async def handle_forbidden(_: Request, exc: AuthorizationError):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def handle_validation(_: Request, exc: ValidationError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


app.include_router(api_router)
