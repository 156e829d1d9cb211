from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from approval_service.api.routes import health
from approval_service.core.config import settings
from approval_service.core.monitoring import configure_error_monitoring
from approval_service.core.observability import configure_observability
from approval_service.db.session import init_db
from approval_service.domains.auth.router import router as auth_router
from approval_service.domains.supervisors.router import router as supervisors_router
from approval_service.domains.timesheets.router import router as timesheets_router
from timecard.core.logging import configure_logging, get_logger

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("startup_complete", env=settings.env)
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth_router)
app.include_router(supervisors_router)
app.include_router(timesheets_router)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    logger.info("request_invalid", path=request.url.path, field=field, error=message)
    return JSONResponse(
        status_code=422,
        content={"success": False, "error": f"{field}: {message}" if field else message},
    )


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Timesheet approval API running", "environment": settings.env}
