import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskdesk.config.settings import settings
from taskdesk.database import Base, engine
from taskdesk.routers import auth, tasks, notifications, dashboard
from taskdesk.utils import errors

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="TaskDesk API")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Every failure leaves the API as {"success": false, "message": ..., "error"?: ...}
@app.exception_handler(errors.AppError)
async def app_error_handler(request: Request, exc: errors.AppError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, errors.Unauthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = errors.ValidationError("Invalid request data", error=exc.errors())
    return JSONResponse(status_code=error.status_code, content=jsonable_encoder(error.to_dict()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = errors.InternalError("Internal server error", error=str(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Route registration
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
app.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])


@app.on_event("startup")
def startup_event():
    """Create missing tables when the application starts"""
    logger.info("Starting TaskDesk API...")
    Base.metadata.create_all(bind=engine)


# Root route
@app.get("/")
def read_root():
    return {"success": True, "message": "TaskDesk API"}


@app.get("/health")
def health():
    return {"status": "ok"}
