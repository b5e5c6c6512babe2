import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from starlette.middleware.cors import CORSMiddleware

from staffdir.api.auth import router as auth_router
from staffdir.api.employees import router as employees_router
from staffdir.api.leaves import router as leaves_router
from staffdir.api.users import router as users_router
from staffdir.core.config import settings
from staffdir.core.db import init_db
from staffdir.core.exceptions import DirectoryError, StorageUnavailable
from staffdir.core.logging_setup import configure_logging

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_TITLE,
    version="0.1.0",
    description="Employee directory admin service (REST + MySQL + SQLAlchemy)",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)


@app.exception_handler(DirectoryError)
async def directory_error_handler(request: Request, exc: DirectoryError) -> JSONResponse:
    body = {"message": exc.message, "code": exc.code}
    if exc.field_errors:
        body["fieldErrors"] = exc.field_errors

    headers = None
    if exc.status_code == 401:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # 재시도는 호출한 쪽 판단. 여기서는 503 으로만 알린다
    logger.error(
        "Storage failure on %s %s", request.method, request.url.path, exc_info=exc
    )
    return await directory_error_handler(request, StorageUnavailable())


app.add_exception_handler(OperationalError, storage_error_handler)
app.add_exception_handler(InterfaceError, storage_error_handler)
app.add_exception_handler(PoolTimeoutError, storage_error_handler)


@app.on_event("startup")
async def on_startup() -> None:
    # MySQL에 employees / leave_entries / users 테이블 생성
    await init_db()
    logger.info("Database schema verified")


@app.get("/api/health")
async def health_check():
    return {
        "status": "ok",
        "service": "directory-service",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/")
async def root():
    return {
        "message": "Directory Service is running",
        "docs": "/docs",
    }

# leave 라우터가 employees 보다 먼저 (/api/employees/leave vs /api/employees/{id})
app.include_router(auth_router)
app.include_router(leaves_router)
app.include_router(employees_router)
app.include_router(users_router)
