# drivers_service/main.py
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from drivers_service.core.config import settings
from drivers_service.core.logging import setup_logging
from drivers_service.api.v1.routers.drivers import router as drivers_router
from drivers_service.domain.exceptions import DomainError
from drivers_service.infrastructure.db.session import create_schema, engine

from drivers_service.middleware.error_handler import domain_error_handler, http_error_handler
from drivers_service.middleware.request_id import RequestIDMiddleware
from drivers_service.middleware.request_timing import RequestTimingMiddleware

logger = structlog.get_logger("drivers.app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("app.startup", environment=settings.environment)
    if settings.auto_create_schema:
        await create_schema()
        logger.info("app.schema_created")
    yield
    await engine.dispose()
    logger.info("app.shutdown")


setup_logging()
app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",")] if settings.cors_origins else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)
app.add_middleware(RequestTimingMiddleware)

app.include_router(drivers_router)


@app.exception_handler(DomainError)
async def _domain_exc_handler(request: Request, exc: DomainError):
    return await domain_error_handler(request, exc)


@app.exception_handler(StarletteHTTPException)
async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    # the rejected input is not echoed; it may hold NaN, which JSON cannot carry
    errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": jsonable_encoder(errors)})


@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    return await http_error_handler(request, exc)


@app.get("/healthz")
def healthz():
    return {"ok": True}
