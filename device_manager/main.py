"""
FastAPI application for the device inventory.

``create_app`` wires settings, the database engine and the device routes;
nothing here is process-global except the ``app`` instance uvicorn loads.
"""
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from .config import Settings, load_settings
from .database import create_db_and_tables, create_db_engine
from .errors import DeviceError, DeviceErrorType
from .logging_config import log_requests, setup_logging
from .routers import devices

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    DeviceErrorType.NOT_FOUND: 404,
    DeviceErrorType.INVALID: 400,
    DeviceErrorType.INTERNAL: 500,
}


async def device_error_handler(request: Request, exc: DeviceError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(exc.kind, 500)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "validation error"
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        detail = " ".join(part for part in (location, errors[0].get("msg", "")) if part)
        if detail:
            message = f"{message}: {detail}"
    logger.warning("%s %s rejected: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"detail": message})


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    if settings is None:
        settings = load_settings()
        settings.validate()
    setup_logging(settings.log_level)

    application = FastAPI(
        title="Device Manager API",
        description="Create, read, update, delete and filter devices",
        version="1.0.0",
    )
    application.state.settings = settings
    application.state.engine = engine if engine is not None else create_db_engine(settings)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.middleware("http")(log_requests)

    application.add_exception_handler(DeviceError, device_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)

    @application.get("/")
    async def root():
        return {"service": settings.app_name, "status": "running"}

    application.include_router(devices.router)

    @application.on_event("startup")
    def on_startup():
        logger.info("%s: starting...", settings.app_name)
        create_db_and_tables(application.state.engine)
        logger.info("%s: ready", settings.app_name)

    @application.on_event("shutdown")
    def on_shutdown():
        logger.info("Gracefully shutting down %s...", settings.app_name)
        application.state.engine.dispose()

    return application


app = create_app()


def run() -> None:
    settings = app.state.settings
    uvicorn.run(
        app,
        host=settings.server_host,
        port=settings.server_port,
        timeout_keep_alive=settings.http_timeout,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
