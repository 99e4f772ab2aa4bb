# pos_api/main.py

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError

from pos_api.api.customers import router as customers_router
from pos_api.api.invoices import router as invoices_router
from pos_api.api.products import router as products_router
from pos_api.api.reports import router as reports_router
from pos_api.config import Settings, get_settings
from pos_api.db.bootstrap import init_database
from pos_api.db.engine import Database
from pos_api.errors import PosError

logger = logging.getLogger(__name__)


async def pos_error_handler(request: Request, exc: PosError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "detail": messages},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.info("Rejected write on %s: %s", request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"error": str(exc.orig)})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = Database(settings.DATABASE_URL, echo=settings.SQL_ECHO).open()
        init_database(db, seed=settings.SEED_SAMPLE_DATA)
        app.state.db = db
        try:
            yield
        finally:
            db.close()

    app = FastAPI(
        title="Point of Sale API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PosError, pos_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(products_router)
    app.include_router(customers_router)
    app.include_router(invoices_router)
    app.include_router(reports_router)

    # Frontend; mounted last so the API routes above take precedence
    static_dir = Path(settings.STATIC_DIR)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.info("Static directory %s not found, frontend not served", static_dir)

    return app


app = create_app()
