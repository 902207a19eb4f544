from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError
from contextlib import asynccontextmanager
from pathlib import Path
import logging

from app.config.settings import settings
from app.core.middleware import verify_token_middleware
from app.db.base import get_engine
from app.db.base import get_session_factory

# -------------------------------------------------------------------------------------
# Logging
# -------------------------------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application start-up & shutdown hooks."""
    # ------------------------------------------------------------------ start‑up -----
    logger.info("Application startup …")

    engine = None
    try:
        logger.info("Initializing Database Engine...")
        engine = await get_engine(
            str(settings.database_url), echo=settings.log_level.upper() == "DEBUG"
        )
        app.state.engine = engine
        app.state.session_factory = await get_session_factory(engine)
        logger.info("DB engine and session factory ready.")
    except Exception as e:
        logger.critical(f"CRITICAL ERROR DURING STARTUP INITIALIZATIONS: {e}", exc_info=True)
        if engine:
            await engine.dispose()
        raise

    yield

    # ------------------------------------------------ shutdown --------
    logger.info("Application shutdown …")
    try:
        await engine.dispose()
        logger.info("DB engine disposed")
    except Exception:
        logger.exception("Error disposing DB engine")

    logger.info("Shutdown complete")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map framework and database errors to the API's error format.

    HTTPException keeps FastAPI's default ``{"detail": ...}`` body.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        logger.info(f"Validation failed on {request.method} {request.url.path}: {errors}")
        return JSONResponse(
            status_code=400,
            content={"detail": "Validation failed", "errors": errors},
        )

    @app.exception_handler(IntegrityError)
    async def handle_integrity_error(request: Request, exc: IntegrityError):
        logger.error(
            f"Unhandled integrity error on {request.method} {request.url.path}: {exc.orig}",
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# -------------------------------------------------------------------------------------
# FastAPI application instance
# -------------------------------------------------------------------------------------
app = FastAPI(title="MedLink API", lifespan=lifespan)

# CORS -------------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(o) for o in settings.cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(verify_token_middleware)

register_exception_handlers(app)


# ----------------------------------------------------------------- health‑check -----
@app.get("/health")
async def health_check():
    return {"status": "ok"}


# ------------------------------------------------------------------- routes ---------
from app.routes.auth.router import router as auth_router  # noqa: E402  (after app creation)
from app.routes.users.router import router as users_router  # noqa: E402
from app.routes.connections.router import router as connections_router  # noqa: E402
from app.routes.posts.router import router as posts_router  # noqa: E402
from app.routes.catalog.router import router as catalog_router  # noqa: E402
from app.routes.documents.router import router as documents_router  # noqa: E402
from app.routes.events.router import router as events_router  # noqa: E402
from app.routes.dashboard.router import router as dashboard_router  # noqa: E402
from app.routes.prescription.router import router as prescription_router  # noqa: E402

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(connections_router)
app.include_router(posts_router)
app.include_router(catalog_router)
app.include_router(documents_router)
app.include_router(events_router)
app.include_router(dashboard_router)
app.include_router(prescription_router)

# Uploaded profile pictures are linked as /uploads/<name>
Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")
