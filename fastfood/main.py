import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fastfood.core.config import ALEMBIC_CONFIG, CORS_ORIGINS, DATABASE_URL, ENV
from fastfood.core.database import Base, engine
from fastfood.core.errors import FastFoodError
from fastfood.core.logging_setup import configure_logging
from fastfood.core.startup_checks import apply_migrations, ensure_migrations_applied, validate_database_environment
from fastfood.middleware.observability import ObservabilityMiddleware
import fastfood.models  # garante que os models são importados antes do create_all
import fastfood.services.event_handlers  # registra handlers do event bus

from fastfood.routers.internal_metrics import router as internal_metrics_router
from fastfood.routers.orders import router as orders_router
from fastfood.routers.payments import router as payments_router

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(ALEMBIC_CONFIG or str(REPO_ROOT / "alembic.ini"))


def _startup_tasks() -> None:
    try:
        validate_database_environment()
        if DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
        else:
            apply_migrations(alembic_config_path=ALEMBIC_CONFIG_PATH)
            ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
        logger.info("%s ready env=%s", STARTUP_PREFIX, ENV)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="Fast Food Ordering API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)


@app.exception_handler(FastFoodError)
async def fastfood_error_handler(request: Request, exc: FastFoodError):
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.http_status, content={"detail": exc.message, "kind": exc.kind})


# Routers
app.include_router(orders_router)
app.include_router(payments_router)
app.include_router(internal_metrics_router)


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
