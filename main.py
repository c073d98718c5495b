from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from prm.api.v1 import leads, partners
from prm.api.health import router as health_router
from prm.core.config import settings
from prm.core.database import engine, init_db
from prm.core.logging import setup_logging, get_logger
from prm.core.middleware import RequestLoggingMiddleware, ErrorHandlingMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    # Startup - create tables
    try:
        await init_db()
    except Exception as e:
        logger.warning("table_creation_failed", error=str(e))

    yield

    # Shutdown
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Partner relationship management - lead lifecycle and partner performance scoring",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)
app.state.debug = settings.DEBUG

Instrumentator().instrument(app).expose(app)

# Add middleware (order matters - last added = first executed)
app.add_middleware(ErrorHandlingMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(partners.router, prefix="/api/v1/partners", tags=["partners"])
app.include_router(leads.router, prefix="/api/v1/leads", tags=["leads"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
