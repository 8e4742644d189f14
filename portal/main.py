import sys
import asyncio

# Event loop compatível no Windows (safe em outros SOs também)
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from contextlib import asynccontextmanager
import json
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portal.core.config import settings
from portal.core.logging import configure_logging, get_logger
from portal.api.v1.router import api_router
from portal.db.session import engine
from portal.db.base import Base

# registra as tabelas no metadata
import portal.modules.companies.models  # noqa: F401
import portal.modules.payments.models  # noqa: F401

logger = get_logger(__name__)


def _normalize_origins(value) -> list[str]:
    """Aceita lista, JSON string ou CSV e devolve lista de origens."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(o).strip() for o in value if str(o).strip()]
    if isinstance(value, str):
        # tenta JSON primeiro
        try:
            as_json = json.loads(value)
        except ValueError:
            as_json = None
        if isinstance(as_json, (list, tuple)):
            return [str(o).strip() for o in as_json if str(o).strip()]
        # fallback: CSV
        return [o.strip() for o in value.split(",") if o.strip()]
    return [str(value).strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Configura os logs e, em desenvolvimento, cria as tabelas automaticamente.
    Em produção o schema é responsabilidade das migrations.
    """
    configure_logging()
    env = (settings.ENVIRONMENT or "").lower().strip()
    if env == "dev":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    logger.info("portal.startup", environment=env)
    yield
    await engine.dispose()


# --- App ---
app = FastAPI(title="Portal Agência - Cobranças", lifespan=lifespan)

# --- CORS (colocado ANTES dos routers) ---
origins = _normalize_origins(getattr(settings, "CORS_ORIGINS", None))

if not origins:
    origins = [
        "http://localhost:8080",
        "http://localhost:5173",
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Healthcheck simples
@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


# --- API v1 (só depois do CORS) ---
app.include_router(api_router, prefix=settings.API_V1_PREFIX)
