import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .catalog_data import CATALOG_CODES
from .config import get_settings
from .database import init_db, session_scope
from .providers.sql import seed_catalog
from .routers import chart_router, codes_router, procedures_router, teeth_router
from .zones import check_zone_tables

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Dental Chart Engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(teeth_router)
app.include_router(codes_router)
app.include_router(procedures_router)
app.include_router(chart_router)


@app.on_event("startup")
def _startup() -> None:
    check_zone_tables()
    init_db()
    if settings.seed_codes_on_startup:
        with session_scope() as db:
            seed_catalog(db, CATALOG_CODES)
    logger.info("Dental chart engine started")


@app.get("/health")
def health():
    return {"status": "ok"}
