import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core import config
from app.core.logging_config import setup_logging, sanitize_log_data
from app.api.routes import health, reports

logger = logging.getLogger(__name__)


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Interview Report API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(reports.router)
app.include_router(health.router)


# ============================================
# ✅ STARTUP: LOGGING + SCHEMA
# ============================================

@app.on_event("startup")
def on_startup():
    setup_logging(config.LOG_LEVEL)
    if config.RUN_MIGRATIONS:
        from app.db.migrate import run_migrations
        run_migrations()
    else:
        from app.db.init_db import init_db
        init_db()
    settings = sanitize_log_data({
        "database_url": config.DATABASE_URL,
        "openai_api_key": config.OPENAI_API_KEY,
        "analysis_model": config.ANALYSIS_MODEL,
        "embedding_model": config.EMBEDDING_MODEL,
    })
    logger.info(f"Interview Report API started: {settings}")


@app.get("/")
def root():
    return {"status": "Interview Report API running"}
