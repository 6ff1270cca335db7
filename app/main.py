from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.api import calendar, clients, dashboard, finance, founder, goals, health
from app.api import lead_batches, leads, recruits, team
from app.api.errors import register_error_handlers
from app.auth.routes import router as auth_router
from app.core.config import CORS_ORIGINS, LOG_LEVEL
from app.middleware.request_logger import RequestLoggerMiddleware
from app.services.bootstrap_db import create_all

# ---- Logging config ---------------------------------------------------------
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s:%(lineno)d - %(message)s",
)
logger = logging.getLogger("nexus.main")
logger.info("Starting Nexus CRM backend with LOG_LEVEL=%s", LOG_LEVEL)

# ---- FastAPI app ------------------------------------------------------------
app = FastAPI(title="Nexus Agency CRM")
app.add_middleware(RequestLoggerMiddleware)

# ---- CORS -------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# ---- Routers ----------------------------------------------------------------
app.include_router(auth_router)                                           # /api/auth/*
app.include_router(leads.router,        prefix="/leads",        tags=["Leads"])
app.include_router(lead_batches.router, prefix="/lead-batches", tags=["Lead Batches"])
app.include_router(clients.router,      prefix="/clients",      tags=["Clients"])
app.include_router(finance.router,      prefix="/finance",      tags=["Finance"])
app.include_router(goals.router,        prefix="/goals",        tags=["Goals"])
app.include_router(calendar.router,                             tags=["Calendar"])  # /tasks, /appointments
app.include_router(dashboard.router,    prefix="/dashboard",    tags=["Dashboard"])
app.include_router(team.router,         prefix="/team",         tags=["Team"])
app.include_router(founder.router,      prefix="/founder",      tags=["Founder"])
app.include_router(recruits.router,     prefix="/recruits",     tags=["Recruits"])
# Health + introspection
app.include_router(health.router,       prefix="/health",       tags=["Health"])

logger.info("Routers registered.")


# ---- Startup ----------------------------------------------------------------
@app.on_event("startup")
def _startup() -> None:
    # Auto-create tables (safe to run repeatedly)
    create_all()
    logger.info("Startup completed.")
