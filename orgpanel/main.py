# orgpanel/main.py
"""
OrgPanel - Main FastAPI Application

Multi-tenant administration of companies, departments and user accounts.
Features:
- JWT bearer sign-in
- Role and tenant scoped administrative actions
- Company archive / restore / delete lifecycle with a 30-day grace period
- Audit logging
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orgpanel.core.config import APP_DEBUG, APP_HOST, APP_PORT, CORS_ORIGINS
from orgpanel.core.database import init_db, test_connection
from orgpanel.core.logger import get_logger
from orgpanel.middleware import add_request_id_middleware, register_error_handlers
from orgpanel.routes import include_routes

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if test_connection():
        init_db()
    else:
        logger.warning("Database unavailable at startup; tables were not initialized")
    yield


# ==================== FASTAPI APPLICATION ====================

app = FastAPI(
    title="OrgPanel",
    description="Account and organization administration for companies, departments and users",
    version="1.0.0",
    lifespan=lifespan,
)

# ==================== MIDDLEWARE SETUP ====================

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(add_request_id_middleware)

# ==================== ERROR HANDLERS ====================

register_error_handlers(app)

# ==================== ROUTE REGISTRATION ====================

include_routes(app)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "orgpanel",
        "version": app.version,
    }


def run():
    """Console entry point"""
    uvicorn.run("orgpanel.main:app", host=APP_HOST, port=APP_PORT, reload=APP_DEBUG)


if __name__ == "__main__":
    run()
