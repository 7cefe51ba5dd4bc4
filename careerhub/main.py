"""
CareerHub Placement Portal - Main Application

FastAPI backend with:
- MongoDB for profiles and postings (jobs, tests, webinars)
- JWT bearer authentication, the token's email is the acting identity
- Signed direct uploads to the media host

Run: uvicorn careerhub.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from careerhub.api import api_router
from careerhub.core.config import get_settings
from careerhub.core.errors import register_exception_handlers
from careerhub.core.logging_config import configure_logging
from careerhub.db.mongodb import close_mongo_client, init_mongo_indexes, test_mongo_connection

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize MongoDB indexes on startup, close the client on shutdown."""
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning(f"MongoDB index initialization failed: {e}")
    yield
    close_mongo_client()


# Create FastAPI app
app = FastAPI(
    title="CareerHub Placement Portal",
    description="""
    Student placement and career-services API.

    ## Features
    - **Authentication**: JWT bearer tokens, local register/login
    - **Profiles**: academic details and admission batch
    - **Jobs**: structured applications, eligibility by batch, not-interested
    - **Tests / Webinars**: registration and withdrawal
    - **Admin**: posting management and applicant review
    """,
    version="1.0.0",
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "CareerHub Placement Portal"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
