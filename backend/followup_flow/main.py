"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from followup_flow.config import settings
from followup_flow.api import health, prospects, follow_ups, gamification, suggestions
from followup_flow.api.deps import get_locks, get_repositories, get_text_generator
from followup_flow.middleware.auth import create_access_token
from followup_flow.services.prospects import backfill_derived_state

# Configure structured logging
structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.ConsoleRenderer() if settings.debug else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(0),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One awaited pass over every user's prospects before serving requests
    prospect_repo, follow_up_repo = get_repositories()
    await backfill_derived_state(prospect_repo, follow_up_repo, get_text_generator(), get_locks())
    yield


app = FastAPI(
    title=settings.app_name,
    description="Sales prospect follow-up tracking with AI suggestions",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS - allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(health.router, prefix=settings.api_prefix)
app.include_router(prospects.router, prefix=settings.api_prefix)
app.include_router(follow_ups.router, prefix=settings.api_prefix)
app.include_router(gamification.router, prefix=settings.api_prefix)
app.include_router(suggestions.router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
    }


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str
    email: str


@app.post(f"{settings.api_prefix}/auth/login", response_model=LoginResponse)
async def login(req: LoginRequest):
    """Local login standing in for the identity provider. Returns a JWT."""
    if req.email == settings.admin_email and req.password == settings.admin_password:
        token = create_access_token(req.email)
        return LoginResponse(token=token, email=req.email)
    raise HTTPException(status_code=401, detail="Invalid credentials")
