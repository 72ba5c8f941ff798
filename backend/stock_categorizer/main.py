"""Stock Categorizer - Backend API"""
from contextlib import asynccontextmanager

import requests
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import router as api_router
from .classifiers import build_default_registry
from .config import get_http_config, get_local_model_config
from .orchestrator import CategorizationOrchestrator
from .services.model_service import LocalModelHandle

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire providers on startup and release the HTTP session on shutdown."""
    logger.info("server_starting", version="0.1.0")

    http_config = get_http_config()
    local_config = get_local_model_config()

    # The local model is loaded on first use, not here.
    model_handle = LocalModelHandle(
        model_name=local_config["model_name"],
        top_k=local_config["top_k"],
    )
    session = requests.Session()
    registry = build_default_registry(
        model_handle,
        session=session,
        timeout=http_config["timeout"],
        local_strategy=local_config["strategy"],
        openrouter_referer=http_config["openrouter_referer"],
        openrouter_title=http_config["openrouter_title"],
    )

    app.state.model_handle = model_handle
    app.state.orchestrator = CategorizationOrchestrator(registry)

    yield

    # Cleanup
    session.close()
    model_handle.unload()
    logger.info("server_stopping")


app = FastAPI(
    title="Stock Categorizer",
    description="Adobe Stock category classification across vision providers",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS for local frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(api_router, prefix="/api")
