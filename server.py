"""
Mwalimu Bot Server - WhatsApp school assistant

FastAPI server with:
- Twilio WhatsApp webhook
- Quiz generation and grading via Claude Agent SDK
- Student/teacher/parent records in JSON files
- Rate limiting (slowapi), CORS
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

import app_state
from core.config import get_config
from core.logger import get_logger, setup_logging
from core.rate_limiter import get_limiter
from routers import api_router, whatsapp_router

config = get_config()
setup_logging(config.log_level)
logger = get_logger("server")


# =============================================================================
# FASTAPI APP
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifecycle."""
    logger.info("=" * 60)
    logger.info("🚀 MWALIMU AI - BACKEND SERVER STARTED")
    logger.info(f"📱 WhatsApp webhook: http://localhost:{config.port}/webhook/whatsapp")
    logger.info(f"🏥 Health check: http://localhost:{config.port}/api/health")
    logger.info(f"⚙️  Config: {config.to_dict()}")
    logger.info("=" * 60)
    yield
    purged = app_state.get_session_store().purge_expired()
    logger.info(f"👋 Shutdown ({purged} quizzes expirados descartados)")
    app_state.reset_state()


app = FastAPI(
    title="Mwalimu Bot",
    description="WhatsApp school assistant: registration, quizzes, grades",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiter
app.state.limiter = get_limiter()
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(whatsapp_router)
app.include_router(api_router)


@app.get("/")
async def root():
    return {
        "status": "ok",
        "message": "Mwalimu AI Backend",
        "environment": config.environment,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.port)
