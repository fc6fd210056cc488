from contextlib import asynccontextmanager
import logging

from app.ai.config import load_ai_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    cfg = load_ai_config()
    # The engine client is built on first use so the API starts without provider keys.
    app.state.ai_client = None
    logger.info("cv_analyzer_startup provider=%s model=%s", cfg.provider, cfg.model)
    yield
    app.state.ai_client = None
