"""FastAPI dependencies for configuration and orchestrator access."""

from config.config import Config
from utils.logger import get_logger

logger = get_logger(__name__)


def get_config() -> Config:
    """Dependency to get the process configuration (loaded once)."""
    if not hasattr(get_config, "_instance"):
        get_config._instance = Config()
    return get_config._instance


def get_orchestrator():
    """Dependency to get orchestrator instance (singleton pattern)."""
    from orchestrator.core import ChatOrchestrator

    if not hasattr(get_orchestrator, "_instance"):
        config = get_config()
        if not config.validate():
            logger.warning("Configuration is incomplete; completion calls may fail")
        get_orchestrator._instance = ChatOrchestrator.from_config(config)
    return get_orchestrator._instance
