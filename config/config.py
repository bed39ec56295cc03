import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = """You are Aria, a helpful and creative AI design assistant. You excel at:
- Web design and development advice
- Creating React components and modern UI/UX patterns
- CSS animations and styling best practices
- Email template design
- Frontend performance optimization
- Providing clear, concise, and actionable advice

Keep responses friendly, professional, and formatted with proper markdown when appropriate. Use bullet points and code examples when helpful."""

DEFAULT_SEARXNG_INSTANCES = (
    "https://searx.be",
    "https://search.sapti.me",
    "https://searx.tiekoetter.com",
)


class SearchBackendType(Enum):
    """Supported search backend strategies."""
    LANGSEARCH = "langsearch"
    SEARXNG = "searxng"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


class Config:
    """Configuration loaded once from the environment and passed explicitly to components."""

    def __init__(self, load_env_files: bool = True, **overrides):
        """
        Initialize configuration with environment variables.

        Args:
            load_env_files: Read .env.local and .env from the project root first
            **overrides: Attribute values that take precedence over the environment
                (e.g. ``Config(GROQ_MODEL="llama-3.1-8b-instant")``)
        """
        if load_env_files:
            root = Path(__file__).parent.parent
            for name in (".env.local", ".env"):
                env_path = root / name
                if env_path.exists():
                    load_dotenv(dotenv_path=env_path)

        # Completion backend
        self.GROQ_API_KEY = os.getenv("GROQ_API_KEY")
        self.GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
        self.GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
        self.SYSTEM_PROMPT = (
            os.getenv("CHAT_PROMPT")
            or os.getenv("SYSTEM_PROMPT")
            or os.getenv("GROQ_SYSTEM_PROMPT")
            or DEFAULT_SYSTEM_PROMPT
        )
        self.TEMPERATURE = _env_float("CHAT_TEMPERATURE", 0.7)
        self.TOP_P = _env_float("CHAT_TOP_P", 1.0)
        self.MAX_TOKENS = _env_int("CHAT_MAX_TOKENS", 2048)
        self.COMPLETION_TIMEOUT_S = _env_float("COMPLETION_TIMEOUT_S", 60.0)

        # Search backend
        self.LANGSEARCH_API_KEY = os.getenv("LANGSEARCH_API_KEY")
        self.LANGSEARCH_API_URL = os.getenv(
            "LANGSEARCH_API_URL", "https://api.langsearch.com/v1/web-search"
        )
        # None means "derive after overrides" for the backend and its timeout
        self.SEARCH_BACKEND = (os.getenv("SEARCH_BACKEND") or "").strip() or None

        instances = os.getenv("SEARXNG_INSTANCES")
        if instances:
            self.SEARXNG_INSTANCES = [i.strip().rstrip("/") for i in instances.split(",") if i.strip()]
        else:
            self.SEARXNG_INSTANCES = list(DEFAULT_SEARXNG_INSTANCES)

        raw_timeout = os.getenv("SEARCH_TIMEOUT_MS")
        self.SEARCH_TIMEOUT_MS = int(raw_timeout) if raw_timeout and raw_timeout.strip() else None
        self.TURN_SEARCH_TIMEOUT_MS = _env_int("TURN_SEARCH_TIMEOUT_MS", 5000)

        # Turn API
        self.MAX_HISTORY_MESSAGES = _env_int("MAX_HISTORY_MESSAGES", 20)

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown configuration key: {key}")
            setattr(self, key, value)

        if not self.SEARCH_BACKEND:
            self.SEARCH_BACKEND = (
                SearchBackendType.LANGSEARCH.value
                if self.LANGSEARCH_API_KEY
                else SearchBackendType.SEARXNG.value
            )
        self.SEARCH_BACKEND = self.SEARCH_BACKEND.strip().lower()
        if self.SEARCH_TIMEOUT_MS is None:
            self.SEARCH_TIMEOUT_MS = (
                10000 if self.SEARCH_BACKEND == SearchBackendType.LANGSEARCH.value else 5000
            )

    def validate(self) -> bool:
        """
        Validate that required configuration is present.

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        valid = True
        if not self.GROQ_API_KEY:
            logger.error("GROQ_API_KEY is not set. Please set it in the .env file.")
            valid = False

        backends = [e.value for e in SearchBackendType]
        if self.SEARCH_BACKEND not in backends:
            logger.error(
                f"Unknown SEARCH_BACKEND '{self.SEARCH_BACKEND}'. Must be one of: {', '.join(backends)}"
            )
            valid = False
        elif self.SEARCH_BACKEND == SearchBackendType.LANGSEARCH.value and not self.LANGSEARCH_API_KEY:
            logger.warning("SEARCH_BACKEND is langsearch but LANGSEARCH_API_KEY is not set")
        elif self.SEARCH_BACKEND == SearchBackendType.SEARXNG.value and not self.SEARXNG_INSTANCES:
            logger.warning("SEARCH_BACKEND is searxng but no SEARXNG_INSTANCES are configured")

        return valid

    def get_model_info(self) -> str:
        return f"Groq ({self.GROQ_MODEL}), search via {self.SEARCH_BACKEND}"
