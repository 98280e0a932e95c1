"""
Tourism AI Service Configuration
Loads settings from environment variables
"""

import os
from typing import List, Optional, Tuple
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment"""

    # LLM Configuration
    # LLM_PROVIDER: "openai", "ollama" or "none" (empty = openai when a key is set)
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "")
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
    OLLAMA_BASE_URL: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    OLLAMA_MODEL: str = os.getenv("OLLAMA_MODEL", "llama3.2")
    LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "20"))
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.7"))
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "1500"))

    # City the platform is built around
    DEFAULT_CITY: str = os.getenv("DEFAULT_CITY", "Encarnación")
    DEFAULT_LAT: float = float(os.getenv("DEFAULT_LAT", "-27.3309"))
    DEFAULT_LNG: float = float(os.getenv("DEFAULT_LNG", "-55.8663"))

    # Recommendation Settings
    MAX_FALLBACK_PLACES: int = int(os.getenv("MAX_FALLBACK_PLACES", "4"))
    MAX_PLAN_DAYS: int = int(os.getenv("MAX_PLAN_DAYS", "14"))
    MAX_PROMPT_PLACES: int = int(os.getenv("MAX_PROMPT_PLACES", "40"))

    # Redis Configuration (conversation history)
    REDIS_ENABLED: bool = os.getenv("REDIS_ENABLED", "true").lower() in ("1", "true", "yes")
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_DB: int = int(os.getenv("REDIS_DB", "0"))
    HISTORY_TTL_HOURS: int = int(os.getenv("HISTORY_TTL_HOURS", "24"))

    # MongoDB Configuration (places)
    MONGO_URI: str = os.getenv("MONGO_URI", "")
    MONGO_DB: str = os.getenv("MONGO_DB", "tourism")
    MONGO_PLACES_COLLECTION: str = os.getenv("MONGO_PLACES_COLLECTION", "places")

    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    API_ENV: str = os.getenv("API_ENV", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Configuration
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list"""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def redis_url(self) -> str:
        """Get Redis connection URL"""
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def city_center(self) -> Tuple[float, float]:
        """Fallback (lat, lng) used for places without usable coordinates"""
        return (self.DEFAULT_LAT, self.DEFAULT_LNG)

    @property
    def openai_key(self) -> Optional[str]:
        """OpenAI key, or None when unset or still the template placeholder"""
        key = self.OPENAI_API_KEY.strip()
        if not key or key.startswith("sk-your"):
            return None
        return key

    @property
    def llm_provider(self) -> str:
        """
        Resolve which generative backend to use

        Returns:
            "openai", "ollama" or "none"
        """
        provider = self.LLM_PROVIDER.strip().lower()
        if provider in ("openai", "ollama", "none"):
            return provider
        return "openai" if self.openai_key else "none"


# Global settings instance
settings = Settings()
