"""
Tender Evaluation - Configuration Management

Central configuration using Pydantic settings.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMProvider(str, Enum):
    """Supported LLM providers for the crew evaluator."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


class EvaluatorBackend(str, Enum):
    """Where category documents are sent for scoring."""
    HTTP = "http"
    CREW = "crew"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    api_env: str = Field(default="development", description="API environment")
    cors_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="CORS origins (comma-separated)"
    )
    rate_limit_enabled: bool = Field(default=True, description="Enable slowapi rate limits")

    # Database Configuration
    database_url: str = Field(
        default="postgresql+asyncpg://localhost/tender_eval",
        description="Database connection URL"
    )
    database_echo: bool = Field(
        default=False,
        description="Echo SQL queries for debugging"
    )
    database_auto_create: bool = Field(
        default=True,
        description="Create missing tables on startup"
    )

    # File storage
    data_dir: Path = Field(
        default=Path("./data"),
        description="Data directory for uploaded documents and logs"
    )
    public_files_url: str = Field(
        default="http://localhost:8000/files",
        description="Public base URL the uploaded documents are served from"
    )
    max_upload_mb: int = Field(default=25, gt=0, description="Largest accepted upload")

    # JWT Configuration
    jwt_secret: str = Field(
        default="change-this-in-production-use-long-random-string",
        description="JWT signing secret"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT algorithm")
    jwt_expire_minutes: int = Field(default=60, description="Access token expiry")
    jwt_refresh_expire_days: int = Field(default=7, description="Refresh token expiry")
    bcrypt_rounds: int = Field(default=10, ge=4, le=16, description="bcrypt cost factor")

    # External document evaluator
    evaluator_backend: EvaluatorBackend = Field(
        default=EvaluatorBackend.HTTP,
        description="Document evaluator backend"
    )
    evaluator_url: str = Field(
        default="http://localhost:8001",
        description="Base URL of the external evaluation API"
    )
    evaluator_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Evaluator request timeout in seconds"
    )

    # LLM Configuration (crew evaluator only)
    llm_provider: LLMProvider = Field(
        default=LLMProvider.OPENAI,
        description="LLM provider to use"
    )
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API key")
    google_api_key: Optional[str] = Field(default=None, description="Google API key")
    llm_model: Optional[str] = Field(
        default=None,
        description="Model to use (defaults based on provider)"
    )
    llm_temperature: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Model temperature"
    )

    # Copilot workflow
    copilot_workflow_url: Optional[str] = Field(
        default=None,
        description="Chat workflow endpoint the copilot forwards to"
    )
    copilot_api_key: Optional[str] = Field(default=None, description="Copilot workflow API key")
    copilot_timeout: float = Field(default=60.0, gt=0, description="Copilot request timeout")

    # Redis Configuration (Job Queue)
    redis_url: str = Field(
        default="redis://localhost:6379",
        description="Redis connection URL"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def default_model(self) -> str:
        """Get the default model for the active provider."""
        if self.llm_model:
            return self.llm_model

        defaults = {
            LLMProvider.OPENAI: "gpt-4o-mini",
            LLMProvider.ANTHROPIC: "claude-3-5-sonnet-20240620",
            LLMProvider.GEMINI: "gemini-1.5-pro",
        }
        return defaults.get(self.llm_provider, "gpt-4o-mini")

    @property
    def documents_dir(self) -> Path:
        """Directory for uploaded tender and bidder documents."""
        path = self.data_dir / "documents"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def logs_dir(self) -> Path:
        """Directory for log files."""
        path = self.data_dir / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path


# Global settings instance
settings = Settings()
