"""
Configuration management for the OData client
"""

from pathlib import Path
from typing import Optional, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

AUTHORITY_HOST = "https://login.microsoftonline.com"


class Settings(BaseSettings):
    """Client settings loaded from ODATA_* environment variables"""

    # Endpoint (Required)
    base_url: str
    odata_url_suffix: str = "api/data/v9.2/"

    # Authentication selection
    auth_provider: Literal["dynamics", "basic"] = "dynamics"

    # Dynamics 365 (OAuth client credentials)
    tenant_id: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    scope_url: Optional[str] = None

    # Basic authentication
    username: Optional[str] = None
    password: Optional[str] = None

    # Transport / diagnostics
    request_timeout: float = 30.0
    log_level: str = "info"

    model_config = SettingsConfigDict(
        env_prefix="ODATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def authority(self) -> str:
        """Get the Azure AD authority URL for the configured tenant"""
        return f"{AUTHORITY_HOST}/{self.tenant_id}"

    @property
    def service_root(self) -> str:
        """Absolute URL every relative OData path is resolved against"""
        return f"{self.base_url.rstrip('/')}/{self.odata_url_suffix}"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get client settings singleton"""
    global _settings
    if _settings is None:
        load_dotenv_if_exists()

        import structlog
        logger = structlog.get_logger(__name__)

        try:
            _settings = Settings()  # type: ignore[call-arg]
            logger.info("Settings loaded",
                        base_url=_settings.base_url,
                        auth_provider=_settings.auth_provider)
        except Exception as e:
            raise ValueError(
                "Required ODATA_* environment variables missing. Check your .env file."
            ) from e
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads them"""
    global _settings
    _settings = None


def load_dotenv_if_exists() -> None:
    """Load .env file if it exists"""
    from dotenv import load_dotenv

    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)
    else:
        # Try to load from parent directories
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            env_path = parent / ".env"
            if env_path.exists():
                load_dotenv(env_path)
                break
