"""Application configuration using pydantic-settings.

All configuration values are loaded from environment variables with sensible defaults.
The upstream API key has no default: the application refuses to start without it.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

RESOURCES_DIR = Path(__file__).parent / "resources"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Upstream chat-completion API (DeepSeek-compatible)
    deepseek_api_key: str | None = None
    upstream_base_url: str = "https://api.deepseek.com"
    upstream_model: str = "deepseek-chat"
    upstream_temperature: float = 0.2
    upstream_connect_timeout: float = 10.0  # Reads are unbounded; generation can be slow

    # Fixed user-role message sent alongside the templated system prompt
    user_instruction: str = "请严格按照系统提示中的要求生成或润色公文内容。"

    # Resources
    system_prompt_path: Path = RESOURCES_DIR / "system_prompt.jinja"
    doc_schemas_path: Path = RESOURCES_DIR / "doc_schemas.json"
    static_dir: Path | None = None

    # Request limits
    max_input_chars: int = 20000
    max_export_chars: int = 200000

    # Export
    default_export_name: str = "公文"

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "text"

    def require_api_key(self) -> str:
        """Return the upstream API key or fail loudly."""
        from .core.exceptions import ConfigurationError

        if not self.deepseek_api_key or not self.deepseek_api_key.strip():
            raise ConfigurationError(
                "DEEPSEEK_API_KEY is not set; refusing to start without upstream credentials",
                {"setting": "deepseek_api_key"},
            )
        return self.deepseek_api_key.strip()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
