"""Application settings using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from vcs_history.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Settings loaded from ``VCS_HISTORY_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VCS_HISTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    log_level: str = "INFO"
    json_logs: bool = False

    # --- External tools ---
    clearcase_command: str = "cleartool"
    mercurial_command: str = "hg"
    git_command: str = "git"

    # --- Repository defaults ---
    verbose_history: bool = False
    cacheable: bool = True

    def command_for(self, backend: str) -> str:
        """Return the configured executable for a backend type name."""
        commands = {
            "clearcase": self.clearcase_command,
            "mercurial": self.mercurial_command,
            "git": self.git_command,
        }
        try:
            return commands[backend.lower()]
        except KeyError:
            raise ConfigurationError(
                f"No command configured for backend {backend}",
                details={"backend": backend},
            ) from None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
