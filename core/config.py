from pydantic_settings import BaseSettings
from typing import List, Optional
from pydantic import AliasChoices, Field, field_validator
from core import constants
from core.exceptions import ConfigurationException, MissingConfigException


class Settings(BaseSettings):
    # --- Forecast Source ---
    FORECAST_URL: str = Field(constants.DEFAULT_FORECAST_URL, description="Higher summits forecast page")

    # --- Storage ---
    FORECAST_FULL_PATH: str = Field(
        constants.DEFAULT_FORECAST_FULL_PATH, description="File holding the full forecast"
    )
    FORECAST_ABBREVIATED_PATH: str = Field(
        constants.DEFAULT_FORECAST_ABBREVIATED_PATH,
        description="File holding the abbreviated forecast",
    )

    # --- Polling ---
    POLL_INTERVAL: int = Field(constants.DEFAULT_POLL_INTERVAL, gt=0, description="Seconds between cycles")
    CYCLE_MAX_RETRIES: int = Field(constants.DEFAULT_CYCLE_MAX_RETRIES, ge=1, description="Attempts per cycle")
    RETRY_BASE_DELAY: float = Field(
        constants.DEFAULT_RETRY_BASE_DELAY, ge=0, description="Backoff base delay in seconds"
    )
    MAX_CONSECUTIVE_ERRORS: int = Field(
        constants.DEFAULT_MAX_CONSECUTIVE_ERRORS, ge=1, description="Failed cycles before shutdown"
    )

    # --- Notification (inReach) ---
    NOTIFY_ENABLED: bool = Field(False, description="Forward abbreviated forecast updates")
    NOTIFY_DRY_RUN: bool = Field(False, description="Type messages without pressing send")
    INREACH_REPLY_URL: Optional[str] = Field(
        None,
        description="Verified inReach reply page",
        validation_alias=AliasChoices("INREACH_REPLY_URL", "GARMIN_MESSAGE_REPLY_URL"),
    )
    CHUNK_MAX_LENGTH: int = Field(constants.SMS_MAX_LENGTH, ge=1, description="Max characters per message")

    # --- Browser ---
    BROWSER_HEADLESS: bool = Field(True, description="Run Chromium headless")
    BROWSER_SESSION_POLICY: str = Field(
        constants.SESSION_POLICY_PER_CYCLE, description="per_cycle or reuse"
    )
    PAGE_TIMEOUT_MS: int = Field(constants.DEFAULT_PAGE_TIMEOUT_MS, gt=0, description="Playwright timeout")
    USER_AGENT: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )

    # --- Logging ---
    LOG_LEVEL: str = Field(constants.DEFAULT_LOG_LEVEL, description="Logging level")
    LOG_FILE: str = Field(constants.DEFAULT_LOG_FILE, description="Log file path (empty disables)")
    LOG_FORMAT: str = Field(constants.DEFAULT_LOG_FORMAT, description="Log format (text/json)")
    LOG_MAX_BYTES: int = Field(constants.DEFAULT_LOG_MAX_BYTES, description="Max log file size")
    LOG_BACKUP_COUNT: int = Field(constants.DEFAULT_LOG_BACKUP_COUNT, description="Log backup count")
    LOG_TIMEZONE: str = Field(constants.DEFAULT_LOG_TIMEZONE, description="Timezone for log timestamps")

    @field_validator("BROWSER_SESSION_POLICY", mode="before")
    @classmethod
    def parse_session_policy(cls, v):
        if isinstance(v, str):
            v = v.strip().lower().replace("-", "_")
            if v not in constants.SESSION_POLICIES:
                raise ValueError(
                    f"BROWSER_SESSION_POLICY must be one of {', '.join(constants.SESSION_POLICIES)}"
                )
        return v

    @field_validator("INREACH_REPLY_URL", mode="before")
    @classmethod
    def parse_reply_url(cls, v):
        if isinstance(v, str):
            # Handle surrounding quotes from copy-paste
            v = v.strip().strip("'").strip('"')
            if not v:
                return None
        return v

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def validate_all(self) -> List[str]:
        """
        Validate all configuration settings.
        Returns a list of warning/error messages.
        """
        errors = []

        # Critical
        if self.NOTIFY_ENABLED and not self.INREACH_REPLY_URL:
            errors.append("❌ INREACH_REPLY_URL is missing - required when NOTIFY_ENABLED is set")
        if self.INREACH_REPLY_URL and not self.INREACH_REPLY_URL.startswith("https://"):
            errors.append("❌ INREACH_REPLY_URL must start with https://")
        if not self.FORECAST_URL.startswith(("http://", "https://")):
            errors.append("❌ FORECAST_URL must be an http(s) URL")
        if self.FORECAST_FULL_PATH == self.FORECAST_ABBREVIATED_PATH:
            errors.append("❌ FORECAST_FULL_PATH and FORECAST_ABBREVIATED_PATH must differ")

        # Warnings
        if self.NOTIFY_ENABLED and self.NOTIFY_DRY_RUN:
            errors.append("⚠️ NOTIFY_DRY_RUN is set - messages will be typed but not sent")
        if not self.BROWSER_HEADLESS:
            errors.append("⚠️ BROWSER_HEADLESS is disabled - a visible browser window will open")

        return errors

    def require_valid(self) -> None:
        """Raise ConfigurationException if any critical setting is invalid."""
        critical = [msg for msg in self.validate_all() if "❌" in msg]
        if any("is missing" in msg for msg in critical):
            raise MissingConfigException(
                "Required configuration is missing", {"errors": "; ".join(critical)}
            )
        if critical:
            raise ConfigurationException(
                "Configuration validation failed", {"errors": "; ".join(critical)}
            )


settings = Settings()
