# app/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_env: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    # Security
    allowed_origins: list[str] = ["*"]

    # Enhancement pipeline
    # "basic"  - syntactic URL checks only
    # "strict" - additionally probes the source URL (must be reachable and image/*)
    #            and echoes original_url in responses
    validation_mode: Literal["basic", "strict"] = "strict"

    # Enhancement provider
    # "remini_api" - remote Remini-compatible HTTP API
    # "echo"       - returns the input URL unchanged (dev only)
    enhancement_provider: Literal["remini_api", "echo"] = "remini_api"
    remini_api_url: str = "https://api.betabotz.eu.org/api/tools/remini"
    remini_api_key: str | None = None  # Sent as ?apikey=..., never logged
    remini_result_field: str = "url"  # JSON field carrying the enhanced image URL
    enhancement_timeout_seconds: int = 60

    # Feature Flags
    enable_request_logging: bool = True

    @property
    def is_production(self) -> bool:
        return self.app_env == "prod"

    @property
    def is_staging(self) -> bool:
        return self.app_env == "staging"

    def validate_required_for_production(self) -> list[str]:
        """Validate that required settings exist for production"""
        if not self.is_production:
            return []

        missing = []

        required_fields = []
        if self.enhancement_provider == "remini_api":
            required_fields.append(("remini_api_url", self.remini_api_url))

        for field_name, value in required_fields:
            if not value:
                missing.append(field_name)

        return missing


def warn_on_risky_config(s: "Settings") -> list[str]:
    warnings: list[str] = []

    if s.is_production and s.allowed_origins == ["*"]:
        warnings.append("prod: allowed_origins=['*'] (CORS is wide open).")

    if s.enhancement_provider == "echo" and s.app_env != "dev":
        warnings.append(
            f"{s.app_env}: enhancement_provider=echo returns input URLs unchanged."
        )

    if s.enhancement_provider == "remini_api" and not s.remini_api_key:
        warnings.append("remini_api: remini_api_key is not set (provider may reject requests).")

    if s.validation_mode == "basic":
        warnings.append(
            "validation_mode=basic: source URLs are not probed before being sent to the provider."
        )

    return warnings


def validate_or_warn(s: "Settings") -> None:
    """
    In prod: enforce required settings (hard fail).
    In non-prod: warn only.
    """
    missing = s.validate_required_for_production()

    if missing:
        raise RuntimeError(f"Missing required settings for production: {', '.join(missing)}")

    for msg in warn_on_risky_config(s):
        print(f"[WARN][config] {msg}")

settings = Settings()
validate_or_warn(settings)
