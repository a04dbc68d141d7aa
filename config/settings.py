from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.parsers.qualification import QualificationThresholds


class ConfigError(Exception):
    pass


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Telegram channel (required at startup)
    telegram_bot_token: str = ""
    telegram_channel_id: str = ""

    # Solana RPC (baseline source)
    solana_rpc_url: str = "https://api.mainnet-beta.solana.com"
    rpc_scan_limit: int = Field(default=10, ge=1)

    # Discovery sources: a non-empty key enables the source
    solana_tracker_api_key: str = ""
    helius_api_key: str = ""
    birdeye_api_key: str = ""

    # Polling
    check_interval_minutes: int = Field(default=1, ge=1)
    source_timeout_sec: float = Field(default=10.0, gt=0)
    notify_timeout_sec: float = Field(default=10.0, gt=0)

    # Qualification thresholds
    min_liquidity_usd: float = Field(default=1000.0, ge=0)
    min_market_cap_usd: float = Field(default=10000.0, ge=0)
    max_age_minutes: int = Field(default=5, ge=0)

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    def missing_required(self) -> list[str]:
        """Env names of required settings that are empty."""
        missing = []
        if not self.telegram_bot_token:
            missing.append("TELEGRAM_BOT_TOKEN")
        if not self.telegram_channel_id:
            missing.append("TELEGRAM_CHANNEL_ID")
        return missing

    def require_notification_channel(self) -> None:
        missing = self.missing_required()
        if missing:
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

    def thresholds(self) -> QualificationThresholds:
        return QualificationThresholds(
            max_age_minutes=self.max_age_minutes,
            min_liquidity_usd=self.min_liquidity_usd,
            min_market_cap_usd=self.min_market_cap_usd,
        )


settings = Settings()
