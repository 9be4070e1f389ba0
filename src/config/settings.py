from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_ENV = {
    "discord_token": "DISCORD_TOKEN",
    "discord_channel_id": "DISCORD_CHANNEL_ID",
    "tiktok_username": "TIKTOK_USERNAME",
}

class Settings(BaseSettings):
    discord_token: Optional[str] = Field(default=None, alias="DISCORD_TOKEN")
    discord_channel_id: Optional[str] = Field(default=None, alias="DISCORD_CHANNEL_ID")
    tiktok_username: Optional[str] = Field(default=None, alias="TIKTOK_USERNAME")
    sign_server_url: str = Field(default="", alias="SIGN_SERVER_URL")
    enable_upload_check: bool = Field(default=True, alias="ENABLE_UPLOAD_CHECK")
    upload_check_interval_sec: int = Field(default=300, alias="UPLOAD_CHECK_INTERVAL")
    reconnect_delay_sec: int = Field(default=30, alias="RECONNECT_DELAY_SEC")
    http_timeout_sec: float = Field(default=15, alias="HTTP_TIMEOUT_SEC")
    embed_footer: str = Field(default="TikTok Notifier", alias="EMBED_FOOTER")
    log_format: str = Field(default="plain", alias="LOG_FORMAT")
    metrics_port: int = Field(default=9100, alias="METRICS_PORT")
    api_port: int = Field(default=8000, alias="API_PORT")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True)

    @property
    def username(self) -> str:
        return (self.tiktok_username or "").strip().lstrip("@")

    @property
    def channel_id(self) -> Optional[int]:
        raw = (self.discord_channel_id or "").strip()
        return int(raw) if raw.isdigit() else None

    def missing_required(self) -> List[str]:
        """Env names of required values that are unset, blank or unusable."""
        missing = []
        for field, env in REQUIRED_ENV.items():
            value = getattr(self, field)
            if value is None or not str(value).strip():
                missing.append(env)
        if "DISCORD_CHANNEL_ID" not in missing and self.channel_id is None:
            missing.append("DISCORD_CHANNEL_ID")
        if "TIKTOK_USERNAME" not in missing and not self.username:
            missing.append("TIKTOK_USERNAME")
        return missing

settings = Settings()
