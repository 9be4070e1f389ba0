from fastapi import APIRouter
from pydantic import BaseModel
from typing import Optional
from src.config.settings import Settings, settings as default_settings

router = APIRouter(prefix="/settings", tags=["settings"])

_settings: Settings = default_settings

class SettingsView(BaseModel):
    tiktok_username: str
    discord_channel_id: Optional[int]
    sign_server_url: str
    enable_upload_check: bool
    upload_check_interval_sec: int
    reconnect_delay_sec: int
    log_format: str
    metrics_port: int
    api_port: int
    discord_token_set: bool

@router.get("", response_model=SettingsView)
async def get_settings():
    return SettingsView(
        tiktok_username=_settings.username,
        discord_channel_id=_settings.channel_id,
        sign_server_url=_settings.sign_server_url,
        enable_upload_check=_settings.enable_upload_check,
        upload_check_interval_sec=_settings.upload_check_interval_sec,
        reconnect_delay_sec=_settings.reconnect_delay_sec,
        log_format=_settings.log_format,
        metrics_port=_settings.metrics_port,
        api_port=_settings.api_port,
        discord_token_set=bool(_settings.discord_token),
    )

def set_settings(settings: Settings):
    global _settings
    _settings = settings
