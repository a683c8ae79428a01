"""Bot server configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class BotServerSettings(BaseSettings):
    model_config = {"env_prefix": "BOT_"}

    # 32-byte secp256k1 secret key, hex encoded
    secret_key: str = Field(pattern=r"^[0-9a-fA-F]{64}$", repr=False)
    database_path: str = Field(default="backend/storage.db", min_length=1)
    log_dir: str = Field(default="backend/logs/bot", min_length=1)
    max_request_body_size: int = Field(default=65536, ge=1024)
