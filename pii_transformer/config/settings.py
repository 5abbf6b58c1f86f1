from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    cipher_engine: str = "openpgp"

    openpgp_cipher: str = "aes256"
    openpgp_s2k_hash: str = "sha256"
    openpgp_s2k_count: int = Field(default=16777216, ge=1024, le=65011712)

    hex_odd_length_policy: Literal["strict", "truncate"] = "strict"

    passphrase: str = ""
