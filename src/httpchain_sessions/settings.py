from pathlib import Path

from pydantic import Field, PositiveFloat
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    server_name: str = Field(default="httpchain-sessions", description="Name announced by the MCP server.")
    reports_dir: Path = Field(default=Path("reports"), description="Directory where HTML session reports are written.")
    timeout: PositiveFloat = Field(default=30.0, description="Transport timeout in seconds.")
    follow_redirects: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_prefix="HTTPCHAIN_")
