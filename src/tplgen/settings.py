from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TPLGEN_", case_sensitive=False)

    manifest: Path = Path("tplgen.json")
    dest_root: Path | None = None
    file_mode: str = "0644"
    verbose: bool = False
