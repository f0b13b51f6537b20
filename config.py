"""Configuration loading and validation for neocities-sync."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from gateway import NeocitiesClient


DEFAULT_CONFIG_PATH = Path("neocities.toml")

API_KEY_ENV = "NEOCITIES_API_KEY"

DEFAULTS = {
    "api_url": "https://neocities.org/api/",
    "api_key": None,
    "username": None,
    "password": None,
    "site_dir": "./site",
    "timeout": 30.0,
    "batch_size": 20,
}


@dataclass
class Config:
    api_url: str
    api_key: str | None
    username: str | None
    password: str | None
    site_dir: Path
    timeout: float
    batch_size: int

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key) or bool(self.username and self.password)

    def make_client(self) -> NeocitiesClient:
        """Build a client using the API key, else username/password, else no auth."""
        options = {"base_url": self.api_url, "timeout": self.timeout}
        if self.api_key:
            return NeocitiesClient.with_key(self.api_key, **options)
        if self.username and self.password:
            return NeocitiesClient(self.username, self.password, **options)
        return NeocitiesClient.no_auth(**options)

    @classmethod
    def load(
        cls,
        config_path: Path | None = None,
        site_dir_override: str | None = None,
        api_key_override: str | None = None,
        batch_size_override: int | None = None,
    ) -> "Config":
        """Load configuration from TOML file with defaults."""
        config_data = dict(DEFAULTS)

        path = config_path or DEFAULT_CONFIG_PATH
        if path.exists():
            with open(path, "rb") as f:
                file_config = tomllib.load(f)
                config_data.update(file_config)

        if not config_data["api_key"] and os.environ.get(API_KEY_ENV):
            config_data["api_key"] = os.environ[API_KEY_ENV]

        if site_dir_override:
            config_data["site_dir"] = site_dir_override
        if api_key_override:
            config_data["api_key"] = api_key_override
        if batch_size_override is not None:
            config_data["batch_size"] = batch_size_override

        batch_size = int(config_data["batch_size"])
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")

        return cls(
            api_url=config_data["api_url"],
            api_key=config_data["api_key"],
            username=config_data["username"],
            password=config_data["password"],
            site_dir=Path(config_data["site_dir"]).expanduser().resolve(),
            timeout=float(config_data["timeout"]),
            batch_size=batch_size,
        )
