"""Application configuration using pydantic-settings."""

import functools
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict


def _find_project_root() -> Path:
    """Find project root by locating pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path(__file__).resolve().parent.parent.parent


class YamlSettingsSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from config/settings.yaml."""

    def get_field_value(self, field_name: str) -> tuple[Any, str, bool]:
        """Not used - we implement __call__ instead."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        yaml_path = _find_project_root() / "config" / "settings.yaml"
        if not yaml_path.exists():
            return {}

        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        # Flatten nested structure to match Settings field names
        flattened = {}
        if "server" in data:
            flattened["host"] = data["server"].get("host")
            flattened["port"] = data["server"].get("port")
            flattened["allowed_origins"] = data["server"].get("allowed_origins")
        if "progress" in data:
            progress = data["progress"]
            flattened["user_id"] = progress.get("user_id")
            flattened["storage_key"] = progress.get("storage_key")
            flattened["persistence_enabled"] = progress.get("persistence_enabled")
            flattened["data_dir"] = progress.get("data_dir")

        return {k: v for k, v in flattened.items() if v is not None}


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="JP_PROGRESS_",
        extra="ignore",
    )

    # Progress store
    user_id: str = Field(default="default_user")
    storage_key: str = Field(default="japanese_learning_progress")
    persistence_enabled: bool = Field(default=True)
    data_dir: Path | None = Field(default=None)

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    # Paths
    project_root: Path = Field(default_factory=_find_project_root)

    @property
    def progress_dir(self) -> Path:
        """Directory for progress records. Relative paths resolve against the project root."""
        if self.data_dir is None:
            return self.project_root / "data" / "progress"
        if self.data_dir.is_absolute():
            return self.data_dir
        return self.project_root / self.data_dir

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customise settings sources to include YAML file.

        Priority order (highest to lowest):
        1. init_settings (arguments passed to Settings())
        2. env_settings (environment variables)
        3. dotenv_settings (.env file)
        4. YamlSettingsSource (settings.yaml)
        5. file_secret_settings
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlSettingsSource(settings_cls),
            file_secret_settings,
        )


@functools.lru_cache
def get_settings() -> Settings:
    """Get application settings singleton."""
    return Settings()
