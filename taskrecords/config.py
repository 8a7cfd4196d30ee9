from typing import Any, Callable, List, Literal
import json
import os

from pydantic import BaseModel, Field
from loguru import logger

DEFAULT_COLLECTION = "backgroundDownloaderTaskRecords"


class GeneralSettings(BaseModel):
    debug_mode: bool = False
    log_dir: str = "logs"


class StorageSettings(BaseModel):
    backend: Literal["local", "mongo"] = "local"
    collection_name: str = DEFAULT_COLLECTION


class MongoSettings(BaseModel):
    host: str = 'localhost'
    port: int = 27017
    database_name: str = "taskrecords"


class LocalStoreSettings(BaseModel):
    path: str = "./data/localstore"


class AppConfig(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    mongo: MongoSettings = Field(default_factory=MongoSettings)
    local: LocalStoreSettings = Field(default_factory=LocalStoreSettings)


class ConfigManager:
    """
    Manages application configuration with persistence and change notification.
    """
    def __init__(self, filepath: str = "config.json"):
        self.filepath = filepath
        self._data = AppConfig()
        self._listeners: List[Callable[[str, str, Any], None]] = []
        self._load()

    @property
    def data(self) -> AppConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic, autosave, and notify listeners."""
        if not hasattr(self._data, section):
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if not hasattr(section_obj, key):
            raise ValueError(f"Invalid key: {key} in section {section}")

        raw = self._data.model_dump()
        raw[section][key] = value
        self._data = AppConfig.model_validate(raw)
        self._save()
        new_value = getattr(getattr(self._data, section), key)
        for listener in list(self._listeners):
            try:
                listener(section, key, new_value)
            except Exception as e:
                logger.error(f"Config listener {listener} failed for {section}.{key}: {e}")

    def add_listener(self, callback: Callable[[str, str, Any], None]):
        """Call `callback(section, key, value)` after each successful update."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[str, str, Any], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if os.path.isfile(self.filepath):
            try:
                if self.filepath.endswith('.toml'):
                    import tomllib
                    with open(self.filepath, "rb") as f:
                        raw = tomllib.load(f)
                else:
                    with open(self.filepath, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                self._data = AppConfig.model_validate(raw)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load config from {self.filepath}: {e}")
                self._save()
        else:
            self._save()

    def _save(self):
        """Persist current config as JSON. TOML files are never rewritten."""
        if self.filepath.endswith('.toml'):
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(), f, indent=4)
        except OSError as e:
            logger.error(f"Failed to save config to {self.filepath}: {e}")
