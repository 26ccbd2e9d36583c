import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

from .logging_config import StructuredLogger

logger = StructuredLogger(__name__)

DEFAULT_CONFIG_DIR = "~/.edupass/config"

DEFAULT_CONFIG_YAML = """version: 1

database:
  path: ~/.edupass/ledger.db

ledger:
  # Reject issue/transfer/burn until an admin has initialized the ledger
  require_initialized: false

server:
  host: 127.0.0.1
  port: 9100

logging:
  level: INFO
"""

# --- V1 Schema Models ---

class DatabaseConfig(BaseModel):
    path: str = "~/.edupass/ledger.db"


class LedgerSettings(BaseModel):
    require_initialized: bool = False


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = Field(9100, ge=1, le=65535)


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


class EduPassConfig(BaseModel):
    version: int = Field(1, ge=1, le=1)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def db_path(self) -> str:
        override = (os.getenv("EDUPASS_DB_PATH") or "").strip()
        return os.path.expanduser(override or self.database.path)

    def log_level(self) -> str:
        override = (os.getenv("EDUPASS_LOG_LEVEL") or "").strip().upper()
        return override or self.logging.level

# --- Config Loader (Atomic Reload) ---

class ConfigLoader:
    def __init__(self):
        self.config_dir = Path(os.path.expanduser(os.getenv("EDUPASS_CONFIG_DIR", DEFAULT_CONFIG_DIR)))
        self.config_file = self.config_dir / "ledger.yaml"
        self.config: Optional[EduPassConfig] = None

    def load_config(self) -> EduPassConfig:
        """
        Loads and validates configuration from ledger.yaml.
        A missing file yields the defaults.
        ATOMIC: On failure, previous config is preserved.
        """
        if not self.config_file.exists():
            logger.info("Config file not found, using defaults", path=str(self.config_file))
            self.config = self.config or EduPassConfig()
            return self.config

        try:
            with open(self.config_file, "r") as f:
                raw_data = yaml.safe_load(f) or {}

            logger.info("Loading configuration", path=str(self.config_file))

            # Validate into temporary; never touch self.config until success
            new_config = EduPassConfig(**raw_data)

            self.config = new_config

            logger.info("Configuration loaded successfully",
                        version=self.config.version,
                        db_path=self.config.database.path)
            return self.config

        except Exception as e:
            logger.error("Configuration validation failed", error=str(e))
            if self.config is not None:
                logger.warning("Keeping previous valid configuration")
                raise ValueError(f"Invalid configuration (previous config retained): {e}") from e
            raise ValueError(f"Invalid configuration (no fallback): {e}") from e

    def get(self) -> EduPassConfig:
        if not self.config:
            self.load_config()
        return self.config

    def write_default(self) -> bool:
        """Create a default ledger.yaml. Returns False when one already exists."""
        if self.config_file.exists():
            return False
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(DEFAULT_CONFIG_YAML)
        return True


config_loader = ConfigLoader()
