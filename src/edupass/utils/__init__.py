"""EduPass utilities: logging, config, invariants.

Individual modules are imported directly by consumers, e.g.:
    from ..utils.logging_config import StructuredLogger
    from ..utils.config_loader import config_loader

NOTE: invariants is not re-exported here. It imports the ledger model, and
the ledger imports logging_config from this package.
"""

from .logging_config import setup_logging, StructuredLogger, JSONFormatter
from .config_loader import config_loader, ConfigLoader, EduPassConfig

__all__ = [
    "setup_logging", "StructuredLogger", "JSONFormatter",
    "config_loader", "ConfigLoader", "EduPassConfig",
]
