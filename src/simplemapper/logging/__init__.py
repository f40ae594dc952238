"""SimpleMapper Logging — hexagonal logging port and structlog adapter."""

from simplemapper.logging.port import LoggingPort
from simplemapper.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
