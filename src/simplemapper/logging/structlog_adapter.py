# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""StructlogAdapter — default LoggingPort implementation using structlog.

Only the ``simplemapper`` logger tree is touched: the adapter installs one
stream handler on it and leaves the root logger to the host application.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog

from simplemapper.config.properties.logging import LoggingProperties
from simplemapper.core.config import Config

LIBRARY_LOGGER = "simplemapper"


class StructlogAdapter:
    """Default logging adapter backed by structlog.

    Args:
        stream: Where the library handler writes; ``sys.stdout`` by default.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}
        self._handler: logging.Handler | None = None

    def configure(self, config: Config) -> None:
        """Configure structlog from the simplemapper.logging section of config.

        ``level.root`` applies to the ``simplemapper`` logger; every other
        ``level`` entry names a logger and its level. Calling this again
        replaces the handler installed by the previous call.
        """
        props = config.bind(LoggingProperties)
        level_section = dict(props.level)
        self._root_level = str(level_section.pop("root", "INFO")).upper()
        self._module_levels = {k: str(v).upper() for k, v in level_section.items()}
        self._format = str(props.format).lower()

        self._setup_structlog()
        self._install_handler()
        for module, level in self._module_levels.items():
            self.set_level(module, level)

    def get_logger(self, name: str) -> Any:
        """Get a structlog BoundLogger by name."""
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        """Set the log level for a specific stdlib logger."""
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def _setup_structlog(self) -> None:
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]

        if self._format == "json":
            processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def _install_handler(self) -> None:
        library_logger = logging.getLogger(LIBRARY_LOGGER)
        if self._handler is not None:
            library_logger.removeHandler(self._handler)

        self._handler = logging.StreamHandler(self._stream or sys.stdout)
        self._handler.setFormatter(logging.Formatter("%(message)s"))
        library_logger.addHandler(self._handler)
        library_logger.setLevel(getattr(logging, self._root_level, logging.INFO))
        # records are rendered here; the host's root handlers would print them twice
        library_logger.propagate = False
