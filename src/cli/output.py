"""Console output for the paperscout CLI.

Tool results are Markdown and go to stdout; every line is mirrored to the
log so a ``--log-dir`` file holds a full transcript of the run.
"""

import logging
import sys
from typing import Any, Dict, Optional, TextIO


class OutputManager:
    """Print user-facing messages and mirror them to a logger.

    Usage:
        from cli.output import get_output
        out = get_output("paperscout.search")
        out.info(format_search_result(result))
        out.cache_stats(store.get_stats())
    """

    def __init__(self, logger: logging.Logger, stream: Optional[TextIO] = None):
        self.logger = logger
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def _emit(self, text: str) -> None:
        self.stream.write(text + "\n")

    def info(self, msg: str) -> None:
        self._emit(msg)
        self.logger.info(msg)

    def success(self, msg: str) -> None:
        self._emit(f"✓ {msg}")
        self.logger.info(msg)

    def warning(self, msg: str) -> None:
        self._emit(f"⚠ {msg}")
        self.logger.warning(msg)

    def error(self, msg: str) -> None:
        self._emit(f"❌ {msg}")
        self.logger.error(msg)

    def section(self, title: str) -> None:
        self._emit(f"\n## {title}\n")
        self.logger.info(f"--- {title} ---")

    def stat(self, label: str, value: Any, indent: int = 2) -> None:
        line = f"{' ' * indent}{label}: {value}"
        self._emit(line)
        self.logger.debug(line.strip())

    def cache_stats(self, stats: Dict[str, Any]) -> None:
        """Render ``CacheStore.get_stats()`` output, most recently used key last."""
        self.section("Response cache")
        self.stat("Entries", f"{stats['size']}/{stats['max_size']}")
        for key in stats["keys"]:
            self.stat("-", key, indent=4)


_output_managers: Dict[str, OutputManager] = {}


def get_output(name: str = "paperscout") -> OutputManager:
    """Get or create the OutputManager bound to logger ``name``."""
    if name not in _output_managers:
        _output_managers[name] = OutputManager(logging.getLogger(name))
    return _output_managers[name]


__all__ = ["OutputManager", "get_output"]
