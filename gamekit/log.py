"""Minimal levelled logger writing timestamped lines to a handler."""

from __future__ import annotations

import io
import re
import sys
from datetime import datetime
from typing import Any, Callable, Optional, Protocol

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
_VERB = re.compile(r"%[+#]?v")


class Handler(Protocol):
    def handle(self, data: bytes) -> None: ...

    def close(self) -> None: ...


class StreamHandler:
    """Writes log lines to a stream, standard output by default."""

    def __init__(self, stream: Optional[Any] = None) -> None:
        self._stream = stream

    def handle(self, data: bytes) -> None:
        target = self._stream if self._stream is not None else sys.stdout
        if isinstance(target, io.TextIOBase):
            target.write(data.decode("utf-8", errors="replace"))
        else:
            target.write(data)
        target.flush()

    def close(self) -> None:
        """Nothing to release; the stream belongs to the caller."""


def _format(fmt: str, args: tuple) -> str:
    pattern = _VERB.sub("%s", fmt)
    try:
        return pattern % args
    except (TypeError, ValueError):
        return " ".join([fmt, *map(str, args)])


class SysLogger:
    """Logger producing 'YYYY-MM-DD HH:MM:SS [LEVEL] message' lines."""

    def __init__(
        self,
        handler: Optional[Handler] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.handler = handler if handler is not None else StreamHandler()
        self._clock = clock

    def _log(self, prefix: str, *args: Any) -> None:
        line = self._clock().strftime(_TIME_FORMAT) + prefix + " ".join(map(str, args)) + "\n"
        self.handler.handle(line.encode("utf-8"))

    def _logf(self, prefix: str, fmt: str, *args: Any) -> None:
        self._log(prefix, _format(fmt, args))

    def debug(self, *args: Any) -> None:
        self._log(" [DEBUG] ", *args)

    def debugf(self, fmt: str, *args: Any) -> None:
        self._logf(" [DEBUG] ", fmt, *args)

    def info(self, *args: Any) -> None:
        self._log(" [INFO] ", *args)

    def infof(self, fmt: str, *args: Any) -> None:
        self._logf(" [INFO] ", fmt, *args)

    def warn(self, *args: Any) -> None:
        self._log(" [WARN] ", *args)

    def warnf(self, fmt: str, *args: Any) -> None:
        self._logf(" [WARN] ", fmt, *args)

    def error(self, *args: Any) -> None:
        self._log(" [ERROR] ", *args)

    def errorf(self, fmt: str, *args: Any) -> None:
        self._logf(" [ERROR] ", fmt, *args)

    def close(self) -> None:
        self.handler.close()

    def __enter__(self) -> "SysLogger":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


_logger = SysLogger()


def debug(*args: Any) -> None:
    _logger.debug(*args)


def debugf(fmt: str, *args: Any) -> None:
    _logger.debugf(fmt, *args)


def info(*args: Any) -> None:
    _logger.info(*args)


def infof(fmt: str, *args: Any) -> None:
    _logger.infof(fmt, *args)


def warn(*args: Any) -> None:
    _logger.warn(*args)


def warnf(fmt: str, *args: Any) -> None:
    _logger.warnf(fmt, *args)


def error(*args: Any) -> None:
    _logger.error(*args)


def errorf(fmt: str, *args: Any) -> None:
    _logger.errorf(fmt, *args)