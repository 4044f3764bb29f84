# FsActor - Filesystem Command Actor
# Copyright (C) 2026 FsActor Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of FsActor, licensed under Apache-2.0.
# See LICENSE for the full license text.

"""Logging setup for FsActor processes.

structlog runs in stdlib-compatible mode: modules keep using
``logging.getLogger("fsactor.<component>")`` and every record passes
through the structlog processor chain, which merges contextvars
(``request_id``, ``msg_type``, ``head``) into the output.

- setup_logging(): console + rotating process log (JSON by default)
- setup_instance_logging(): one daily-rotated log per actor instance
- set_request_id() / get_request_id(): request ID over contextvars
"""

from __future__ import annotations

import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from pathlib import Path

import orjson
import structlog

from fsactor.schemas import SAFE_NAME_RE

_NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def set_request_id(request_id: str) -> None:
    structlog.contextvars.bind_contextvars(request_id=request_id)


def get_request_id() -> str:
    """Return the request ID bound for the current context, or ``"-"``."""
    return structlog.contextvars.get_contextvars().get("request_id", "-")


# ── Building blocks ────────────────────────────────────────────


def _pre_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _orjson_serializer(obj: object, **_kw) -> str:  # noqa: ANN001
    return orjson.dumps(obj, default=str).decode("utf-8")


def _formatter(renderer, extra_processors: tuple = ()) -> structlog.stdlib.ProcessorFormatter:  # noqa: ANN001
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            *extra_processors,
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=_pre_chain(),
    )


def _json_renderer() -> structlog.processors.JSONRenderer:
    return structlog.processors.JSONRenderer(serializer=_orjson_serializer)


def _reset_root(level: str) -> logging.Logger:
    """Configure structlog and return a root logger stripped of handlers."""
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    return root


def _attach(root: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def _quiet_third_party() -> None:
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# ── Process logging ────────────────────────────────────────────


def setup_logging(
    level: str = "INFO",
    log_dir: Path | None = None,
    json_file: bool = True,
) -> None:
    """Configure logging for the whole process.

    Args:
        level: Root log level name; unknown names fall back to INFO.
        log_dir: Directory for ``fsactor.log``.  ``None`` disables the file.
        json_file: JSON lines (orjson) in the file instead of plain text.
    """
    root = _reset_root(level)
    _attach(root, logging.StreamHandler(), _formatter(structlog.dev.ConsoleRenderer()))

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        renderer = _json_renderer() if json_file else structlog.dev.ConsoleRenderer(colors=False)
        handler = RotatingFileHandler(
            log_dir / "fsactor.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        _attach(root, handler, _formatter(renderer))

    _quiet_third_party()


# ── Per-instance logging ───────────────────────────────────────


def _instance_tagger(instance_name: str):  # noqa: ANN202
    def _tag(logger, method_name, event_dict):  # noqa: ANN001, ANN202
        event_dict.setdefault("instance", instance_name)
        return event_dict

    return _tag


def _point_current_link(link: Path, target: Path) -> None:
    if link.is_symlink() or link.exists():
        link.unlink()
    try:
        link.symlink_to(target.name)
    except OSError:
        # No symlink support: leave the file name behind instead
        link.write_text(target.name, encoding="utf-8")


def setup_instance_logging(
    instance_name: str,
    log_dir: Path,
    level: str = "INFO",
    also_to_console: bool = True,
) -> Path:
    """Route logging to a per-instance file rotated at midnight.

    Several scoped instances can work on one chat stream; each gets::

        {log_dir}/instances/{instance_name}/
        |-- current.log -> 20260214.log
        +-- 20260214.log

    File lines are JSON carrying ``"instance": instance_name``.

    Returns:
        Path of today's log file.

    Raises:
        ValueError: *instance_name* is not a safe path segment.
    """
    if not SAFE_NAME_RE.match(instance_name):
        raise ValueError(f"Invalid instance name for logging: {instance_name!r}")
    instance_dir = log_dir / "instances" / instance_name
    instance_dir.mkdir(parents=True, exist_ok=True)
    log_file = instance_dir / f"{datetime.now():%Y%m%d}.log"

    root = _reset_root(level)
    tagger = (_instance_tagger(instance_name),)

    handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=30,
        encoding="utf-8",
    )
    handler.suffix = "%Y%m%d.log"
    _attach(root, handler, _formatter(_json_renderer(), tagger))
    _point_current_link(instance_dir / "current.log", log_file)

    if also_to_console:
        _attach(root, logging.StreamHandler(), _formatter(structlog.dev.ConsoleRenderer(), tagger))

    _quiet_third_party()
    logging.getLogger("fsactor.logging").info("Instance logging for %s -> %s", instance_name, log_file)
    return log_file
