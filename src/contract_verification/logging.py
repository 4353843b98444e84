"""
Structured logging for contract-verification library.

structlog is layered over the stdlib ``logging`` package so that library events
and third-party records (requests, urllib3) share one renderer.

    from contract_verification.logging import setup_logging, get_logger

    setup_logging()  # once, at process start
    log = get_logger(__name__)
    log.info("Finished loading chains", loc="[INIT_CHAINS]", numberOfChains=8)

Environment:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_FORMAT: "json" (default) or "console"
"""

import logging
import os
import uuid
from typing import Any, Dict, Optional, Union

import structlog
from structlog.processors import JSONRenderer


def _ensure_service(service_name: str):
    def processor(_: logging.Logger, __: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def setup_logging(
    *,
    service_name: str = "contract-verification",
    level: Optional[Union[str, int]] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure structlog and stdlib logging.

    Args:
        service_name: Value injected as "service" into every event
        level: Log level (defaults to $LOG_LEVEL or INFO)
        log_format: "json" or "console" (defaults to $LOG_FORMAT or json)
    """
    level = level or os.getenv("LOG_LEVEL", "").upper() or "INFO"
    log_format = (log_format or os.getenv("LOG_FORMAT", "") or "json").lower()

    processors = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _ensure_service(service_name),
    ]

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = JSONRenderer(sort_keys=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=[structlog.stdlib.add_logger_name, *processors],
        )
    )

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger("urllib3").setLevel(os.getenv("LOG_LEVEL_URLLIB3", "WARNING"))


def get_logger(name: Optional[str] = None) -> Any:
    """Return a structlog logger, bound to the module name if provided."""
    log = structlog.get_logger()
    if name:
        return log.bind(logger=name)
    return log


def new_verification_logger(log: Optional[Any] = None) -> Any:
    """
    Return a logger scoped to one verification.

    Every event emitted through it carries the same random verification_id.
    """
    base = log if log is not None else get_logger("contract_verification")
    return base.bind(verification_id=uuid.uuid4().hex)
