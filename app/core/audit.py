"""Audit/log port handed to services at construction time.

Three sinks mirror how the records are consumed: ``app`` for behaviour,
``audit`` for security and accountability, ``error`` for failures. Emitting an
entry must never break the request that produced it.
"""

import logging
from contextvars import ContextVar
from typing import Any, Dict, Optional

from app.core.config import settings

_SENSITIVE_KEYS = ("password", "token", "secret")

# Per-request who/where, bound by the request middleware and filled in by
# bearer authentication. Shared by reference with threadpool copies.
audit_context_var: ContextVar[Optional[Dict[str, Any]]] = ContextVar("audit_context", default=None)


def bind_request_context(ip_address: str, user_agent: Optional[str]):
    return audit_context_var.set({"ip_address": ip_address, "user_agent": user_agent})


def bind_actor(user_id: str, role: str) -> None:
    context = audit_context_var.get()
    if context is not None:
        context.update(actor_id=user_id, actor_role=role)


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Redact credential-looking fields before they reach a sink."""
    sanitized = {}
    for key, value in data.items():
        if isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)
        elif any(marker in key.lower() for marker in _SENSITIVE_KEYS) and isinstance(value, str):
            sanitized[key] = "***REDACTED***"
        else:
            sanitized[key] = value
    return sanitized


class AuditLogger:
    def __init__(
        self,
        app_logger: Optional[logging.Logger] = None,
        audit_logger: Optional[logging.Logger] = None,
        error_logger: Optional[logging.Logger] = None,
    ):
        self.app_logger = app_logger or logging.getLogger("app")
        self.audit_logger = audit_logger or logging.getLogger("audit")
        self.error_logger = error_logger or logging.getLogger("error")

    def event(self, name: str, **fields: Any) -> None:
        self._emit(self.app_logger, logging.INFO, name, {"event": name, **fields})

    def audit(self, action: str, **fields: Any) -> None:
        self._emit(self.audit_logger, logging.INFO, action, {"action": action, **fields})

    def error(self, error_code: str, exc: Optional[BaseException] = None, **fields: Any) -> None:
        payload = {
            "severity": "ERROR",
            "error_code": error_code,
            "error_type": type(exc).__name__ if exc else "ApplicationError",
            "error_message": str(exc) if exc else None,
            "retryable": False,
            **fields,
        }
        exc_info = exc if exc is not None and not settings.is_production else None
        self._emit(self.error_logger, logging.ERROR, error_code, payload, exc_info=exc_info)

    def _emit(
        self,
        logger: logging.Logger,
        level: int,
        message: str,
        fields: Dict[str, Any],
        exc_info: Optional[BaseException] = None,
    ) -> None:
        payload = {**(audit_context_var.get() or {}), **fields}
        try:
            logger.log(level, message, extra={"audit": sanitize_log_data(payload)}, exc_info=exc_info)
        except Exception:
            logging.getLogger(__name__).debug("Audit sink failure", exc_info=True)
