import logging

from app.core.audit import AuditLogger, sanitize_log_data


class ExplodingLogger(logging.Logger):
    def log(self, *args, **kwargs):
        raise RuntimeError("sink down")


def test_sanitize_redacts_credentials():
    cleaned = sanitize_log_data(
        {
            "password": "p",
            "refresh_token": "t",
            "context": {"client_secret": "s", "user_id": "u1"},
            "user_id": "u1",
        }
    )
    assert cleaned["password"] == "***REDACTED***"
    assert cleaned["refresh_token"] == "***REDACTED***"
    assert cleaned["context"] == {"client_secret": "***REDACTED***", "user_id": "u1"}
    assert cleaned["user_id"] == "u1"


def test_audit_entries_go_to_audit_logger(caplog):
    caplog.set_level(logging.INFO, logger="audit")
    AuditLogger().audit("USER_LOGIN", resource_id="u1", result="SUCCESS", password="secret")

    record = next(r for r in caplog.records if r.name == "audit")
    assert record.getMessage() == "USER_LOGIN"
    assert record.audit["action"] == "USER_LOGIN"
    assert record.audit["resource_id"] == "u1"
    assert record.audit["password"] == "***REDACTED***"


def test_error_entries_carry_exception_details(caplog):
    caplog.set_level(logging.ERROR, logger="error")
    AuditLogger().error("LOGIN_USER_ERROR", exc=ValueError("boom"), user_id="u1")

    record = next(r for r in caplog.records if r.name == "error")
    assert record.levelno == logging.ERROR
    assert record.audit["error_type"] == "ValueError"
    assert record.audit["error_message"] == "boom"
    assert record.exc_info is not None


def test_broken_sink_never_raises():
    audit = AuditLogger(
        app_logger=ExplodingLogger("app-test"),
        audit_logger=ExplodingLogger("audit-test"),
        error_logger=ExplodingLogger("error-test"),
    )
    audit.event("FETCH_ALL_UNITS", count=1)
    audit.audit("CREATE_UNIT")
    audit.error("CREATE_UNIT_ERROR", exc=RuntimeError("x"))
