"""Error Hierarchy - verifies codes, categories, statuses and severities."""

from student_api.core.errors import (
    ConfigFileNotFoundError, ConfigInvalidError, ConfigPathMissingError,
    DrainTimeoutError, EmptyBodyError, EnvelopeEncodingError, ErrorCategory,
    ErrorSeverity, MalformedBodyError, SchemaMismatchError, ServerCrashedError,
    ServerStartupError, StudentAPIError,
)


def test_request_errors_are_recoverable_validation_errors():
    for exc in (EmptyBodyError(), MalformedBodyError("x"), SchemaMismatchError("y")):
        assert exc.category == ErrorCategory.VALIDATION
        assert exc.severity == ErrorSeverity.WARNING
        assert exc.http_status == 400


def test_config_errors_are_critical():
    for exc in (
        ConfigPathMissingError(),
        ConfigFileNotFoundError("/etc/missing.yaml"),
        ConfigInvalidError("bad"),
    ):
        assert exc.category == ErrorCategory.CONFIGURATION
        assert exc.severity == ErrorSeverity.CRITICAL


def test_codes_are_distinct():
    errors = [
        ConfigPathMissingError(), ConfigFileNotFoundError("p"),
        ConfigInvalidError("m"), EmptyBodyError(), MalformedBodyError("m"),
        SchemaMismatchError("m"), EnvelopeEncodingError("m"),
        ServerStartupError("a:1", "m"), ServerCrashedError("m"),
        DrainTimeoutError(5, 1),
    ]
    codes = [e.code for e in errors]
    assert len(set(codes)) == len(codes)
    assert all(isinstance(e, StudentAPIError) for e in errors)


def test_drain_timeout_reports_grace_period_and_pending():
    exc = DrainTimeoutError(5.0, 2)
    assert exc.category == ErrorCategory.TIMEOUT
    assert "5s" in exc.message
    assert "2 request(s)" in exc.message
    assert exc.pending == 2


def test_startup_error_keeps_address():
    exc = ServerStartupError("127.0.0.1:80", "Permission denied")
    assert exc.address == "127.0.0.1:80"
    assert "127.0.0.1:80" in str(exc)
