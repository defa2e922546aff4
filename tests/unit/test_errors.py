"""Tests for the error taxonomy and error reporting."""

import io

from rich.console import Console

from cadpipe.core.exporter import ExportError
from cadpipe.core.validator import ValidationIssue, ValidationSeverity
from cadpipe.errors import (
    DisplayFailed,
    EmptyModel,
    ExportFailed,
    LoggerSetupFailed,
    PipelineError,
    ValidationFailed,
    format_error,
    iter_causes,
    report_error,
)


def export_failure():
    """An ExportFailed caused by an ExportError caused by an OSError."""
    try:
        try:
            try:
                raise PermissionError(13, "Permission denied")
            except PermissionError as e:
                raise ExportError("Failed to write out.stl") from e
        except ExportError as e:
            raise ExportFailed() from e
    except ExportFailed as e:
        return e


class TestErrorTypes:
    """Tests for the error classes."""

    def test_default_messages(self):
        assert str(LoggerSetupFailed()) == "Failed to set up logger"
        assert str(ExportFailed()) == "Error exporting model"
        assert str(DisplayFailed()) == "Error displaying model"
        assert "empty" in str(EmptyModel())

    def test_all_are_pipeline_errors(self):
        for cls in (LoggerSetupFailed, ExportFailed, DisplayFailed, EmptyModel):
            assert issubclass(cls, PipelineError)

    def test_cause(self):
        error = export_failure()

        assert isinstance(error.cause(), ExportError)
        assert EmptyModel().cause() is None

    def test_validation_failed_lists_errors(self):
        issues = [
            ValidationIssue(ValidationSeverity.ERROR, "NOT_WATERTIGHT", "Mesh has holes"),
            ValidationIssue(ValidationSeverity.ERROR, "INVALID_SHAPE", "Bad shape"),
        ]
        error = ValidationFailed(issues)

        assert error.errors == issues
        assert "2 unhandled validation error" in str(error)
        assert "NOT_WATERTIGHT" in str(error)
        assert "INVALID_SHAPE" in str(error)


class TestIterCauses:
    """Tests for cause-chain walking."""

    def test_explicit_chain(self):
        causes = list(iter_causes(export_failure()))

        assert [type(c) for c in causes] == [ExportError, PermissionError]

    def test_no_cause(self):
        assert list(iter_causes(EmptyModel())) == []

    def test_implicit_context(self):
        try:
            try:
                raise KeyError("inner")
            except KeyError:
                raise RuntimeError("outer")
        except RuntimeError as e:
            error = e

        causes = list(iter_causes(error))
        assert len(causes) == 1
        assert isinstance(causes[0], KeyError)

    def test_suppressed_context(self):
        try:
            try:
                raise KeyError("inner")
            except KeyError:
                raise RuntimeError("outer") from None
        except RuntimeError as e:
            error = e

        assert list(iter_causes(error)) == []

    def test_cycle_is_cut(self):
        a = ValueError("a")
        b = ValueError("b")
        a.__cause__ = b
        b.__cause__ = a

        assert list(iter_causes(a)) == [b]


class TestFormatError:
    """Tests for format_error."""

    def test_without_cause(self):
        text = format_error(EmptyModel())

        assert text == str(EmptyModel())
        assert "Caused by" not in text

    def test_with_causes(self):
        text = format_error(export_failure())
        lines = text.splitlines()

        assert lines[0] == "Error exporting model"
        assert lines[1] == ""
        assert lines[2] == "Caused by:"
        assert lines[3] == "    0: Failed to write out.stl"
        assert lines[4].startswith("    1: ")
        assert "Permission denied" in lines[4]
        assert len(lines) == 5

    def test_empty_message_uses_type_name(self):
        error = ExportFailed()
        error.__cause__ = KeyboardInterrupt()

        assert "0: KeyboardInterrupt" in format_error(error)


class TestReportError:
    """Tests for report_error."""

    def test_prints_chain(self):
        buffer = io.StringIO()
        console = Console(file=buffer, width=200, color_system=None)

        report_error(export_failure(), console)

        output = buffer.getvalue()
        assert "Error: Error exporting model" in output
        assert "Caused by:" in output
        assert "[Errno 13] Permission denied" in output
