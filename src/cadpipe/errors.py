"""
Error taxonomy and error reporting for the model-processing pipeline.

Every failure the pipeline can end in is a subclass of PipelineError.
Underlying errors are attached with ``raise ... from cause`` and rendered
together with the top-level message by format_error().
"""

from typing import Iterator, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape


class PipelineError(Exception):
    """Base class for all errors returned by the pipeline."""

    default_message = "Model processing failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    def cause(self) -> Optional[BaseException]:
        """Return the error that directly caused this one, if any."""
        return self.__cause__


class LoggerSetupFailed(PipelineError):
    """Logging could not be initialized for a reason other than being set up already."""

    default_message = "Failed to set up logger"


class ValidationFailed(PipelineError):
    """The geometry kernel reported validation errors."""

    def __init__(self, errors: Sequence):
        self.errors = list(errors)
        lines = [f"Model has {len(self.errors)} unhandled validation error(s):"]
        lines.extend(f"  - {error}" for error in self.errors)
        super().__init__("\n".join(lines))


class InvalidTolerance(PipelineError, ValueError):
    """A tolerance value was not a finite, strictly positive number."""

    def __init__(self, value, message: Optional[str] = None):
        self.value = value
        super().__init__(message or f"Tolerance must be a positive number, got {value!r}")


class ArgsError(PipelineError, ValueError):
    """Command-line arguments could not be converted."""


class ToleranceParseFailed(ArgsError):
    """The tolerance argument is not a number."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Error parsing tolerance: {text!r} is not a number")


class InvalidToleranceArgument(ArgsError, InvalidTolerance):
    """The tolerance argument is a number, but not a valid tolerance."""

    def __init__(self, text: str, value: float):
        self.text = text
        super().__init__(value, f"Invalid tolerance: {text!r}")


class EmptyModel(PipelineError):
    """The model has zero size along every axis."""

    default_message = "The model is empty or has zero size; cannot compute tolerance"


class ExportFailed(PipelineError):
    """The exporter could not write the mesh."""

    default_message = "Error exporting model"


class DisplayFailed(PipelineError):
    """The viewer could not display the mesh."""

    default_message = "Error displaying model"


def iter_causes(error: BaseException) -> Iterator[BaseException]:
    """
    Yield the causes of an error, nearest first.

    Follows explicit causes (``raise ... from``) and implicit context unless
    the context was suppressed. Stops on cycles.
    """
    seen = {id(error)}
    current: Optional[BaseException] = error

    while current is not None:
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None

        if current is None or id(current) in seen:
            return

        seen.add(id(current))
        yield current


def format_error(error: BaseException) -> str:
    """
    Render an error together with its cause chain.

    Example output::

        Error exporting model

        Caused by:
            0: Failed to write /tmp/out.stl
            1: [Errno 13] Permission denied: '/tmp/out.stl'
    """
    lines: List[str] = [str(error) or type(error).__name__]
    causes = list(iter_causes(error))

    if causes:
        lines.append("")
        lines.append("Caused by:")

    for i, cause in enumerate(causes):
        lines.append(f"    {i}: {str(cause) or type(cause).__name__}")

    return "\n".join(lines)


def report_error(error: BaseException, console: Optional[Console] = None) -> None:
    """Print the rendered error to stderr."""
    console = console or Console(stderr=True)
    console.print(f"[red]Error:[/red] {escape(format_error(error))}", highlight=False)
