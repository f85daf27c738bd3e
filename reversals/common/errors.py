"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class StageError(PipelineError):
    """Raised for stage failures that reject the whole batch."""

    error_code = "STAGE_ERROR"


class InvalidRecordError(PipelineError):
    """Raised when a raw reversal request cannot be normalised."""

    error_code = "INVALID_RECORD"


class InvalidDateFormat(InvalidRecordError):
    """Raised when a date or time string does not match its locale pattern."""

    error_code = "INVALID_DATE_FORMAT"

    def __init__(self, text: object, location: object, pattern: str | None) -> None:
        self.text = text
        self.location = location
        self.pattern = pattern
        expected = pattern or "<no format for location>"
        super().__init__(f"{text!r} does not match {expected} for location {location}")
