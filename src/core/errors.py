"""Error taxonomy for sample sources and the assessment engine."""


class PaddleConditionsError(Exception):
    """Base exception for this package."""

    pass


class SourceError(PaddleConditionsError):
    """A sample source could not provide data."""

    def __init__(self, message: str, source: str = ""):
        super().__init__(message)
        self.source = source


class SourceUnavailable(SourceError):
    """Network failure or non-success HTTP status from an upstream provider."""

    pass


class EmptyData(SourceError):
    """The provider answered but returned zero usable samples."""

    pass


class ConfigurationMissing(SourceError):
    """A required credential or setting is absent."""

    pass


class DataQualityDefect(PaddleConditionsError):
    """Degenerate input such as duplicate tide timestamps.

    Never raised to callers: the engine synthesises a replacement, logs the
    defect and records its message on the affected TideState.
    """

    pass
