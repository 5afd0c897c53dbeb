"""
Exception hierarchy for the storm track viewer.

Recoverable failures (dataset source, preferred torch device, a single
city's weather) are handled where they occur. Model build and training
failures are fatal to startup and surface through the orchestrator.
"""


class StormViewerError(Exception):
    """Base class for all errors raised by this package."""


class DatasetError(StormViewerError):
    """The storm dataset is missing, unreadable or malformed."""


class BackendInitError(StormViewerError):
    """No usable numeric backend could be initialized."""


class ModelBuildError(StormViewerError):
    """The regression model could not be constructed."""


class TrainingError(StormViewerError):
    """Fitting the regression model failed."""


class WeatherFetchError(StormViewerError):
    """A weather request failed or returned an unusable payload."""
