"""
Application Module for the Storm Track Viewer.

This module wires the components together: the startup pipeline that
loads data, trains the model and prepares the scene, and the controller
that exposes the interactive controls once startup is done.
"""

from application.state import (
    AppConfig,
    AppState,
    StormInfo,
    StormListItem,
    ErrorChart,
    StartupFailure,
)

from application.orchestrator import (
    PipelineOrchestrator,
    ProgressEvent,
    Stage,
)

from application.controller import StormViewerController

__all__ = [
    "AppConfig",
    "AppState",
    "StormInfo",
    "StormListItem",
    "ErrorChart",
    "StartupFailure",
    "PipelineOrchestrator",
    "ProgressEvent",
    "Stage",
    "StormViewerController",
]
