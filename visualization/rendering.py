"""
Render Backend Contract.

The scene manager does not draw anything itself. It asks a render backend
to create retained drawing resources (a tube along a path, a sphere
marker) and later to dispose of them. A real 3D backend implements this
contract; ``InMemoryRenderBackend`` keeps every resource in a dictionary,
which is what headless runs and the tests use.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Dict, Optional

import numpy as np
from numpy.typing import NDArray

from common.logging_config import get_logger

logger = get_logger(__name__)


class ResourceKind(Enum):
    """Kind of retained drawing resource."""
    PATH = "path"
    MARKER = "marker"
    GLOW = "glow"


@dataclass
class RenderResource:
    """A retained drawing resource created by a backend.

    Attributes
    ----------
    handle : int
        Backend-assigned identifier.
    kind : ResourceKind
        Path, marker or glow.
    tag : str
        Source the resource was drawn for (``ai``, ``actual``, ...).
    color : str
        Hex colour.
    radius : float
        Tube radius (paths) or sphere radius (markers).
    opacity : float
        Opacity in [0, 1].
    vertices : ndarray, optional
        Sampled path vertices (N, 3) for paths.
    position : ndarray, optional
        Centre (3,) for markers.
    disposed : bool
        Whether the resource has been released.
    """
    handle: int
    kind: ResourceKind
    tag: str
    color: str
    radius: float
    opacity: float = 1.0
    vertices: Optional[NDArray[np.float64]] = None
    position: Optional[NDArray[np.float64]] = None
    disposed: bool = False


class RenderBackend(ABC):
    """Abstract drawing backend used by the scene manager."""

    @abstractmethod
    def create_path(
        self,
        vertices: NDArray[np.float64],
        color: str,
        radius: float,
        opacity: float,
        tag: str
    ) -> RenderResource:
        """Create a tube along sampled path vertices."""
        pass

    @abstractmethod
    def create_marker(
        self,
        position: NDArray[np.float64],
        color: str,
        radius: float,
        opacity: float,
        tag: str,
        kind: ResourceKind = ResourceKind.MARKER
    ) -> RenderResource:
        """Create a sphere marker at a position."""
        pass

    @abstractmethod
    def dispose(self, resource: RenderResource) -> None:
        """Detach a resource from the scene and release it."""
        pass

    def set_background(self, color: str) -> None:
        """Set the scene background colour."""
        pass


class InMemoryRenderBackend(RenderBackend):
    """Backend that records resources without drawing them.

    Attributes
    ----------
    live : dict
        Resources created and not yet disposed, keyed by handle.
    created_count : int
        Total resources ever created.
    disposed_count : int
        Total resources ever disposed.
    background : str, optional
        Last background colour set.
    """

    def __init__(self):
        self.live: Dict[int, RenderResource] = {}
        self.created_count = 0
        self.disposed_count = 0
        self.background: Optional[str] = None
        self._handles = count(1)

    def _register(self, resource: RenderResource) -> RenderResource:
        self.live[resource.handle] = resource
        self.created_count += 1
        return resource

    def create_path(
        self,
        vertices: NDArray[np.float64],
        color: str,
        radius: float,
        opacity: float,
        tag: str
    ) -> RenderResource:
        return self._register(RenderResource(
            handle=next(self._handles),
            kind=ResourceKind.PATH,
            tag=tag,
            color=color,
            radius=radius,
            opacity=opacity,
            vertices=np.asarray(vertices, dtype=np.float64),
        ))

    def create_marker(
        self,
        position: NDArray[np.float64],
        color: str,
        radius: float,
        opacity: float,
        tag: str,
        kind: ResourceKind = ResourceKind.MARKER
    ) -> RenderResource:
        return self._register(RenderResource(
            handle=next(self._handles),
            kind=kind,
            tag=tag,
            color=color,
            radius=radius,
            opacity=opacity,
            position=np.asarray(position, dtype=np.float64),
        ))

    def dispose(self, resource: RenderResource) -> None:
        if resource.disposed:
            return
        if self.live.pop(resource.handle, None) is None:
            logger.warning(f"Disposing unknown resource {resource.handle}")
        resource.disposed = True
        self.disposed_count += 1

    def set_background(self, color: str) -> None:
        self.background = color
