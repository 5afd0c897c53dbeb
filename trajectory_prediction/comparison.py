"""
Synthetic Comparison Tracks.

The ECMWF and GFS tracks shown next to the learned forecast are not model
output. Each is the ground-truth track with uniform noise added to the
position, scaled by ``coefficient * sqrt(i)`` so that error grows with lead
time at a different rate for each stand-in. Index 0 is never perturbed.

Intensity, pressure and timestamps are copied unchanged, and the output is
always exactly as long as the input.
"""

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

import numpy as np

from common.constants import TrackConstants
from common.types import TrackPoint


@dataclass(frozen=True)
class ComparisonProfile:
    """Noise profile of one comparison stand-in.

    Attributes
    ----------
    name : str
        Model name.
    error_growth : float
        Coefficient of ``sqrt(i)`` in the error scale, in degrees.
    lat_factor : float
        Multiplier applied to the latitude perturbation.
    lon_factor : float
        Multiplier applied to the longitude perturbation.
    """
    name: str
    error_growth: float
    lat_factor: float
    lon_factor: float

    def error_scale(self, index: int) -> float:
        return self.error_growth * np.sqrt(index)


ECMWF_PROFILE = ComparisonProfile(
    name="ecmwf",
    error_growth=TrackConstants.ECMWF_ERROR_GROWTH.value,
    lat_factor=0.6,
    lon_factor=1.0,
)

GFS_PROFILE = ComparisonProfile(
    name="gfs",
    error_growth=TrackConstants.GFS_ERROR_GROWTH.value,
    lat_factor=0.7,
    lon_factor=0.7,
)


@dataclass(frozen=True)
class ComparisonTracks:
    """The two comparison sequences for one storm."""
    ecmwf: Tuple[TrackPoint, ...]
    gfs: Tuple[TrackPoint, ...]


def perturb_track(
    track: Sequence[TrackPoint],
    profile: ComparisonProfile,
    rng: np.random.Generator
) -> Tuple[TrackPoint, ...]:
    """Apply one profile's lead-time noise to a track.

    Parameters
    ----------
    track : sequence of TrackPoint
        Ground-truth track.
    profile : ComparisonProfile
        Noise profile.
    rng : numpy.random.Generator
        Random source.

    Returns
    -------
    tuple of TrackPoint
        Perturbed track of the same length.
    """
    perturbed = []
    for i, point in enumerate(track):
        e = profile.error_scale(i)
        d_lat = rng.uniform(-0.5, 0.5) * e * profile.lat_factor
        d_lon = rng.uniform(-0.5, 0.5) * e * profile.lon_factor
        perturbed.append(replace(
            point,
            latitude=point.latitude + d_lat,
            longitude=point.longitude + d_lon,
        ))
    return tuple(perturbed)


def generate_comparison(
    actual_track: Sequence[TrackPoint],
    rng: Optional[np.random.Generator] = None
) -> ComparisonTracks:
    """Generate the ECMWF and GFS stand-in tracks from the ground truth.

    Parameters
    ----------
    actual_track : sequence of TrackPoint
        Ground-truth track.
    rng : numpy.random.Generator, optional
        Random source; a fresh unseeded generator if omitted.

    Returns
    -------
    ComparisonTracks
        Both sequences, each exactly ``len(actual_track)`` long.
    """
    rng = rng if rng is not None else np.random.default_rng()
    return ComparisonTracks(
        ecmwf=perturb_track(actual_track, ECMWF_PROFILE, rng),
        gfs=perturb_track(actual_track, GFS_PROFILE, rng),
    )
