"""
Logging Configuration and Startup Audit.

``get_logger`` is the package-wide logger factory. ``AuditLogger`` keeps a
record of each startup run: the configuration hash, every progress
checkpoint the pipeline reported and every forecast value that
denormalization had to clamp back into its physical range.
"""

import hashlib
import json
import logging
import sys
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Get a logger configured for the storm track viewer.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int
        Logging level.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger


def config_hash(config: Dict[str, Any]) -> str:
    """First 16 hex characters of the SHA-256 of the sorted JSON form."""
    encoded = json.dumps(config, sort_keys=True, default=str).encode()
    return hashlib.sha256(encoded).hexdigest()[:16]


@dataclass
class ClampEvent:
    """A forecast value pulled back into its physical range.

    Attributes
    ----------
    field_name : str
        ``wind_speed`` or ``central_pressure``.
    original : float
        Denormalized value before clamping.
    clamped : float
        Value after clamping.
    context : dict
        Where it happened (forecast index, storm ID).
    at : datetime
        Wall-clock time of the event.
    """
    field_name: str
    original: float
    clamped: float
    context: Dict[str, Any] = field(default_factory=dict)
    at: datetime = field(default_factory=datetime.now)

    @property
    def magnitude(self) -> float:
        return abs(self.clamped - self.original)


@dataclass
class StageCheckpoint:
    stage: str
    message: str
    percent: int
    at: datetime = field(default_factory=datetime.now)


@dataclass
class StartupRun:
    """Everything recorded for one startup run."""
    run_id: str
    config_hash: str = ""
    started: datetime = field(default_factory=datetime.now)
    finished: Optional[datetime] = None
    checkpoints: List[StageCheckpoint] = field(default_factory=list)
    clamps: List[ClampEvent] = field(default_factory=list)

    def clamp_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for event in self.clamps:
            counts[event.field_name] = counts.get(event.field_name, 0) + 1
        return counts


class AuditLogger:
    """Audit records for startup runs.

    One instance lives on the application state and is handed to the
    components that report into it. Records made outside an open run are
    logged but not kept.

    Examples
    --------
    >>> audit = AuditLogger()
    >>> with audit.run_context("startup"):
    ...     audit.record_clamp("wind_speed", 212.0, 180.0)
    >>> audit.summary("startup")["clamp_count"]
    1
    """

    def __init__(self):
        self._runs: Dict[str, StartupRun] = {}
        self._active: Optional[StartupRun] = None
        self._logger = get_logger("audit")

    @property
    def current_run(self) -> Optional[StartupRun]:
        return self._active

    def run(self, run_id: str) -> StartupRun:
        """Look up a recorded run; raises ``KeyError`` if unknown."""
        if run_id not in self._runs:
            raise KeyError(f"No run found with ID {run_id}")
        return self._runs[run_id]

    @contextmanager
    def run_context(
        self,
        run_id: str,
        config: Optional[Dict[str, Any]] = None
    ) -> Iterator[StartupRun]:
        """Open a run for the duration of the block.

        Parameters
        ----------
        run_id : str
            Identifier of the run; reusing one replaces the earlier record.
        config : dict, optional
            Configuration whose hash is stored with the run.
        """
        run = StartupRun(run_id=run_id, config_hash=config_hash(config) if config else "")
        self._runs[run_id] = run
        self._active = run
        self._logger.info(f"Starting run {run_id} (config {run.config_hash or 'n/a'})")

        try:
            yield run
        finally:
            run.finished = datetime.now()
            self._active = None
            self._logger.info(
                f"Finished run {run_id}: {len(run.checkpoints)} checkpoints, "
                f"{len(run.clamps)} clamped values"
            )

    def record_stage(self, stage: str, message: str, percent: int) -> None:
        if self._active is not None:
            self._active.checkpoints.append(StageCheckpoint(stage, message, percent))

    def record_clamp(
        self,
        field_name: str,
        original: float,
        clamped: float,
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record one clamped forecast value."""
        if self._active is not None:
            self._active.clamps.append(ClampEvent(field_name, original, clamped, context or {}))
        self._logger.debug(f"CLAMP | {field_name} | {original:.4f} -> {clamped:.4f}")

    def summary(self, run_id: str) -> Dict[str, Any]:
        run = self.run(run_id)
        return {
            "run_id": run.run_id,
            "config_hash": run.config_hash,
            "started": run.started.isoformat(),
            "finished": run.finished.isoformat() if run.finished else None,
            "stages": [c.stage for c in run.checkpoints],
            "clamp_count": len(run.clamps),
            "clamps_by_field": run.clamp_counts(),
        }

    def export(self, run_id: str, output_path: Path) -> None:
        """Write the full record of a run to a JSON file."""
        record = asdict(self.run(run_id))
        with open(output_path, 'w') as f:
            json.dump(record, f, indent=2, default=str)
        self._logger.info(f"Exported audit record for {run_id} to {output_path}")
