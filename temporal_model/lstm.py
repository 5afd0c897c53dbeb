"""
Stacked LSTM Regressor for Next-Point Track Prediction.

This module implements the numeric backend of the track predictor: a
sequence-to-point regressor that reads five normalized track points and
estimates the sixth.

Architecture
------------
1. LSTM (32 units, full sequence output)
2. Dropout (0.2)
3. LSTM (16 units, last step only)
4. Dense (8 units, ReLU)
5. Dense (4 units, linear) -> [lat, lon, wind, pressure]

Trained with Adam and mean squared error.

Backend Selection
-----------------
The preferred torch device (CUDA by default) is tried first. If it cannot
be initialized the CPU device is used instead and a warning is logged.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np
from numpy.typing import NDArray

import torch
import torch.nn as nn
import torch.nn.functional as F
from torch.utils.data import DataLoader, TensorDataset

from common.errors import BackendInitError, TrainingError
from common.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class RegressorConfig:
    """Configuration for the LSTM regressor.

    Attributes
    ----------
    input_length : int
        Context points per example.
    num_features : int
        Features per point.
    lstm_units_1 : int
        Units in the first LSTM layer.
    lstm_units_2 : int
        Units in the second LSTM layer.
    dense_units : int
        Units in the hidden dense layer.
    dropout : float
        Dropout probability between the LSTM layers.
    learning_rate : float
        Adam learning rate.
    epochs : int
        Training epochs.
    batch_size : int
        Mini-batch size.
    validation_split : float
        Fraction of examples (taken from the end) held out for validation.
    shuffle : bool
        Whether to shuffle training batches each epoch.
    preferred_device : str
        Torch device tried first.
    fallback_device : str
        Torch device used when the preferred one fails.
    random_seed : int, optional
        Seed for weight initialization and batch shuffling.
    """
    input_length: int = 5
    num_features: int = 4
    lstm_units_1: int = 32
    lstm_units_2: int = 16
    dense_units: int = 8
    dropout: float = 0.2
    learning_rate: float = 0.001
    epochs: int = 15
    batch_size: int = 32
    validation_split: float = 0.1
    shuffle: bool = True
    preferred_device: str = "cuda"
    fallback_device: str = "cpu"
    random_seed: Optional[int] = None


@dataclass
class EpochResult:
    """Outcome of one training epoch.

    Attributes
    ----------
    epoch : int
        Zero-based epoch index.
    epochs : int
        Total epochs scheduled.
    loss : float
        Mean training loss.
    val_loss : float, optional
        Mean validation loss, if a validation split was held out.
    """
    epoch: int
    epochs: int
    loss: float
    val_loss: Optional[float] = None


class SequenceRegressor(ABC):
    """Contract for a next-point regressor.

    ``fit`` is a generator so callers can report progress and yield control
    between epochs; it is exhausted when training is complete.
    """

    @abstractmethod
    def fit(
        self,
        sequences: NDArray[np.float64],
        targets: NDArray[np.float64]
    ) -> Iterator[EpochResult]:
        """Fit on (N, 5, 4) sequences and (N, 4) targets, yielding per epoch."""
        pass

    @abstractmethod
    def predict_next(self, window: NDArray[np.float64]) -> NDArray[np.float64]:
        """Estimate the next normalized point from a (5, 4) window."""
        pass

    def dispose(self) -> None:
        """Release model resources."""
        pass


def _device_available(device: torch.device) -> bool:
    if device.type == 'cuda':
        return torch.cuda.is_available()
    if device.type == 'mps':
        mps = getattr(torch.backends, 'mps', None)
        return bool(mps is not None and mps.is_available())
    return True


def _try_device(name: str) -> torch.device:
    device = torch.device(name)
    if not _device_available(device):
        raise RuntimeError(f"Device {name!r} is not available")
    # Touch the device so driver errors surface here, not mid-training
    torch.zeros(1, device=device)
    return device


def select_device(preferred: str = "cuda", fallback: str = "cpu") -> torch.device:
    """Initialize the preferred torch device, falling back if it fails.

    Parameters
    ----------
    preferred : str
        Device tried first (e.g. ``"cuda"``, ``"mps"``, ``"cpu"``).
    fallback : str
        Device used when the preferred one cannot be initialized.

    Returns
    -------
    torch.device
        The initialized device.

    Raises
    ------
    BackendInitError
        If neither device can be initialized.
    """
    try:
        return _try_device(preferred)
    except (RuntimeError, ValueError) as e:
        logger.warning(f"{preferred} backend failed ({e}), falling back to {fallback}")

    try:
        return _try_device(fallback)
    except (RuntimeError, ValueError) as e:
        raise BackendInitError(f"No usable torch backend: {e}") from e


class TrackLSTM(nn.Module):
    """Two-layer LSTM followed by a small dense head."""

    def __init__(self, config: RegressorConfig):
        super().__init__()

        self.lstm1 = nn.LSTM(
            input_size=config.num_features,
            hidden_size=config.lstm_units_1,
            batch_first=True
        )
        self.dropout = nn.Dropout(config.dropout)
        self.lstm2 = nn.LSTM(
            input_size=config.lstm_units_1,
            hidden_size=config.lstm_units_2,
            batch_first=True
        )
        self.dense = nn.Linear(config.lstm_units_2, config.dense_units)
        self.output = nn.Linear(config.dense_units, config.num_features)

        self._init_weights()

    def _init_weights(self) -> None:
        for lstm in (self.lstm1, self.lstm2):
            for name, param in lstm.named_parameters():
                if name.startswith('weight'):
                    nn.init.xavier_uniform_(param)
                else:
                    nn.init.zeros_(param)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Parameters
        ----------
        x : torch.Tensor
            Normalized context windows (B, T, 4).

        Returns
        -------
        torch.Tensor
            Normalized next-point estimates (B, 4).
        """
        out, _ = self.lstm1(x)
        out = self.dropout(out)
        out, _ = self.lstm2(out)
        last = out[:, -1, :]
        return self.output(F.relu(self.dense(last)))


class TorchSequenceRegressor(SequenceRegressor):
    """LSTM regressor trained with torch.

    Parameters
    ----------
    config : RegressorConfig
        Architecture and training configuration.
    device : torch.device, optional
        Device to place the model on. Defaults to CPU.
    """

    def __init__(self, config: RegressorConfig, device: Optional[torch.device] = None):
        self.config = config
        self.device = device or torch.device('cpu')
        self._logger = get_logger("TorchSequenceRegressor")

        if config.random_seed is not None:
            torch.manual_seed(config.random_seed)

        self.model: Optional[TrackLSTM] = TrackLSTM(config).to(self.device)
        self.optimizer = torch.optim.Adam(self.model.parameters(), lr=config.learning_rate)

        num_params = sum(p.numel() for p in self.model.parameters())
        self._logger.info(f"Built TrackLSTM with {num_params} parameters on {self.device}")

    def fit(
        self,
        sequences: NDArray[np.float64],
        targets: NDArray[np.float64]
    ) -> Iterator[EpochResult]:
        """Train the model, yielding one ``EpochResult`` per epoch.

        Transient tensors are released when the generator finishes or is
        closed early.

        Raises
        ------
        TrainingError
            If there are no examples or the shapes are inconsistent.
        """
        if self.model is None:
            raise TrainingError("Regressor has been disposed")

        x = torch.as_tensor(np.asarray(sequences), dtype=torch.float32)
        y = torch.as_tensor(np.asarray(targets), dtype=torch.float32)

        if x.ndim != 3 or y.ndim != 2 or len(x) != len(y) or len(x) == 0:
            raise TrainingError(
                f"Invalid training data: sequences {tuple(x.shape)}, targets {tuple(y.shape)}"
            )

        cfg = self.config
        num_val = int(len(x) * cfg.validation_split)
        num_train = len(x) - num_val
        if num_train == 0:
            raise TrainingError("Validation split leaves no training examples")

        generator = torch.Generator()
        if cfg.random_seed is not None:
            generator.manual_seed(cfg.random_seed)

        train_loader = DataLoader(
            TensorDataset(x[:num_train], y[:num_train]),
            batch_size=cfg.batch_size,
            shuffle=cfg.shuffle,
            generator=generator
        )
        val_x = x[num_train:].to(self.device)
        val_y = y[num_train:].to(self.device)

        try:
            for epoch in range(cfg.epochs):
                self.model.train()
                total = 0.0
                for xb, yb in train_loader:
                    xb = xb.to(self.device)
                    yb = yb.to(self.device)

                    self.optimizer.zero_grad()
                    loss = F.mse_loss(self.model(xb), yb)
                    loss.backward()
                    self.optimizer.step()

                    total += loss.item() * len(xb)

                train_loss = total / num_train
                if not np.isfinite(train_loss):
                    raise TrainingError(f"Training diverged at epoch {epoch + 1}")

                val_loss = None
                if num_val > 0:
                    self.model.eval()
                    with torch.no_grad():
                        val_loss = F.mse_loss(self.model(val_x), val_y).item()

                yield EpochResult(epoch=epoch, epochs=cfg.epochs, loss=train_loss, val_loss=val_loss)
        finally:
            del x, y, val_x, val_y, train_loader
            if self.device.type == 'cuda':
                torch.cuda.empty_cache()
            self.model.eval()

    def predict_next(self, window: NDArray[np.float64]) -> NDArray[np.float64]:
        """Estimate the next normalized point from one (5, 4) window."""
        if self.model is None:
            raise RuntimeError("Regressor has been disposed")

        self.model.eval()
        with torch.no_grad():
            inp = torch.as_tensor(np.asarray(window), dtype=torch.float32)
            inp = inp.unsqueeze(0).to(self.device)
            out = self.model(inp)
        return out.squeeze(0).cpu().numpy().astype(np.float64)

    def dispose(self) -> None:
        self.model = None
        self.optimizer = None
        if self.device.type == 'cuda':
            torch.cuda.empty_cache()
