from dataclasses import dataclass
import numpy as np


@dataclass
class MLDataset:
    """Simple container for ML data - a features x instances matrix X and 0/1 labels y."""
    X: np.ndarray
    y: np.ndarray
    metadata: dict = None

    def __post_init__(self):
        """Validate that X has one column per label."""
        if self.X.ndim != 2:
            raise ValueError(f"X must be 2D (features x instances). Got shape {self.X.shape}")
        if self.X.shape[1] != len(self.y):
            raise ValueError(f"X must have one column per label. Got X: {self.X.shape[1]} columns, y: {len(self.y)}")

        # Initialize empty metadata if None
        if self.metadata is None:
            self.metadata = {}

    def __len__(self) -> int:
        return len(self.y)

    @property
    def n_anomalous(self) -> int:
        return int(np.sum(self.y == 1))

    @property
    def n_normal(self) -> int:
        return int(np.sum(self.y == 0))
