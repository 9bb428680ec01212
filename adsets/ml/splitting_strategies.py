import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Collection, Iterator, Optional, Tuple, Union

import numpy as np

from adsets.errors import EmptyDataError, InvalidVariantError
from adsets.ml.dataset import MLDataset
from adsets.objects.dataset import ADDataset
from adsets.processing.normalization import standardize_pair

logger = logging.getLogger(__name__)

#: None pools every anomaly group, a str selects one group, a collection selects several.
Difficulty = Union[None, str, Collection[str]]


@dataclass
class TrainTestSplit:
    """A container for train and test datasets."""
    train: MLDataset
    test: MLDataset

    def __iter__(self) -> Iterator[np.ndarray]:
        """Unpack as train_X, train_y, test_X, test_y."""
        return iter((self.train.X, self.train.y, self.test.X, self.test.y))


@dataclass
class ValTestSplit:
    """A container for validation and test datasets."""
    val: MLDataset
    test: MLDataset

    def __iter__(self) -> Iterator[np.ndarray]:
        """Unpack as val_X, val_y, test_X, test_y."""
        return iter((self.val.X, self.val.y, self.test.X, self.test.y))


@dataclass
class TrainValTestSplit:
    """A container for train, validation, and test datasets."""
    train: MLDataset
    val: MLDataset
    test: MLDataset


def _labels(n_normal: int, n_anomalous: int) -> np.ndarray:
    return np.concatenate([np.zeros(n_normal, dtype=int), np.ones(n_anomalous, dtype=int)])


def select_anomalous(dataset: ADDataset, difficulty: Difficulty = None) -> np.ndarray:
    """
    Pool the anomalous instances of the requested difficulty.

    Args:
        dataset: The dataset to take anomalies from.
        difficulty: None for all anomaly groups, a group name, or a collection of group
                    names, of which only the anomaly groups are used. Groups are always
                    pooled in the dataset's group order.

    Returns:
        The pooled anomalies, features x instances.

    Raises:
        InvalidVariantError: If a single requested group is not an anomaly group of dataset.
        EmptyDataError: If the pooled anomalies have no instances.
    """
    available = dataset.anomaly_groups
    if difficulty is None:
        names = list(available)
    elif isinstance(difficulty, str):
        if difficulty not in available:
            raise InvalidVariantError(f"Unknown difficulty '{difficulty}', must be one of {list(available)}")
        names = [difficulty]
    else:
        # names that are not anomaly groups are ignored
        requested = set(difficulty)
        names = [name for name in available if name in requested]

    parts = [dataset[name] for name in names if dataset[name].shape[1] > 0]
    if not parts:
        raise EmptyDataError(f"No anomalous data of difficulty {difficulty!r} in {dataset!r}")
    return np.concatenate(parts, axis=1)


def split_sizes(n_normal: int, n_anomalous: int, p: float, contamination: float,
                test_contamination: Optional[float] = None) -> Tuple[int, int, int]:
    """
    Number of training normals, training anomalies and testing anomalies.

    Contamination is the ratio of anomalous to normal instances in the training set.
    At most half of the anomalies are used for training, and unless test_contamination
    is given, all the remaining ones are used for testing.
    """
    n_train = int(np.floor(p * n_normal))
    n_train_anomalous = min(int(np.floor(n_train * contamination)), n_anomalous // 2)
    if test_contamination is None:
        n_test_anomalous = n_anomalous - n_train_anomalous
    else:
        n_test_anomalous = min(int(np.floor(test_contamination * (n_normal - n_train))),
                               n_anomalous - n_train_anomalous)
    return n_train, n_train_anomalous, n_test_anomalous


def _check_ratio(name: str, value: Optional[float]) -> None:
    if value is not None and not 0 <= value <= 1:
        raise ValueError(f"{name} must be in [0, 1], got {value}")


class DatasetSplitter(ABC):
    """
    Abstract base class for dataset splitting strategies.
    """
    @abstractmethod
    def split(self, dataset: ADDataset, seed: Optional[int] = None,
              rng: Optional[np.random.Generator] = None) -> TrainTestSplit:
        """
        Splits a dataset into training and testing sets.

        Args:
            dataset (ADDataset): The dataset to split.
            seed (int): Seed for the random generator used by this call only.
            rng (np.random.Generator): An explicit random generator, instead of seed.

        Returns:
            TrainTestSplit: An object containing the training and testing datasets.
        """
        pass


class ContaminationSplitter(DatasetSplitter):
    """
    Splits an anomaly detection dataset into a training set with a controlled share of
    anomalies and a testing set holding the remaining normal data and anomalies.

    Normal and anomalous instances are shuffled independently, the training set takes
    the first train_ratio of the normal instances plus
    min(floor(n_train * contamination), floor(n_anomalous / 2)) anomalies. Columns are
    ordered normal first, then anomalous, in both sets.
    """

    def __init__(self, train_ratio: float = 0.8, contamination: float = 0.0,
                 test_contamination: Optional[float] = None, difficulty: Difficulty = None,
                 standardize: bool = False):
        """
        Initialize the contamination splitter.

        Args:
            train_ratio: Proportion of normal data for training (default 0.8)
            contamination: Anomalous to normal ratio of the training set (default 0.0)
            test_contamination: Anomalous to normal ratio of the testing set, None to use
                                all remaining anomalies
            difficulty: Anomaly groups to sample from, see select_anomalous
            standardize: Standardize normal and anomalous data jointly after shuffling

        Raises:
            ValueError: If a ratio is outside [0, 1]
        """
        _check_ratio("train_ratio", train_ratio)
        _check_ratio("contamination", contamination)
        _check_ratio("test_contamination", test_contamination)

        self.train_ratio = train_ratio
        self.contamination = contamination
        self.test_contamination = test_contamination
        self.difficulty = difficulty
        self.standardize = standardize

    def split(self, dataset: ADDataset, seed: Optional[int] = None,
              rng: Optional[np.random.Generator] = None) -> TrainTestSplit:
        if seed is not None and rng is not None:
            raise ValueError("Pass either seed or rng, not both")
        if rng is None:
            rng = np.random.default_rng(seed)

        normal = dataset["normal"]
        anomalous = select_anomalous(dataset, self.difficulty)

        # shuffle without replacement, each pool on its own
        n_normal = normal.shape[1]
        n_anomalous = anomalous.shape[1]
        normal = normal[:, rng.permutation(n_normal)]
        anomalous = anomalous[:, rng.permutation(n_anomalous)]

        if self.standardize:
            normal, anomalous = standardize_pair(normal, anomalous)

        n_train, n_train_anomalous, n_test_anomalous = split_sizes(
            n_normal, n_anomalous, self.train_ratio, self.contamination, self.test_contamination
        )
        n_used = n_train_anomalous + n_test_anomalous
        logger.debug(
            "Split sizes",
            extra={
                "n_normal": n_normal,
                "n_anomalous": n_anomalous,
                "n_train": n_train,
                "n_train_anomalous": n_train_anomalous,
                "n_test_anomalous": n_test_anomalous,
                "n_dropped_anomalous": n_anomalous - n_used,
            },
        )

        metadata = {
            **dataset.metadata,
            "train_ratio": self.train_ratio,
            "contamination": self.contamination,
            "test_contamination": self.test_contamination,
            "difficulty": self.difficulty,
            "standardize": self.standardize,
        }
        train = MLDataset(
            X=np.concatenate([normal[:, :n_train], anomalous[:, :n_train_anomalous]], axis=1),
            y=_labels(n_train, n_train_anomalous),
            metadata=dict(metadata),
        )
        test = MLDataset(
            X=np.concatenate([normal[:, n_train:], anomalous[:, n_train_anomalous:n_used]], axis=1),
            y=_labels(n_normal - n_train, n_test_anomalous),
            metadata=dict(metadata),
        )
        return TrainTestSplit(train=train, test=test)

    def split_train_val_test(self, dataset: ADDataset, seed: Optional[int] = None,
                             rng: Optional[np.random.Generator] = None) -> TrainValTestSplit:
        """Split into train and test, then halve the test set into validation and test."""
        split = self.split(dataset, seed=seed, rng=rng)
        halves = split_val_test(split.test.X, split.test.y, metadata=split.test.metadata)
        return TrainValTestSplit(train=split.train, val=halves.val, test=halves.test)


def split_data(dataset: ADDataset, p: float = 0.8, contamination: float = 0.0, *,
               test_contamination: Optional[float] = None, seed: Optional[int] = None,
               rng: Optional[np.random.Generator] = None, difficulty: Difficulty = None,
               standardize: bool = False) -> TrainTestSplit:
    """
    Creates training and testing data from a given ADDataset.

    p is the ratio of normal data used for training, contamination is the anomalous to
    normal ratio of the training set. See ContaminationSplitter.
    """
    splitter = ContaminationSplitter(
        train_ratio=p,
        contamination=contamination,
        test_contamination=test_contamination,
        difficulty=difficulty,
        standardize=standardize,
    )
    return splitter.split(dataset, seed=seed, rng=rng)


def split_val_test(X: np.ndarray, y: np.ndarray, metadata: Optional[dict] = None) -> ValTestSplit:
    """
    Split data X (instances as columns) and 0/1 labels y in halves, preserving the ratio
    of positive and negative samples. The validation half gets the first half of each
    class, the test half the second. With an odd class count the last sample of that
    class is in neither half.
    """
    X = np.asarray(X)
    y = np.asarray(y)
    if X.shape[1] != len(y):
        raise ValueError(f"X must have one column per label. Got X: {X.shape[1]} columns, y: {len(y)}")

    inds0 = np.flatnonzero(y == 0)
    inds1 = np.flatnonzero(y == 1)
    n0n = len(inds0) // 2
    n1n = len(inds1) // 2

    val_inds = np.concatenate([inds0[:n0n], inds1[:n1n]])
    test_inds = np.concatenate([inds0[n0n:2 * n0n], inds1[n1n:2 * n1n]])
    val = MLDataset(X=X[:, val_inds], y=y[val_inds], metadata=dict(metadata or {}))
    test = MLDataset(X=X[:, test_inds], y=y[test_inds], metadata=dict(metadata or {}))
    return ValTestSplit(val=val, test=test)
