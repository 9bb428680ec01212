from collections import OrderedDict
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

#: Canonical group names, normal data first, then anomalies by increasing difficulty.
GROUPS = ("normal", "easy", "medium", "hard", "very_hard")
#: The anomaly tiers among GROUPS.
ANOMALY_GROUPS = GROUPS[1:]


def empty_group(n_features: int = 0) -> np.ndarray:
    """A group with no instances, shaped (n_features, 0)."""
    return np.empty((n_features, 0), dtype=float)


def _as_group(values, n_features: int) -> np.ndarray:
    """Copy values into a read-only 2D float array. Empty input becomes (n_features, 0)."""
    if values is None:
        arr = empty_group(n_features)
    else:
        arr = np.array(values, dtype=float, copy=True)
        if arr.size == 0:
            arr = empty_group(n_features)
    assert arr.ndim == 2, f"Expected 2D array (features x instances), got shape {arr.shape}"
    arr.setflags(write=False)
    return arr


class ADDataset:
    """
    An anomaly detection dataset: one normal group and several anomaly groups split
    according to their difficulty. Each group is a features x instances matrix, so
    instances are columns. A missing group is a matrix with no columns.

    The dataset is immutable, operations that change data return a new ADDataset.
    """

    def __init__(self, groups: Mapping[str, np.ndarray], metadata: Optional[dict] = None):
        """
        Args:
            groups: Ordered mapping from group name to matrix. Must contain "normal";
                    the canonical anomaly tiers that are absent are added empty, any
                    other names are kept after them in the given order.
            metadata: Free-form provenance information (source path, processing steps).

        Raises:
            ValueError: If the groups do not share the same number of features.
        """
        if "normal" not in groups:
            raise ValueError(f"An ADDataset needs a 'normal' group, got {list(groups)}")

        n_features = self._infer_n_features(groups)
        names = list(GROUPS) + [name for name in groups if name not in GROUPS]

        arrays = OrderedDict()
        for name in names:
            arrays[name] = _as_group(groups.get(name), n_features)
            if arrays[name].shape[0] != n_features:
                raise ValueError(
                    f"All groups must have {n_features} features, "
                    f"group '{name}' has {arrays[name].shape[0]}"
                )

        self._groups = arrays
        self.metadata = dict(metadata) if metadata is not None else {}

    def __reduce__(self):
        # rebuilt through __init__ so the copied arrays are read-only again
        return type(self), (OrderedDict(self._groups), self.metadata)

    @staticmethod
    def _infer_n_features(groups: Mapping[str, np.ndarray]) -> int:
        for values in groups.values():
            if values is not None and np.size(values) > 0:
                return np.shape(values)[0]
        # All groups empty: keep whatever row count was given explicitly
        for values in groups.values():
            if values is not None and np.ndim(values) == 2:
                return np.shape(values)[0]
        return 0

    @classmethod
    def from_groups(cls, normal, easy=None, medium=None, hard=None, very_hard=None,
                    metadata: Optional[dict] = None) -> "ADDataset":
        """Build a dataset from the five canonical groups, None meaning empty."""
        return cls(
            OrderedDict(normal=normal, easy=easy, medium=medium, hard=hard, very_hard=very_hard),
            metadata=metadata,
        )

    # --- access --------------------------------------------------------------

    @property
    def groups(self) -> Mapping[str, np.ndarray]:
        """Read-only view of all groups in order."""
        return MappingProxyType(self._groups)

    @property
    def group_names(self) -> Tuple[str, ...]:
        return tuple(self._groups)

    @property
    def anomaly_groups(self) -> Tuple[str, ...]:
        return tuple(name for name in self._groups if name != "normal")

    @property
    def n_features(self) -> int:
        return self._groups["normal"].shape[0]

    def __getitem__(self, name: str) -> np.ndarray:
        return self._groups[name]

    def __getattr__(self, name: str) -> np.ndarray:
        # only called when normal attribute lookup fails
        groups = self.__dict__.get("_groups")
        if groups is not None and name in groups:
            return groups[name]
        raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")

    def __contains__(self, name: str) -> bool:
        return name in self._groups

    def __iter__(self):
        return iter(self._groups)

    def sizes(self) -> Dict[str, int]:
        """Number of instances in each group."""
        return OrderedDict((name, arr.shape[1]) for name, arr in self._groups.items())

    def n_instances(self) -> int:
        return sum(self.sizes().values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, ADDataset):
            return NotImplemented
        if self.group_names != other.group_names:
            return False
        return all(
            self[name].shape == other[name].shape and np.array_equal(self[name], other[name])
            for name in self.group_names
        )

    def __repr__(self) -> str:
        sizes = ", ".join(f"{name}={n}" for name, n in self.sizes().items())
        return f"ADDataset(n_features={self.n_features}, {sizes})"

    # --- derived datasets ----------------------------------------------------

    def replace(self, metadata: Optional[dict] = None, **groups) -> "ADDataset":
        """Return a new dataset with the given groups replaced."""
        unknown = set(groups) - set(self._groups)
        if unknown:
            raise KeyError(f"Unknown groups: {sorted(unknown)}")
        new_groups = OrderedDict(self._groups)
        new_groups.update(groups)
        return ADDataset(new_groups, metadata=self.metadata if metadata is None else metadata)

    def keep_groups(self, names: Iterable[str]) -> "ADDataset":
        """Return a new dataset where every group not in names is emptied. 'normal' is always kept."""
        names = set(names) | {"normal"}
        return self.replace(**{
            name: empty_group(self.n_features) for name in self._groups if name not in names
        })

    def cat(self) -> Tuple[np.ndarray, List[int]]:
        """
        Concatenate all groups along the instance axis.

        Returns:
            The concatenated matrix and the number of instances of each group
            (normal first, then the remaining groups in order), so that the
            concatenation can be split back with uncat.
        """
        arrays = list(self._groups.values())
        sizes = [arr.shape[1] for arr in arrays]
        return np.concatenate(arrays, axis=1), sizes


def uncat(X: np.ndarray, sizes: Sequence[int],
          names: Sequence[str] = GROUPS, metadata: Optional[dict] = None) -> ADDataset:
    """
    Split a matrix produced by ADDataset.cat back into a dataset.

    Args:
        X: Concatenated matrix, instances as columns.
        sizes: Number of instances in each group, in order.
        names: Group names matching sizes.
        metadata: Metadata of the new dataset.
    """
    if len(sizes) != len(names):
        raise ValueError(f"Got {len(sizes)} group sizes for {len(names)} group names")
    X = np.asarray(X)
    if sum(sizes) != X.shape[1]:
        raise ValueError(f"Group sizes sum to {sum(sizes)} but the matrix has {X.shape[1]} columns")

    bounds = np.concatenate([[0], np.cumsum(sizes)]).astype(int)
    groups = OrderedDict()
    for name, start, stop in zip(names, bounds[:-1], bounds[1:]):
        groups[name] = X[:, start:stop]
    return ADDataset(groups, metadata=metadata)
