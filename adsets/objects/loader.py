import logging
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

import numpy as np
import pandas as pd
from tqdm import tqdm

from adsets.errors import PathNotFoundError, SubclassNotFoundError
from adsets.objects.dataset import ADDataset, GROUPS
from adsets.utils.paths import (
    check_dir_exists,
    get_loda_datapath,
    get_processed_datapath,
    get_synthetic_datapath,
    get_umap_datapath,
    match_dataset_dirs,
    select_master_dir,
)
from adsets.utils.strings import canonical_label, validate_dataset_name

logger = logging.getLogger(__name__)

Labels = Optional[List[str]]
DataWithLabels = Tuple[ADDataset, Labels, Labels]


@dataclass(frozen=True)
class SubclassIndex:
    """Select a multiclass subproblem by its position (0-based, clamped to the valid range)."""
    index: int


@dataclass(frozen=True)
class SubclassName:
    """Select the first multiclass subproblem whose tag contains name."""
    name: str


SubclassSelector = Union[SubclassIndex, SubclassName]


def as_subclass_selector(subclass) -> SubclassSelector:
    """Accept plain ints and strings as well as explicit selectors."""
    if isinstance(subclass, (SubclassIndex, SubclassName)):
        return subclass
    # bool is an int subclass but never a meaningful index
    if isinstance(subclass, (int, np.integer)) and not isinstance(subclass, bool):
        return SubclassIndex(int(subclass))
    if isinstance(subclass, str):
        return SubclassName(subclass)
    raise TypeError(f"subclass must be an int index or a str name, got {type(subclass).__name__}")


def txt2array(path: Path) -> Optional[np.ndarray]:
    """
    Read a whitespace delimited table with instances as rows. Returns None if the file
    does not exist.
    """
    if not path.is_file():
        return None
    return np.loadtxt(path, dtype=float, ndmin=2)


def load_dataset_dir(path: Union[str, Path]) -> ADDataset:
    """
    Load an ADDataset from a directory holding normal.txt, easy.txt, medium.txt, hard.txt
    and very_hard.txt. The tables are transposed so that instances are columns. A missing
    file gives an empty group.

    Raises:
        PathNotFoundError: If path is not a directory.
    """
    path = Path(path)
    check_dir_exists(path)
    groups = OrderedDict()
    for name in GROUPS:
        table = txt2array(path / f"{name}.txt")
        groups[name] = None if table is None else table.T
    return ADDataset(groups, metadata={"source": str(path)})


def save_dataset_dir(dataset: ADDataset, path: Union[str, Path], transpose: bool = True) -> None:
    """
    Save every non-empty group of dataset to path/<group>.txt. With transpose=True (the
    default) the files hold instances as rows, the layout load_dataset_dir reads.
    """
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    for name, values in dataset.groups.items():
        if values.size > 0:
            np.savetxt(path / f"{name}.txt", values.T if transpose else values)


def _read_labels(path: Path) -> List[str]:
    lines = path.read_text().splitlines()
    return [canonical_label(line) for line in lines if line.strip()]


def load_class_labels(path: Union[str, Path]) -> Tuple[List[str], List[str]]:
    """Load the normal and anomaly class labels saved in path."""
    path = Path(path)
    return _read_labels(path / "normal_labels.txt"), _read_labels(path / "medium_labels.txt")


def get_data(dataset: str, subclass=None, path: Union[str, Path, None] = None) -> DataWithLabels:
    """
    For a given dataset name, loads the data from the data directory.

    The dataset directory is any directory on path whose name starts with dataset.
    Multiclass datasets have extra '<dataset>-<class>' directories next to the master
    one, the master (fewest '-' separated tokens) is loaded. Datasets that are not
    found on path are looked up in the Loda directory.

    Args:
        dataset: Dataset name (directory name prefix).
        subclass: Optional SubclassIndex/SubclassName (or int/str) selecting one binary
                  subproblem of a multiclass dataset.
        path: Search directory, defaults to the processed data directory.

    Returns:
        The ADDataset and the normal and anomaly class labels. If the dataset is not a
        multiclass problem, the labels are None.

    Raises:
        PathNotFoundError: If no directory matches dataset.
        SubclassNotFoundError: If a subclass name matches no subproblem.
    """
    if subclass is not None:
        return _get_subclass_data(dataset, as_subclass_selector(subclass), path)

    validate_dataset_name(dataset)
    root = Path(path) if path is not None else get_processed_datapath()
    dataset_dirs = match_dataset_dirs(dataset, root)
    # non multiclass datasets are in the loda dir, so try again
    if not dataset_dirs:
        root = get_loda_datapath()
        dataset_dirs = match_dataset_dirs(dataset, root)
    if not dataset_dirs:
        raise PathNotFoundError(f"Dataset '{dataset}' not found in {path or get_processed_datapath()} nor in {root}")

    dataset_dir = root / select_master_dir(dataset_dirs)
    logger.info("Loading dataset", extra={"dataset": dataset, "dataset_dir": str(dataset_dir)})
    data = load_dataset_dir(dataset_dir)

    if (dataset_dir / "normal_labels.txt").is_file():
        normal_labels, anomaly_labels = load_class_labels(dataset_dir)
    else:
        normal_labels, anomaly_labels = None, None
    return data, normal_labels, anomaly_labels


def _get_subclass_data(dataset: str, subclass: SubclassSelector, path) -> DataWithLabels:
    # imported here, multiclass depends on the objects package
    from adsets.ml.multiclass import create_multiclass

    data, normal_labels, anomaly_labels = get_data(dataset, path=path)
    subsets = create_multiclass(data, normal_labels, anomaly_labels)
    if len(subsets) <= 1:
        return data, normal_labels, anomaly_labels

    if isinstance(subclass, SubclassIndex):
        index = min(max(subclass.index, 0), len(subsets) - 1)
        sub_data, tag = subsets[index]
    elif isinstance(subclass, SubclassName):
        matches = [(sub_data, tag) for sub_data, tag in subsets if subclass.name in tag]
        if not matches:
            raise SubclassNotFoundError(f"No subclass '{subclass.name}' in dataset '{dataset}'")
        sub_data, tag = matches[0]
    else:
        raise TypeError(f"Unsupported subclass selector: {subclass!r}")

    logger.info("Selected subclass", extra={"dataset": dataset, "subclass": tag})
    anomaly_class = sub_data.metadata["anomaly_class"]
    count = sum(label == anomaly_class for label in anomaly_labels)
    return sub_data, normal_labels, [anomaly_class] * count


def get_umap_data(dataset: str, subclass=None) -> DataWithLabels:
    """Same as get_data, reading the UMAP-reduced datasets."""
    return get_data(dataset, subclass, path=get_umap_datapath())


def get_loda_data(dataset: str) -> DataWithLabels:
    """For a given dataset name, loads the Loda data. The labels are None."""
    return get_data(dataset, path=get_loda_datapath())


def get_processed_data(dataset: str) -> DataWithLabels:
    """Get the processed (multiclass) data, falling back to the Loda data."""
    path = get_processed_datapath() / dataset
    path = path if (path / dataset).is_dir() else get_loda_datapath()
    return get_data(dataset, path=path)


def get_synthetic_data(dataset: str, path: Union[str, Path, None] = None) -> ADDataset:
    """Synthetic datasets are looked up by exact directory name."""
    root = Path(path) if path is not None else get_synthetic_datapath()
    return load_dataset_dir(root / dataset)


def data_info(path: Union[str, Path]) -> pd.DataFrame:
    """
    Summarize all datasets in path: feature dimension and the number of instances of
    each group.
    """
    path = Path(path)
    check_dir_exists(path)
    rows = []
    for dataset_dir in tqdm(sorted(p for p in path.iterdir() if p.is_dir()), desc="Reading datasets"):
        data, _, _ = get_data(dataset_dir.name, path=path)
        rows.append({"dataset": dataset_dir.name, "dim": data.n_features, **data.sizes()})
    return pd.DataFrame(rows, columns=["dataset", "dim", *GROUPS])
