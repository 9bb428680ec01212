import os
from pathlib import Path
from typing import List, Union

from adsets.errors import PathNotFoundError


def adsets_data_dir() -> Path:
    try:
        data_dir = os.environ['ADSETS_DATA_DIR']
    except KeyError:
        msg = """ Please make sure ADSETS_DATA_DIR is in your system environment:
            add: 'export ADSETS_DATA_DIR=/path/ to your bashrc and source it.'"""
        raise RuntimeError(msg)
    return Path(data_dir)


def check_dir_exists(path: Union[str, Path]) -> None:
    if not os.path.isdir(path):
        raise PathNotFoundError(f"{path} - no such path exists.")


def get_processed_datapath() -> Path:
    """Returns the Path to the processed (possibly multiclass) datasets."""
    return adsets_data_dir() / "processed"


def get_loda_datapath() -> Path:
    """Returns the Path to the Loda benchmark datasets."""
    return adsets_data_dir() / "loda"


def get_umap_datapath() -> Path:
    """Returns the Path to the UMAP-reduced datasets."""
    return adsets_data_dir() / "umap"


def get_raw_datapath() -> Path:
    return adsets_data_dir() / "raw"


def get_synthetic_datapath() -> Path:
    return adsets_data_dir() / "synthetic"


def match_dataset_dirs(dataset: str, root: Union[str, Path]) -> List[str]:
    """
    Returns the sorted names of the directories in root whose name starts with dataset.
    A root that does not exist has no matches.
    """
    root = Path(root)
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if p.is_dir() and p.name.startswith(dataset))


def select_master_dir(dir_names: List[str]) -> str:
    """
    Multiclass variants of a dataset are stored as '<dataset>-<class>' next to the
    master directory. Returns the name with the fewest '-' separated tokens, the first
    one (in the given order) on ties.
    """
    if not dir_names:
        raise ValueError("No directory names to select from")
    return min(dir_names, key=lambda name: len(name.split("-")))
