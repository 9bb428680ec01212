"""
We import objects here so that elsewhere in the code we can do:
from adsets.objects import ADDataset

rather than:
from adsets.objects.dataset import ADDataset
"""

from adsets.objects.dataset import ADDataset, GROUPS, ANOMALY_GROUPS, empty_group, uncat
from adsets.objects.loader import (
    SubclassIndex,
    SubclassName,
    data_info,
    get_data,
    get_loda_data,
    get_processed_data,
    get_synthetic_data,
    get_umap_data,
    load_class_labels,
    load_dataset_dir,
    save_dataset_dir,
)


# doing from adsets.objects import * is equivalent to import this:
__all__ = [
    "ADDataset",
    "GROUPS",
    "ANOMALY_GROUPS",
    "empty_group",
    "uncat",
    "SubclassIndex",
    "SubclassName",
    "data_info",
    "get_data",
    "get_loda_data",
    "get_processed_data",
    "get_synthetic_data",
    "get_umap_data",
    "load_class_labels",
    "load_dataset_dir",
    "save_dataset_dir",
]
