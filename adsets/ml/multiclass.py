from typing import List, Optional, Sequence, Tuple

import numpy as np

from adsets.objects.dataset import ADDataset, empty_group
from adsets.utils.strings import subproblem_tag


def unique_in_order(labels: Sequence[str]) -> List[str]:
    """Distinct labels in order of first appearance."""
    return list(dict.fromkeys(labels))


def create_multiclass(data: ADDataset,
                      normal_labels: Optional[Sequence[str]],
                      anomaly_labels: Optional[Sequence[str]]) -> List[Tuple[ADDataset, str]]:
    """
    From given labels, return all binary subproblems of a multiclass dataset and their names.

    Multiclass datasets keep all their anomalies in the medium group. Each subproblem keeps
    the whole normal group and the medium columns of one anomaly class, every other group
    is empty. Subproblems are named '<normal label>-<anomaly class>'.

    Works even if the problem is not multiclass: with no labels the result is [(data, "")].
    """
    if normal_labels is None or anomaly_labels is None:
        return [(data, "")]

    medium = data["medium"]
    anomaly_labels = np.asarray(anomaly_labels, dtype=object)
    if len(anomaly_labels) != medium.shape[1]:
        raise ValueError(
            f"Got {len(anomaly_labels)} anomaly labels for {medium.shape[1]} medium instances"
        )

    empty = empty_group(data.n_features)
    subsets = []
    for anomaly_class in unique_in_order(anomaly_labels.tolist()):
        sub_data = ADDataset.from_groups(
            normal=data["normal"],
            easy=empty,
            medium=medium[:, anomaly_labels == anomaly_class],
            hard=empty,
            very_hard=empty,
            metadata={**data.metadata, "anomaly_class": anomaly_class},
        )
        subsets.append((sub_data, subproblem_tag(normal_labels[0], anomaly_class)))
    return subsets
