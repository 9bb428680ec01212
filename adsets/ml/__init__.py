from adsets.ml.dataset import MLDataset
from adsets.ml.multiclass import create_multiclass
from adsets.ml.splitting_strategies import (
    ContaminationSplitter,
    DatasetSplitter,
    TrainTestSplit,
    TrainValTestSplit,
    ValTestSplit,
    select_anomalous,
    split_data,
    split_sizes,
    split_val_test,
)

__all__ = [
    "MLDataset",
    "create_multiclass",
    "ContaminationSplitter",
    "DatasetSplitter",
    "TrainTestSplit",
    "TrainValTestSplit",
    "ValTestSplit",
    "select_anomalous",
    "split_data",
    "split_sizes",
    "split_val_test",
]
