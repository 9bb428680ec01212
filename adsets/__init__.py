"""
adsets: anomaly detection benchmark dataset preparation.

Most things live in the subpackages, e.g.:
from adsets.objects import ADDataset, get_data
from adsets.ml import split_data, split_val_test
"""

__version__ = "0.1.0"
