import inspect
import logging
from pathlib import Path
from typing import Iterable, List, Union

from tqdm import tqdm

from adsets.interfaces.processing_step import DatasetStep
from adsets.objects.dataset import ADDataset
from adsets.utils.config import load_config

logger = logging.getLogger(__name__)


class PreparationPipeline:
    """
    A pipeline that applies a sequence of processing steps to datasets.

    The pipeline is configured from a dictionary that specifies which processing
    steps to apply and their parameters.
    """

    def __init__(self, config: dict):
        """
        Initialize the preparation pipeline with a configuration.

        Args:
            config: Dictionary mapping step class names to parameter dictionaries.
                   If None, creates an empty pipeline.

        Example:
            config = {
                "KeepGroups": {"groups": ["easy", "medium"]},
                "ReduceDimensions": {"n_dims": 2, "variant": "pca"},
            }
        """
        self.steps = []

        if config is not None:
            self._configure_from_dict(config)

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> "PreparationPipeline":
        """Create a pipeline from a YAML file holding the configuration dictionary."""
        return cls(load_config(config_path))

    def apply(self, dataset: ADDataset) -> ADDataset:
        """
        Apply all processing steps to the dataset.

        Args:
            dataset: The dataset to process

        Returns:
            The processed dataset
        """
        for step in self.steps:
            logger.debug("Applying step", extra={"step_name": str(step)})
            dataset = step.apply(dataset)
        return dataset

    def apply_all(self, datasets: Iterable[ADDataset]) -> List[ADDataset]:
        """Apply the pipeline to each dataset."""
        return [self.apply(dataset) for dataset in tqdm(list(datasets), desc="Processing datasets")]

    def _configure_from_dict(self, config: dict) -> None:
        """
        Configure the pipeline from a dictionary specification.

        Args:
            config: Dictionary mapping step class names to parameter dictionaries
        """
        self.steps = []

        for step_name, step_params in config.items():
            step_class = self._get_processing_step_class(step_name)
            step_instance = step_class(**(step_params or {}))
            self.steps.append(step_instance)

    def _get_processing_step_class(self, step_name: str):
        """
        Get a DatasetStep subclass by name.

        Args:
            step_name: Name of the processing step class

        Returns:
            The DatasetStep subclass

        Raises:
            ValueError: If the processing step is unknown or if there are duplicate names
        """
        available_steps = self._get_available_processing_steps()
        matching_classes = [cls for cls in available_steps if cls.__name__ == step_name]

        if len(matching_classes) == 0:
            available_names = [cls.__name__ for cls in available_steps]
            raise ValueError(f"Unknown processing step: '{step_name}'. Available steps: {available_names}")
        elif len(matching_classes) > 1:
            raise ValueError(f"Multiple processing steps found with name '{step_name}': {matching_classes}")
        else:
            return matching_classes[0]

    def _get_available_processing_steps(self):
        """
        Get all available DatasetStep subclasses.

        Returns:
            List of DatasetStep subclasses
        """
        # Import the steps module to access all DatasetStep subclasses
        from adsets.processing import steps

        available_steps = []

        # Get all classes from the steps module
        for name, obj in inspect.getmembers(steps):
            if (inspect.isclass(obj) and
                issubclass(obj, DatasetStep) and
                obj != DatasetStep):
                available_steps.append(obj)

        return available_steps
