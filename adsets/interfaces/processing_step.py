import numpy as np
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adsets.objects.dataset import ADDataset

class DatasetStep(ABC):
    """
    Abstract base class for processing steps that transform ADDataset objects.

    Datasets are immutable, so a step returns a new dataset and leaves its input
    untouched. Steps should be stateless and focused on a single transformation.
    """

    def apply(self, dataset: 'ADDataset') -> 'ADDataset':
        """
        Template method that enforces metadata recording.

        The contract is:
        1. Never modifies the input dataset
        2. Returns a new dataset with the same group names
        3. Automatically records processing information in the new dataset's metadata

        Args:
            dataset: The dataset to process

        Returns:
            The processed dataset
        """
        result = self._do_apply(dataset)
        self._record_processing_step(result, dataset)
        return result

    @abstractmethod
    def _do_apply(self, dataset: 'ADDataset') -> 'ADDataset':
        """
        Actual processing logic - implement this method in subclasses.

        Args:
            dataset: The dataset to process (must not be modified)

        Returns:
            A new dataset
        """
        pass

    def _record_processing_step(self, result: 'ADDataset', source: 'ADDataset', **kwargs) -> None:
        """
        Record processing information in the metadata of the new dataset. The list is
        copied from the source so the input's metadata stays unchanged.

        Args:
            result: The dataset returned by _do_apply
            source: The dataset that was processed
            **kwargs: Key-value pairs to store in metadata
        """
        steps = list(source.metadata.get('processing_steps', []))
        step_info = {
            'step_name': str(self),
            'timestamp': np.datetime64('now'),
            **kwargs
        }
        steps.append(step_info)
        result.metadata['processing_steps'] = steps

    def __str__(self) -> str:
        """Return a string representation of the processing step."""
        return f"{self.__class__.__name__}"
