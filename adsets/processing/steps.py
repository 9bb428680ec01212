from __future__ import annotations
from typing import Iterable

from adsets.errors import InvalidVariantError
from adsets.interfaces.processing_step import DatasetStep
from adsets.objects.dataset import ADDataset, uncat
from adsets.processing.normalization import standardize
from adsets.processing.reduction import check_variant, dataset2d, reduce


class Standardize(DatasetStep):
    """Standardize all groups jointly, so they share the same scaling."""

    def _do_apply(self, dataset: ADDataset) -> ADDataset:
        X, sizes = dataset.cat()
        return uncat(standardize(X), sizes, names=dataset.group_names, metadata=dataset.metadata)


class KeepGroups(DatasetStep):
    """Empty every anomaly group that is not listed. The normal group is always kept."""

    def __init__(self, groups: Iterable[str]):
        self.groups = list(groups)

    def _do_apply(self, dataset: ADDataset) -> ADDataset:
        unknown = set(self.groups) - set(dataset.group_names)
        if unknown:
            raise InvalidVariantError(f"Unknown groups {sorted(unknown)}, must be among {list(dataset.group_names)}")
        return dataset.keep_groups(self.groups)

    def __str__(self) -> str:
        return f"KeepGroups(groups={self.groups})"


class ReduceDimensions(DatasetStep):
    """
    Reduce the dataset to n_dims features with PCA or t-SNE.

    With variant='tsne' and n_dims=2 the instances are subsampled like in dataset2d
    (at most max_samples), otherwise every instance is kept.
    """

    def __init__(self, n_dims: int = 2, variant: str = "pca", normalize: bool = True,
                 max_samples: int = 2000, perplexity: float = 15.0, seed: int | None = None):
        check_variant(variant)
        self.n_dims = n_dims
        self.variant = variant
        self.normalize = normalize
        self.max_samples = max_samples
        self.perplexity = perplexity
        self.seed = seed

    def _do_apply(self, dataset: ADDataset) -> ADDataset:
        if self.n_dims == 2:
            return dataset2d(dataset, self.variant, self.normalize, self.max_samples,
                             self.perplexity, seed=self.seed)
        X, sizes = dataset.cat()
        if self.normalize:
            X = standardize(X)
        kwargs = {"perplexity": self.perplexity, "seed": self.seed} if self.variant == "tsne" else {}
        Y = reduce(X, self.n_dims, self.variant, **kwargs)
        metadata = {**dataset.metadata, "reduction": self.variant}
        return uncat(Y, sizes, names=dataset.group_names, metadata=metadata)

    def __str__(self) -> str:
        return f"ReduceDimensions(n_dims={self.n_dims}, variant={self.variant})"
