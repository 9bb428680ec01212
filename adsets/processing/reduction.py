"""
Low dimensional representations of datasets for visualization.

The reductions themselves are scikit-learn's PCA and t-SNE, applied to features x
instances matrices.
"""
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from sklearn.decomposition import PCA
from sklearn.manifold import TSNE

from adsets.errors import InvalidVariantError
from adsets.objects.dataset import ADDataset, uncat
from adsets.objects.loader import load_dataset_dir, save_dataset_dir
from adsets.processing.normalization import standardize

logger = logging.getLogger(__name__)

VARIANTS = ("pca", "tsne")


def check_variant(variant: str) -> None:
    if variant not in VARIANTS:
        raise InvalidVariantError(f"variant must be one of {list(VARIANTS)}, got '{variant}'")


def nd_pca(X: np.ndarray, n: int) -> np.ndarray:
    """
    Returns an n-dimensional representation of X using a PCA transform. With fewer than
    n features or instances, only that many components are kept.
    """
    pca = PCA(n_components=min(n, *X.shape))
    return pca.fit_transform(X.T).T


def nd_tsne(X: np.ndarray, n: int, perplexity: float = 15.0, max_samples: int = 1000,
            seed: Optional[int] = None, **kwargs) -> Tuple[np.ndarray, np.ndarray]:
    """
    Returns an n-dimensional representation of at most max_samples instances of X using
    a t-SNE embedding, and the sorted indices of the sampled instances.

    Extra keyword arguments are passed to sklearn.manifold.TSNE.
    """
    N = X.shape[1]
    n_used = min(N, max_samples)
    logger.info("Sampling instances for t-SNE", extra={"n_samples": n_used, "n_instances": N})
    rng = np.random.default_rng(seed)
    sample_inds = np.sort(rng.choice(N, size=n_used, replace=False))
    tsne = TSNE(n_components=n, perplexity=perplexity, random_state=seed, **kwargs)
    Y = tsne.fit_transform(X[:, sample_inds].T).T
    return Y, sample_inds


def reduce(X: np.ndarray, n_dims: int, variant: str = "pca", **kwargs) -> np.ndarray:
    """
    Reduce a features x instances matrix to n_dims features. For t-SNE all instances
    are embedded. A max_samples keyword is ignored.

    Raises:
        InvalidVariantError: If variant is not 'pca' or 'tsne'.
    """
    check_variant(variant)
    if variant == "pca":
        return nd_pca(X, n_dims)
    kwargs.pop("max_samples", None)
    Y, _ = nd_tsne(X, n_dims, max_samples=X.shape[1], **kwargs)
    return Y


def partition(sizes: Sequence[int], sample_inds: Sequence[int]) -> List[int]:
    """
    Number of sampled instances in each group, given the group sizes of the
    concatenated matrix and the (0-based) indices of the sampled instances.
    """
    bounds = np.concatenate([[0], np.cumsum(sizes)])
    sample_inds = np.asarray(sample_inds)
    return [int(np.sum((bounds[i] <= sample_inds) & (sample_inds < bounds[i + 1])))
            for i in range(len(sizes))]


def dataset2d(dataset: ADDataset, variant: str = "pca", normalize: bool = True,
              max_samples: int = 2000, perplexity: float = 15.0,
              seed: Optional[int] = None) -> ADDataset:
    """
    Transforms a dataset into a 2D representation using PCA or t-SNE.

    For t-SNE at most max_samples instances are kept, the group sizes of the result
    follow from which instances were sampled.
    """
    check_variant(variant)
    X, sizes = dataset.cat()
    if normalize:
        X = standardize(X)
    metadata = {**dataset.metadata, "reduction": variant}
    if variant == "pca":
        return uncat(nd_pca(X, 2), sizes, names=dataset.group_names, metadata=metadata)
    Y, sample_inds = nd_tsne(X, 2, perplexity=perplexity, max_samples=max_samples, seed=seed)
    return uncat(Y, partition(sizes, sample_inds), names=dataset.group_names, metadata=metadata)


def reduce_dataset_dir(inpath: Union[str, Path], outpath: Union[str, Path], variant: str = "pca",
                       normalize: bool = True, max_samples: int = 2000, perplexity: float = 15.0,
                       seed: Optional[int] = None) -> ADDataset:
    """
    Load the dataset in inpath, reduce it to 2D and save the result to outpath.

    For t-SNE of datasets with more than max_samples instances only the normal, easy
    and medium groups are used.
    """
    check_variant(variant)
    dataset = load_dataset_dir(inpath)
    if variant == "tsne" and dataset.n_instances() > max_samples:
        dataset = dataset.keep_groups(["easy", "medium"])
    reduced = dataset2d(dataset, variant, normalize, max_samples, perplexity, seed=seed)
    save_dataset_dir(reduced, outpath)
    return reduced
