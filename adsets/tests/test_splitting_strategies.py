import numpy as np
import pytest

from adsets.errors import EmptyDataError, InvalidVariantError
from adsets.ml.dataset import MLDataset
from adsets.ml.splitting_strategies import (
    ContaminationSplitter,
    DatasetSplitter,
    TrainTestSplit,
    TrainValTestSplit,
    select_anomalous,
    split_data,
    split_sizes,
    split_val_test,
)
from adsets.tests.testing_utils import make_dataset


def ids(X):
    """The instance ids stored in the first row by make_dataset."""
    return set(X[0].astype(int).tolist())


class TestSplitSizes:
    """Test cases for the split size computation."""

    def test_default_test_contamination_uses_remaining_anomalies(self):
        assert split_sizes(100, 40, 0.8, 0.1) == (80, 8, 32)

    def test_train_anomalies_are_capped_at_half(self):
        assert split_sizes(100, 40, 0.8, 1.0) == (80, 20, 20)
        assert split_sizes(100, 7, 0.5, 1.0) == (50, 3, 4)

    def test_test_contamination(self):
        # floor(0.5 * 20) = 10 test anomalies out of the 32 remaining
        assert split_sizes(100, 40, 0.8, 0.1, test_contamination=0.5) == (80, 8, 10)
        # limited by the remaining anomalies
        assert split_sizes(100, 40, 0.8, 0.1, test_contamination=1.0) == (80, 8, 20)
        assert split_sizes(10, 3, 0.0, 0.1, test_contamination=1.0) == (0, 0, 3)


class TestContaminationSplitter:
    """Test cases for the ContaminationSplitter class."""

    @pytest.fixture
    def dataset(self):
        # ids: normal 0-99, easy 100-109, medium 110-129, hard 130-139
        return make_dataset(n_features=4, normal=100, easy=10, medium=20, hard=10)

    def test_is_a_dataset_splitter(self):
        assert isinstance(ContaminationSplitter(), DatasetSplitter)

    def test_split_sizes_and_labels(self, dataset):
        split = split_data(dataset, 0.8, 0.1, seed=1)

        assert isinstance(split, TrainTestSplit)
        assert split.train.X.shape == (4, 88)
        assert split.test.X.shape == (4, 52)
        np.testing.assert_array_equal(split.train.y, [0] * 80 + [1] * 8)
        np.testing.assert_array_equal(split.test.y, [0] * 20 + [1] * 32)

    def test_split_unpacks_like_a_tuple(self, dataset):
        train_X, train_y, test_X, test_y = split_data(dataset, 0.8, 0.1, seed=1)

        assert train_X.shape[1] == len(train_y)
        assert test_X.shape[1] == len(test_y)

    def test_labels_match_instances(self, dataset):
        train_X, train_y, test_X, test_y = split_data(dataset, 0.6, 0.2, seed=3)

        for X, y in ((train_X, train_y), (test_X, test_y)):
            instance_ids = X[0].astype(int)
            np.testing.assert_array_equal(instance_ids >= 100, y == 1)

    def test_train_and_test_are_disjoint(self, dataset):
        for seed in range(5):
            train_X, _, test_X, _ = split_data(dataset, 0.7, 0.3, seed=seed)

            assert ids(train_X).isdisjoint(ids(test_X))
            assert len(ids(train_X)) == train_X.shape[1]
            assert len(ids(test_X)) == test_X.shape[1]

    def test_all_normal_instances_are_used(self, dataset):
        train_X, train_y, test_X, test_y = split_data(dataset, 0.8, 0.0, seed=0)

        normal_ids = ids(train_X[:, train_y == 0]) | ids(test_X[:, test_y == 0])
        assert normal_ids == set(range(100))

    def test_surplus_anomalies_are_dropped(self, dataset):
        train_X, _, test_X, test_y = split_data(dataset, 0.8, 0.1, test_contamination=0.25, seed=0)

        # 8 train anomalies, floor(0.25 * 20) = 5 test anomalies, 27 dropped
        assert test_y.sum() == 5
        used = ids(train_X) | ids(test_X)
        assert len(used - set(range(100))) == 13

    def test_contamination_cap(self, dataset):
        train_X, train_y, _, _ = split_data(dataset, 1.0, 1.0, seed=0)

        assert train_y.sum() == 20

    def test_zero_train_ratio_gives_empty_training_set(self, dataset):
        train_X, train_y, test_X, test_y = split_data(dataset, 0.0, 0.5, seed=0)

        assert train_X.shape == (4, 0)
        assert len(train_y) == 0
        assert test_X.shape[1] == 140

    def test_zero_contamination_gives_clean_training_set(self, dataset):
        _, train_y, _, test_y = split_data(dataset, 0.8, 0.0, seed=0)

        assert train_y.sum() == 0
        assert test_y.sum() == 40

    def test_same_seed_is_reproducible(self, dataset):
        first = split_data(dataset, 0.8, 0.1, seed=7)
        second = split_data(dataset, 0.8, 0.1, seed=7)

        for a, b in zip(first, second):
            np.testing.assert_array_equal(a, b)

    def test_no_seed_differs_between_calls(self, dataset):
        first = split_data(dataset, 0.8, 0.1)
        second = split_data(dataset, 0.8, 0.1)

        assert not np.array_equal(first.train.X, second.train.X)

    def test_seeding_does_not_touch_global_random_state(self, dataset):
        np.random.seed(123)
        expected = np.random.rand(3)

        np.random.seed(123)
        split_data(dataset, 0.8, 0.1, seed=5)
        np.testing.assert_array_equal(np.random.rand(3), expected)

    def test_explicit_generator(self, dataset):
        first = split_data(dataset, 0.8, 0.1, rng=np.random.default_rng(11))
        second = split_data(dataset, 0.8, 0.1, seed=11)

        np.testing.assert_array_equal(first.test.X, second.test.X)

    def test_seed_and_rng_are_exclusive(self, dataset):
        with pytest.raises(ValueError):
            split_data(dataset, seed=1, rng=np.random.default_rng(1))

    def test_difficulty_single_group(self, dataset):
        train_X, _, test_X, test_y = split_data(dataset, 0.8, 0.0, difficulty="easy", seed=0)

        anomaly_ids = ids(test_X[:, test_y == 1])
        assert anomaly_ids == set(range(100, 110))

    def test_difficulty_collection(self, dataset):
        _, _, test_X, test_y = split_data(dataset, 0.8, 0.0, difficulty=["hard", "easy"], seed=0)

        anomaly_ids = ids(test_X[:, test_y == 1])
        assert anomaly_ids == set(range(100, 110)) | set(range(130, 140))

    def test_difficulty_empty_group(self, dataset):
        with pytest.raises(EmptyDataError):
            split_data(dataset, difficulty="very_hard")

    def test_difficulty_collection_of_empty_groups(self, dataset):
        with pytest.raises(EmptyDataError):
            split_data(dataset, difficulty=["very_hard"])

    def test_difficulty_collection_ignores_unknown_names(self, dataset):
        _, _, test_X, test_y = split_data(dataset, 0.8, 0.0, difficulty=["easy", "bogus"], seed=0)

        assert ids(test_X[:, test_y == 1]) == set(range(100, 110))

    def test_difficulty_collection_of_unknown_names(self, dataset):
        with pytest.raises(EmptyDataError):
            split_data(dataset, difficulty=["bogus", "normal"])

    def test_difficulty_unknown(self, dataset):
        with pytest.raises(InvalidVariantError):
            split_data(dataset, difficulty="impossible")
        with pytest.raises(InvalidVariantError):
            split_data(dataset, difficulty="normal")

    def test_no_anomalies(self):
        with pytest.raises(EmptyDataError):
            split_data(make_dataset(normal=10))

    def test_invalid_ratios(self):
        with pytest.raises(ValueError):
            ContaminationSplitter(train_ratio=1.5)
        with pytest.raises(ValueError):
            ContaminationSplitter(contamination=-0.1)
        with pytest.raises(ValueError):
            ContaminationSplitter(test_contamination=2.0)

    def test_standardize(self, dataset):
        train_X, _, test_X, _ = split_data(dataset, 0.8, 0.0, seed=0, standardize=True)

        X = np.concatenate([train_X, test_X], axis=1)
        np.testing.assert_allclose(X.mean(axis=1), 0.0, atol=1e-10)

    def test_split_metadata(self, dataset):
        split = ContaminationSplitter(0.5, 0.05, difficulty="medium").split(dataset, seed=0)

        assert split.train.metadata["contamination"] == 0.05
        assert split.test.metadata["difficulty"] == "medium"

    def test_split_metadata_is_not_shared(self, dataset):
        split = ContaminationSplitter(0.5, 0.05).split(dataset, seed=0)

        split.train.metadata["note"] = "train only"

        assert "note" not in split.test.metadata
        assert "note" not in dataset.metadata

    def test_split_train_val_test_metadata_is_not_shared(self, dataset):
        split = ContaminationSplitter(0.8, 0.1).split_train_val_test(dataset, seed=0)

        split.val.metadata["note"] = "val only"

        assert "note" not in split.test.metadata
        assert "note" not in split.train.metadata

    def test_split_train_val_test(self, dataset):
        splitter = ContaminationSplitter(train_ratio=0.8, contamination=0.1)

        split = splitter.split_train_val_test(dataset, seed=0)

        assert isinstance(split, TrainValTestSplit)
        assert len(split.train) == 88
        assert split.val.n_normal == 10 and split.val.n_anomalous == 16
        assert split.test.n_normal == 10 and split.test.n_anomalous == 16


class TestSelectAnomalous:
    """Test cases for pooling anomalies by difficulty."""

    def test_pools_in_group_order(self):
        dataset = make_dataset(normal=2, easy=1, medium=2, very_hard=1)

        pooled = select_anomalous(dataset)

        np.testing.assert_array_equal(pooled[0], [2, 3, 4, 5])

    def test_collection_keeps_group_order(self):
        dataset = make_dataset(normal=2, easy=1, medium=2, very_hard=1)

        pooled = select_anomalous(dataset, ["very_hard", "easy"])

        np.testing.assert_array_equal(pooled[0], [2, 5])

    def test_collection_skips_names_that_are_not_anomaly_groups(self):
        dataset = make_dataset(normal=4, easy=2, medium=3)

        pooled = select_anomalous(dataset, ["easy", "bogus"])

        np.testing.assert_array_equal(pooled[0], [4, 5])

    def test_unknown_single_name_raises(self):
        with pytest.raises(InvalidVariantError):
            select_anomalous(make_dataset(normal=4, easy=2), "bogus")


class TestSplitValTest:
    """Test cases for halving labelled data."""

    def test_halves_preserve_class_ratio(self):
        y = np.array([0] * 9 + [1] * 7)
        X = np.arange(16.0).reshape(1, 16)

        val_X, val_y, test_X, test_y = split_val_test(X, y)

        assert (val_y == 1).sum() == 3 and (val_y == 0).sum() == 4
        assert (test_y == 1).sum() == 3 and (test_y == 0).sum() == 4
        np.testing.assert_array_equal(val_X[0], [0, 1, 2, 3, 9, 10, 11])
        np.testing.assert_array_equal(test_X[0], [4, 5, 6, 7, 12, 13, 14])

    def test_keeps_within_class_order_for_interleaved_labels(self):
        y = np.array([1, 0, 1, 0, 0, 1, 0, 1])
        X = np.arange(8.0).reshape(1, 8)

        split = split_val_test(X, y)

        np.testing.assert_array_equal(split.val.X[0], [1, 3, 0, 2])
        np.testing.assert_array_equal(split.val.y, [0, 0, 1, 1])
        np.testing.assert_array_equal(split.test.X[0], [4, 6, 5, 7])

    def test_returns_ml_datasets(self):
        split = split_val_test(np.ones((2, 4)), np.array([0, 0, 1, 1]))

        assert isinstance(split.val, MLDataset)
        assert len(split.test) == 2

    def test_halves_get_their_own_metadata(self):
        metadata = {"source": "yeast"}
        split = split_val_test(np.ones((2, 4)), np.array([0, 0, 1, 1]), metadata=metadata)

        split.val.metadata["note"] = "val only"

        assert split.test.metadata == {"source": "yeast"}
        assert metadata == {"source": "yeast"}

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError):
            split_val_test(np.ones((2, 4)), np.array([0, 1]))
