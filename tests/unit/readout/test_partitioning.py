"""
Tests for fold resolution and sample partitioning.
"""

import pytest

from liquidstate.config import ReadoutLayerConfig
from liquidstate.constants import MAX_NUM_OF_FOLDS
from liquidstate.errors import ConfigurationError
from liquidstate.readout import contiguous_split, resolve_folds, stratified_split


@pytest.mark.unit
class TestResolveFolds:

    def test_derived_from_ratio(self):
        test_len, folds = resolve_folds(100, ReadoutLayerConfig(test_data_ratio=0.25))
        assert test_len == 25
        assert folds == 4

    def test_fixed_folds(self):
        _, folds = resolve_folds(100, ReadoutLayerConfig(num_folds=7))
        assert folds == 7

    def test_capped(self):
        _, folds = resolve_folds(10_000, ReadoutLayerConfig(test_data_ratio=0.0002))
        assert folds == MAX_NUM_OF_FOLDS

    def test_test_partition_too_short(self):
        with pytest.raises(ConfigurationError):
            resolve_folds(4, ReadoutLayerConfig(test_data_ratio=0.25))

    def test_fixed_folds_too_many(self):
        with pytest.raises(ConfigurationError):
            resolve_folds(20, ReadoutLayerConfig(num_folds=11))


@pytest.mark.unit
class TestContiguousSplit:

    @pytest.mark.parametrize("n,k", [(10, 2), (23, 4), (7, 3), (100, 100)])
    def test_every_sample_in_exactly_one_bundle(self, n, k):
        bundles = contiguous_split(n, k)
        assert len(bundles) == k
        flat = sorted(i for bundle in bundles for i in bundle)
        assert flat == list(range(n))

    def test_bundle_sizes_differ_by_at_most_one(self):
        sizes = [len(b) for b in contiguous_split(23, 4)]
        assert max(sizes) - min(sizes) <= 1

    def test_contiguous_prefix(self):
        bundles = contiguous_split(10, 3)
        assert bundles[0][:3] == [0, 1, 2]
        assert bundles[1][:3] == [3, 4, 5]


@pytest.mark.unit
class TestStratifiedSplit:

    def test_class_quota_per_bundle(self):
        ideal = [1.0] * 9 + [0.0] * 21
        bundles = stratified_split(ideal, 3, 0.5)
        flat = sorted(i for bundle in bundles for i in bundle)
        assert flat == list(range(30))
        for bundle in bundles:
            positives = sum(1 for i in bundle if ideal[i] >= 0.5)
            assert positives == 3
            assert sum(1 for i in bundle if ideal[i] < 0.5) == 7

    def test_leftovers_spread(self):
        ideal = [1.0] * 7 + [0.0] * 11
        bundles = stratified_split(ideal, 3, 0.5)
        positives = [sum(1 for i in b if ideal[i] >= 0.5) for b in bundles]
        assert sorted(positives) == [2, 2, 3]
        negatives = [sum(1 for i in b if ideal[i] < 0.5) for b in bundles]
        assert sorted(negatives) == [3, 4, 4]

    def test_border_value_is_positive(self):
        bundles = stratified_split([0.5, 0.5, 0.0, 0.0], 2, 0.5)
        for bundle in bundles:
            assert sorted(bundle) in ([0, 2], [0, 3], [1, 2], [1, 3])

    def test_insufficient_bin_samples(self):
        ideal = [1.0] * 2 + [0.0] * 10
        with pytest.raises(ConfigurationError, match="Insufficient bin"):
            stratified_split(ideal, 3, 0.5)
