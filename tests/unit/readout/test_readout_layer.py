"""
Tests for the cross-validated readout layer.
"""

import numpy as np
import pytest
import torch

from liquidstate.config import ReadoutLayerConfig
from liquidstate.constants import TaskType
from liquidstate.errors import ConfigurationError, InvariantViolationError
from liquidstate.readout import FeatureScaler, ReadoutLayer, RidgeRegressionTrainer


def _linear_data(n=200, seed=0):
    gen = torch.Generator().manual_seed(seed)
    x = torch.rand(n, 3, generator=gen, dtype=torch.float64) * 4.0 - 2.0
    y = 0.3 * x[:, 0] - 0.5 * x[:, 1] + 0.1
    return x, y.unsqueeze(1)


@pytest.mark.unit
class TestReadoutLayerBuild:

    def test_compute_before_build(self):
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1))
        assert not layer.is_built
        with pytest.raises(InvariantViolationError):
            layer.compute(torch.zeros(3))
        with pytest.raises(InvariantViolationError):
            layer.cluster_error_statistics

    def test_learns_linear_target(self):
        x, y = _linear_data()
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1))
        validation = layer.build(x, y, RidgeRegressionTrainer())

        assert layer.is_built
        assert len(validation) == 200
        assert validation.mae() < 1e-6
        out = layer.compute(x[5])
        assert out.shape == (1,)
        assert out[0].item() == pytest.approx(y[5, 0].item(), abs=1e-6)

    def test_validation_rows_are_shuffled_pairs(self):
        x, y = _linear_data(n=40)
        layer = ReadoutLayer(ReadoutLayerConfig(seed=5))
        validation = layer.build(x, y, RidgeRegressionTrainer())
        assert sorted(validation.ideal[:, 0].tolist()) == pytest.approx(sorted(y[:, 0].tolist()))

    def test_cluster_statistics(self):
        x, y = _linear_data()
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1, test_data_ratio=0.2))
        layer.build(x, y, RidgeRegressionTrainer())
        stats = layer.cluster_error_statistics
        assert len(stats) == 1
        assert stats[0].num_of_units == 5
        assert stats[0].precision_error_stat.num_of_samples == 200
        assert stats[0].binary_error_stat is None

        stats[0].precision_error_stat.add_sample(100.0)
        assert layer.cluster_error_statistics[0].precision_error_stat.num_of_samples == 200

    def test_multiple_fields(self):
        x, y = _linear_data()
        y2 = torch.cat([y, 2.0 * y], dim=1)
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1, output_field_names=["a", "b"]))
        validation = layer.build(x, y2, RidgeRegressionTrainer())
        assert validation.computed.shape == (200, 2)
        out = layer.compute(x[0])
        assert out[1].item() == pytest.approx(2.0 * out[0].item(), abs=1e-6)

    def test_same_seed_same_result(self):
        x, y = _linear_data()
        noisy = y + 0.05 * torch.randn(y.shape, dtype=torch.float64)
        a = ReadoutLayer(ReadoutLayerConfig(seed=11)).build(x, noisy, RidgeRegressionTrainer())
        b = ReadoutLayer(ReadoutLayerConfig(seed=11)).build(x, noisy, RidgeRegressionTrainer())
        assert torch.equal(a.computed, b.computed)
        assert torch.equal(a.ideal, b.ideal)

    def test_injected_generator(self):
        x, y = _linear_data(n=60)
        a = ReadoutLayer(ReadoutLayerConfig(), np.random.default_rng(3)).build(
            x, y, RidgeRegressionTrainer()
        )
        b = ReadoutLayer(ReadoutLayerConfig(), np.random.default_rng(3)).build(
            x, y, RidgeRegressionTrainer()
        )
        assert torch.equal(a.ideal, b.ideal)

    def test_without_normalization(self):
        x, y = _linear_data()
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1, normalize_predictors=False))
        assert layer.build(x, y, RidgeRegressionTrainer()).mae() < 1e-6


    def test_normalized_outputs_return_natural_units(self):
        x, y = _linear_data()
        y = 1000.0 * y + 500.0
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1, normalize_outputs=True))
        validation = layer.build(x, y, RidgeRegressionTrainer())

        assert layer.clusters[0].output_scaler is not None
        assert validation.mae() < 1e-6
        assert layer.compute(x[5])[0].item() == pytest.approx(y[5, 0].item(), abs=1e-6)
        scaled = layer.clusters[0].units[0].network.compute(layer._prepare(x))
        assert scaled.min().item() >= -1.0 - 1e-9
        assert scaled.max().item() <= 1.0 + 1e-9

@pytest.mark.unit
class TestReadoutLayerErrors:

    def test_ideal_shape_mismatch(self):
        x, y = _linear_data(n=40)
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1))
        with pytest.raises(ConfigurationError):
            layer.build(x, y[:30], RidgeRegressionTrainer())

    def test_field_count_mismatch(self):
        x, y = _linear_data(n=40)
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1, output_field_names=["a", "b"]))
        with pytest.raises(ConfigurationError):
            layer.build(x, y, RidgeRegressionTrainer())

    def test_too_few_samples(self):
        x, y = _linear_data(n=4)
        with pytest.raises(ConfigurationError):
            ReadoutLayer(ReadoutLayerConfig(seed=1)).build(x, y, RidgeRegressionTrainer())

    def test_wrong_predictor_count(self):
        x, y = _linear_data(n=40)
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1))
        layer.build(x, y, RidgeRegressionTrainer())
        with pytest.raises(InvariantViolationError):
            layer.compute(torch.zeros(4))


@pytest.mark.unit
class TestClassification:

    def test_step_target(self):
        gen = torch.Generator().manual_seed(2)
        x = torch.rand(120, 1, generator=gen, dtype=torch.float64) * 2.0 - 1.0
        y = (x[:, 0] > 0).to(torch.float64).unsqueeze(1)
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1, task_type=TaskType.CLASSIFICATION))
        layer.build(x, y, RidgeRegressionTrainer())

        stats = layer.cluster_error_statistics[0]
        assert stats.ideal_distribution.count == 120
        assert stats.ideal_distribution.num_of[1] == int(y.sum().item())
        assert stats.binary_error_stat.total_err_stat.mean < 0.1
        assert layer.compute(torch.tensor([0.9], dtype=torch.float64))[0].item() > 0.5
        assert layer.compute(torch.tensor([-0.9], dtype=torch.float64))[0].item() < 0.5

    def test_border_mapped_with_normalized_outputs(self):
        gen = torch.Generator().manual_seed(2)
        x = torch.rand(120, 1, generator=gen, dtype=torch.float64) * 2.0 - 1.0
        y = 10.0 * (x[:, 0] > 0).to(torch.float64).unsqueeze(1)
        config = ReadoutLayerConfig(
            seed=1, task_type=TaskType.CLASSIFICATION, bin_border=5.0, normalize_outputs=True
        )
        layer = ReadoutLayer(config)
        layer.build(x, y, RidgeRegressionTrainer())

        stats = layer.cluster_error_statistics[0]
        assert stats.binary_error_stat.total_err_stat.mean < 0.1
        for unit in layer.clusters[0].units:
            assert unit.testing_bin_error_stat.bin_border == pytest.approx(0.0)
        assert layer.compute(torch.tensor([0.9], dtype=torch.float64))[0].item() > 5.0
        assert layer.compute(torch.tensor([-0.9], dtype=torch.float64))[0].item() < 5.0

    def test_single_class_rejected(self):
        x = torch.linspace(0, 1, 40, dtype=torch.float64).unsqueeze(1)
        y = torch.ones(40, 1, dtype=torch.float64)
        layer = ReadoutLayer(ReadoutLayerConfig(seed=1, task_type=TaskType.CLASSIFICATION))
        with pytest.raises(ConfigurationError, match="Insufficient bin"):
            layer.build(x, y, RidgeRegressionTrainer())


@pytest.mark.unit
class TestFeatureScaler:

    def test_columns_mapped_into_range(self):
        data = torch.tensor([[0.0, 5.0, 3.0], [10.0, 7.0, 3.0], [5.0, 6.0, 3.0]], dtype=torch.float64)
        scaled = FeatureScaler().fit(data).transform(data)
        assert scaled[:, 0].tolist() == pytest.approx([-1.0, 1.0, 0.0])
        assert scaled[:, 1].tolist() == pytest.approx([-1.0, 1.0, 0.0])
        assert scaled[:, 2].tolist() == pytest.approx([0.0, 0.0, 0.0])

    def test_inverse_transform(self):
        data = torch.tensor([[0.0, 3.0], [10.0, 3.0], [4.0, 3.0]], dtype=torch.float64)
        scaler = FeatureScaler().fit(data)
        assert torch.allclose(scaler.inverse_transform(scaler.transform(data)), data)
        column = FeatureScaler().fit(data[:, 0])
        assert column.inverse_transform(torch.tensor(0.0, dtype=torch.float64)).item() == pytest.approx(5.0)

    def test_transform_before_fit(self):
        scaler = FeatureScaler()
        assert not scaler.is_fitted
        with pytest.raises(InvariantViolationError):
            scaler.transform(torch.zeros(2, 2))
