"""
Unit tests for covariance checks.
"""
import logging

import pytest
import numpy as np
from fusion_core.core.covariance import (
    check_cov, covariance_violations, enforce_matrix_symmetry
)
from fusion_core.core.frames import CoordinateFrame
from fusion_core.settings import KernelSettings

LOGGER_NAME = "fusion_core.core.covariance"


class TestCheckCov:
    """Tests for covariance validation."""

    def test_identity_is_valid(self, caplog):
        with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
            assert check_cov(np.eye(3), "identity")
        assert caplog.records == []

    def test_non_finite(self, caplog):
        cov = np.eye(3)
        cov[1, 1] = np.nan
        with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
            assert not check_cov(cov, "imu_core_cov")
        assert len(caplog.records) == 1
        assert "imu_core_cov" in caplog.records[0].getMessage()
        assert "non-finite" in caplog.records[0].getMessage()

    def test_infinite(self):
        cov = np.eye(3)
        cov[0, 2] = np.inf
        messages = []
        assert not check_cov(cov, "inf", reporter=messages.append)
        assert len(messages) == 1

    def test_not_symmetric(self):
        cov = np.eye(3)
        cov[0, 1] = 0.1
        messages = []
        assert not check_cov(cov, "pose_cov", reporter=messages.append)
        assert any("not symmetric" in m and "pose_cov" in m for m in messages)

    def test_not_psd(self):
        messages = []
        assert not check_cov(np.diag([1.0, -1.0, 2.0]), "neg", reporter=messages.append)
        assert len(messages) == 1
        assert "positive semi-definite" in messages[0]

    def test_zero_matrix_is_psd(self):
        assert check_cov(np.zeros((3, 3)), "zero", reporter=pytest.fail)

    def test_condition_number(self):
        cov = np.diag([1.0, 1e-14])
        assert check_cov(cov, "cond", reporter=pytest.fail)

        messages = []
        assert not check_cov(cov, "cond", check_cond=True, reporter=messages.append)
        assert len(messages) == 1
        assert "ill-conditioned" in messages[0]

    def test_well_conditioned(self):
        cov = np.diag([1.0, 2.0, 3.0])
        assert check_cov(cov, "cond", check_cond=True, reporter=pytest.fail)

    def test_multiple_violations(self):
        cov = np.array([[1.0, 3.0], [0.0, 1.0]])
        violations = covariance_violations(cov)
        assert len(violations) == 2
        assert violations[0].startswith("not symmetric")
        assert violations[1].startswith("not positive semi-definite")

    def test_not_square(self):
        messages = []
        assert not check_cov(np.zeros((2, 3)), "rect", reporter=messages.append)
        assert "not square" in messages[0]

    def test_ragged_input(self):
        messages = []
        assert not check_cov([[1.0, 0.0], [0.0]], "ragged", reporter=messages.append)
        assert len(messages) == 1
        assert "ragged" in messages[0]
        assert "not a numeric matrix" in messages[0]

    def test_non_numeric_input(self):
        messages = []
        assert not check_cov([["a", "b"], ["c", "d"]], "text", reporter=messages.append)
        assert "not a numeric matrix" in messages[0]

    def test_large_scale_rank_deficient(self):
        R = CoordinateFrame.rotation_matrix_rpy(0.3, -0.5, 1.2)
        cov = R @ np.diag([1e6, 1e6, 0.0]) @ R.T
        assert check_cov(cov, "rankdef", reporter=pytest.fail)

    def test_large_scale_propagated(self):
        rng = np.random.default_rng(7)
        F = np.eye(15) + 0.01 * rng.normal(size=(15, 15))
        P = np.diag(rng.uniform(1e2, 1e4, size=15))
        for _ in range(50):
            P = F @ P @ F.T
        assert check_cov(P, "propagated", reporter=pytest.fail)

    def test_large_scale_negative_eigenvalue(self):
        messages = []
        assert not check_cov(np.diag([1e6, -1.0]), "neg", reporter=messages.append)
        assert "positive semi-definite" in messages[0]

    def test_does_not_mutate(self):
        cov = np.array([[1.0, 0.2], [0.1, -1.0]])
        original = cov.copy()
        check_cov(cov, "mut", check_cond=True, reporter=lambda message: None)
        assert np.array_equal(cov, original)

    def test_custom_tolerance(self):
        cov = np.eye(2)
        cov[0, 1] = 1e-6
        assert not check_cov(cov, "tol", reporter=lambda message: None)
        settings = KernelSettings(symmetry_tolerance=1e-3)
        assert check_cov(cov, "tol", reporter=pytest.fail, settings=settings)


class TestEnforceMatrixSymmetry:
    """Tests for symmetrization."""

    def test_result_symmetric(self):
        rng = np.random.default_rng(3)
        M = rng.normal(size=(5, 5))
        S = enforce_matrix_symmetry(M)
        assert np.allclose(S, S.T)
        assert np.allclose(S, 0.5 * (M + M.T))

    def test_idempotent(self):
        rng = np.random.default_rng(4)
        M = rng.normal(size=(4, 4))
        once = enforce_matrix_symmetry(M)
        twice = enforce_matrix_symmetry(once)
        assert np.allclose(once, twice)

    def test_symmetric_unchanged(self):
        M = np.array([[2.0, 0.5, 0.1], [0.5, 1.0, 0.0], [0.1, 0.0, 3.0]])
        assert np.allclose(enforce_matrix_symmetry(M), M)

    def test_returns_new_array(self):
        M = np.eye(3)
        S = enforce_matrix_symmetry(M)
        S[0, 0] = 5.0
        assert M[0, 0] == 1.0

    def test_not_square(self):
        with pytest.raises(ValueError):
            enforce_matrix_symmetry(np.zeros((2, 3)))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
