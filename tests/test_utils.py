"""
Unit tests for settings and sequence helpers.
"""
from dataclasses import fields

import pytest
from fusion_core.core.utils import vec_extract_every_nth_elm
from fusion_core.settings import KernelSettings, load_settings, default_settings


class TestVecExtractEveryNthElm:
    """Tests for strided subsampling."""

    def test_tail_window_excluded(self):
        assert vec_extract_every_nth_elm(list(range(10)), 3) == [0, 3, 6]

    def test_exact_multiple(self):
        # Index 6 equals len - nth and is not taken
        assert vec_extract_every_nth_elm(list(range(9)), 3) == [0, 3]

    def test_nth_one(self):
        assert vec_extract_every_nth_elm(['a', 'b', 'c', 'd'], 1) == ['a', 'b', 'c']

    def test_shorter_than_nth(self):
        assert vec_extract_every_nth_elm([1, 2], 5) == []

    def test_empty(self):
        assert vec_extract_every_nth_elm([], 2) == []

    def test_restartable(self):
        result = vec_extract_every_nth_elm(tuple(range(20)), 4)
        assert list(result) == list(result) == [0, 4, 8, 12]

    def test_invalid_nth(self):
        with pytest.raises(ValueError):
            vec_extract_every_nth_elm([1, 2, 3], 0)


class TestSettings:
    """Tests for kernel settings."""

    def test_packaged_defaults(self):
        assert load_settings() == KernelSettings()
        assert default_settings() == KernelSettings()

    def test_override(self, tmp_path):
        path = tmp_path / "kernel.yaml"
        path.write_text("symmetry_tolerance: 1.0e-6\nmax_condition_number: 1.0e+8\n")
        settings = load_settings(str(path))
        assert settings.symmetry_tolerance == 1e-6
        assert settings.max_condition_number == 1e8
        assert settings.eigenvalue_tolerance == KernelSettings().eigenvalue_tolerance

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(str(path)) == KernelSettings()

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("mat_exp_order: 6\n")
        with pytest.raises(ValueError):
            load_settings(str(path))

    def test_invalid_value(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("symmetry_tolerance: -1.0\n")
        with pytest.raises(ValueError):
            load_settings(str(path))

    def test_empty_value(self, tmp_path):
        path = tmp_path / "blank.yaml"
        path.write_text("symmetry_tolerance:\n")
        with pytest.raises(ValueError, match="symmetry_tolerance"):
            load_settings(str(path))

    @pytest.mark.parametrize("text", ["true", "abc", "[1.0]", "{a: 1}"])
    def test_non_numeric_value(self, tmp_path, text):
        path = tmp_path / "bad.yaml"
        path.write_text(f"eigenvalue_tolerance: {text}\n")
        with pytest.raises(ValueError, match="must be a number"):
            load_settings(str(path))

    def test_exponent_without_dot(self, tmp_path):
        path = tmp_path / "kernel.yaml"
        path.write_text("eigenvalue_tolerance: 1e-10\n")
        assert load_settings(str(path)).eigenvalue_tolerance == 1e-10

    def test_fields(self):
        assert {f.name for f in fields(KernelSettings)} == {
            "symmetry_tolerance", "eigenvalue_tolerance", "max_condition_number"
        }

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            load_settings(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "missing.yaml"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
