"""Tests for settings and the policies they control."""

import math

import pytest

from vector3 import (
    Vector3, VectorSettings, DegenerateAxisError, Vector3ValueError,
    configure, get_settings, reset_settings, settings_context
)


class TestVectorSettings:
    """Test the settings dataclass."""

    def test_defaults(self):
        s = VectorSettings()
        assert s.epsilon == 1e-13
        assert s.zero_axis == 'nan'
        assert s.strict is False

    def test_invalid_epsilon(self):
        with pytest.raises(Vector3ValueError):
            VectorSettings(epsilon=0)

    @pytest.mark.parametrize("epsilon", ["tiny", None, True, [1e-9]])
    def test_epsilon_of_wrong_type(self, epsilon):
        with pytest.raises(Vector3ValueError):
            VectorSettings(epsilon=epsilon)

    def test_configure_epsilon_of_wrong_type(self):
        with pytest.raises(Vector3ValueError):
            configure(epsilon="tiny")
        assert get_settings().epsilon == 1e-13

    def test_invalid_zero_axis(self):
        with pytest.raises(Vector3ValueError):
            VectorSettings(zero_axis='ignore')

    def test_from_env(self):
        env = {
            'VECTOR3_EPSILON': '1e-9',
            'VECTOR3_ZERO_AXIS': 'RAISE',
            'VECTOR3_STRICT': 'yes',
        }
        s = VectorSettings.from_env(env)
        assert s == VectorSettings(epsilon=1e-9, zero_axis='raise', strict=True)

    def test_from_env_empty(self):
        assert VectorSettings.from_env({}) == VectorSettings()

    def test_from_env_bad_values(self):
        with pytest.raises(Vector3ValueError):
            VectorSettings.from_env({'VECTOR3_EPSILON': 'tiny'})
        with pytest.raises(Vector3ValueError):
            VectorSettings.from_env({'VECTOR3_STRICT': 'maybe'})


class TestConfigure:
    """Test configure, reset_settings and settings_context."""

    def test_configure_returns_active_settings(self):
        s = configure(epsilon=1e-6)
        assert s is get_settings()
        assert s.epsilon == 1e-6

    def test_configure_unknown_key(self):
        with pytest.raises(Vector3ValueError):
            configure(tolerance=1e-6)
        assert get_settings() == VectorSettings()

    def test_configure_invalid_value_keeps_previous(self):
        with pytest.raises(Vector3ValueError):
            configure(zero_axis='bogus')
        assert get_settings().zero_axis == 'nan'

    def test_reset(self):
        configure(strict=True)
        reset_settings()
        assert get_settings() == VectorSettings()

    def test_context_restores(self):
        with settings_context(epsilon=1e-3) as s:
            assert s.epsilon == 1e-3
            assert get_settings().epsilon == 1e-3
        assert get_settings().epsilon == 1e-13

    def test_context_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with settings_context(strict=True):
                raise RuntimeError("boom")
        assert get_settings().strict is False


class TestEpsilonPolicy:
    """The configured epsilon drives equals and is_unit."""

    def test_looser_epsilon(self):
        a = Vector3(1, 2, 3)
        b = Vector3(1, 2, 3 + 1e-9)
        assert not a.equals(b)
        with settings_context(epsilon=1e-6):
            assert a.equals(b)
            assert Vector3(1 + 1e-8, 0, 0).is_unit()


class TestZeroAxisPolicy:
    """Degenerate reference axes propagate NaN or raise."""

    ZERO = Vector3(0, 0, 0)

    @pytest.mark.parametrize("op", [
        lambda v, a: v.project_to(a),
        lambda v, a: v.reject_from(a),
        lambda v, a: v.reflect(a),
        lambda v, a: v.scale_along_axis(a, 2),
    ])
    def test_nan_by_default(self, op):
        r = op(Vector3(1, 2, 3), self.ZERO)
        assert all(math.isnan(c) for c in r)

    @pytest.mark.parametrize("op", [
        lambda v, a: v.project_to(a),
        lambda v, a: v.reject_from(a),
        lambda v, a: v.reflect(a),
        lambda v, a: v.scale_along_axis(a, 2),
    ])
    def test_raise_policy(self, op):
        configure(zero_axis='raise')
        with pytest.raises(DegenerateAxisError):
            op(Vector3(1, 2, 3), self.ZERO)

    def test_degenerate_axis_error_is_value_error(self):
        assert issubclass(DegenerateAxisError, ValueError)

    def test_nonzero_axis_unaffected(self):
        configure(zero_axis='raise')
        assert Vector3(1, 2, 3).project_to(Vector3(0, 0, 5)) == Vector3(0, 0, 3)


class TestStrictConstruction:
    """Strict construction raises instead of defaulting to zero."""

    def test_components(self):
        configure(strict=True)
        with pytest.raises(Vector3ValueError):
            Vector3(1, None, 3)
        with pytest.raises(Vector3ValueError):
            Vector3(float('nan'), 0, 0)

    def test_short_array(self):
        configure(strict=True)
        with pytest.raises(Vector3ValueError):
            Vector3.from_array([1, 2])

    def test_non_numeric_array_element(self):
        configure(strict=True)
        with pytest.raises(Vector3ValueError):
            Vector3.from_array([1, 'b', 3])

    def test_missing_field(self):
        configure(strict=True)
        with pytest.raises(Vector3ValueError):
            Vector3.from_object({'x': 1, 'y': 2})

    def test_valid_input_still_accepted(self):
        configure(strict=True)
        assert Vector3(1, 2, 3) == Vector3.from_array([1, 2, 3])

    def test_lenient_non_numeric_array_element(self):
        v = Vector3.from_array([1, 'b', 3])
        assert v.to_list() == [1.0, 0.0, 3.0]
