"""
Process-wide numeric policy for Vector3 operations.

Controls the comparison tolerance, what happens when a projection is taken
onto a zero-length axis, and whether malformed construction input raises.
"""

from __future__ import annotations
import logging
import numbers
import os
from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Iterator

from .logging import LOGGER_ID, Vector3ValueError

logger = logging.getLogger(f"{LOGGER_ID}.settings")

ZERO_AXIS_POLICIES = ('nan', 'raise')

_TRUE_STRINGS = ('1', 'true', 'yes', 'on')
_FALSE_STRINGS = ('0', 'false', 'no', 'off', '')


@dataclass(frozen=True)
class VectorSettings:
    """Configuration for Vector3 numerics."""
    epsilon: float = 1e-13
    zero_axis: str = 'nan'  # 'nan' propagates IEEE specials, 'raise' fails fast
    strict: bool = False    # raise on malformed construction input

    def __post_init__(self):
        if (not isinstance(self.epsilon, numbers.Real) or isinstance(self.epsilon, bool)
                or not self.epsilon > 0):
            raise Vector3ValueError(f"epsilon must be positive, got {self.epsilon!r}")
        if self.zero_axis not in ZERO_AXIS_POLICIES:
            raise Vector3ValueError(
                f"zero_axis must be one of {ZERO_AXIS_POLICIES}, got {self.zero_axis!r}"
            )

    @classmethod
    def from_env(cls, environ=None) -> VectorSettings:
        """Build settings from VECTOR3_* environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)

        Returns:
            Settings with every variable that is present applied over the defaults
        """
        env = os.environ if environ is None else environ
        kwargs = {}
        if 'VECTOR3_EPSILON' in env:
            try:
                kwargs['epsilon'] = float(env['VECTOR3_EPSILON'])
            except ValueError:
                raise Vector3ValueError(
                    f"VECTOR3_EPSILON is not a number: {env['VECTOR3_EPSILON']!r}"
                )
        if 'VECTOR3_ZERO_AXIS' in env:
            kwargs['zero_axis'] = env['VECTOR3_ZERO_AXIS'].strip().lower()
        if 'VECTOR3_STRICT' in env:
            flag = env['VECTOR3_STRICT'].strip().lower()
            if flag in _TRUE_STRINGS:
                kwargs['strict'] = True
            elif flag in _FALSE_STRINGS:
                kwargs['strict'] = False
            else:
                raise Vector3ValueError(f"VECTOR3_STRICT is not a boolean: {flag!r}")
        return cls(**kwargs)


_settings = VectorSettings()


def get_settings() -> VectorSettings:
    """Return the active settings."""
    return _settings


def configure(**changes) -> VectorSettings:
    """Replace fields of the active settings.

    Raises:
        Vector3ValueError: on unknown field names or invalid values
    """
    global _settings
    known = {f.name for f in fields(VectorSettings)}
    unknown = set(changes) - known
    if unknown:
        raise Vector3ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
    _settings = replace(_settings, **changes)
    logger.info(f"Vector3 settings changed: {_settings}")
    return _settings


def reset_settings() -> VectorSettings:
    """Restore the default settings."""
    global _settings
    _settings = VectorSettings()
    return _settings


@contextmanager
def settings_context(**changes) -> Iterator[VectorSettings]:
    """Apply settings for the duration of a ``with`` block."""
    global _settings
    previous = _settings
    try:
        yield configure(**changes)
    finally:
        _settings = previous
