# itemcf/errors.py


class ConfigError(ValueError):
    """Out-of-range or unknown configuration value."""


class RecomputeError(RuntimeError):
    """A full similarity recompute failed; the original error is chained as __cause__."""
