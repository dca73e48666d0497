"""Errors raised while resolving targets and deciding requirements."""


class ConfigurationError(ValueError):
    """Invalid target or preset configuration."""


class TargetVersionError(ConfigurationError):
    """A target version is not a number."""


class TargetsConfigurationError(ConfigurationError):
    """A target declaration cannot be resolved to a concrete version."""


class ManifestError(ConfigurationError):
    """The package manifest cannot be used for ``node: engines``."""
