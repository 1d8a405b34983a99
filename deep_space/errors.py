"""Exceptions raised by the deep-space perturbation package."""


class DeepSpaceError(Exception):
    """Base class for deep-space perturbation errors."""


class ConfigurationError(DeepSpaceError, ValueError):
    """Raised when a perturbation context cannot be created.

    Initialization is all-or-nothing: when this is raised no context exists.
    """
