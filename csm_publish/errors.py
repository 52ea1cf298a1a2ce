from __future__ import annotations


class PublishError(RuntimeError):
    pass


class ConfigurationError(PublishError):
    """Missing or invalid run configuration (env, connection string, container path)."""


class EmptyInputError(PublishError):
    pass


class PackagingError(PublishError):
    """Scratch directory or archive could not be created."""


class OutputWriteError(PublishError):
    pass
