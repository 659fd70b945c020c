class GhJjError(Exception):
    """Base class for every failure the clone pipeline reports."""


class ConfigurationError(GhJjError):
    """The GitHub CLI configuration lacks a host entry or user."""


class AuthenticationError(GhJjError):
    """No access token could be found for the host."""


class RemoteLookupError(GhJjError):
    """The repository lookup against the GitHub API failed."""


class CloneProcessError(GhJjError):
    """`jj git clone` could not be spawned or exited unsuccessfully."""


class MissingDirectoryError(GhJjError):
    """The cloned repository's directory could not be determined."""


class RemoteWiringError(GhJjError):
    """`jj git remote add` could not be spawned or exited unsuccessfully."""


def iter_causes(exc: BaseException):
    cause = exc.__cause__ or exc.__context__
    while cause is not None:
        yield cause
        cause = cause.__cause__ or cause.__context__
