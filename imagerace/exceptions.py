"""
Exception hierarchy for the imagerace package.

Only request-level failures (InvalidInputError, NoCapableBackendError)
propagate to callers of the public entry points. Backend-level failures are
raised by the adapters themselves and turned into failed attempts by the
race orchestrator.
"""


class ImageRaceError(Exception):
    """Base class for all imagerace errors"""
    pass


class InvalidInputError(ImageRaceError, ValueError):
    """Input is empty, not a byte buffer, or carries invalid options"""
    pass


class BackendUnavailableError(ImageRaceError):
    """A backend could not be loaded or initialized"""
    pass


class MissingCredentialError(BackendUnavailableError):
    """A backend requires a credential that was not supplied"""
    pass


class BackendCompressionFailedError(ImageRaceError):
    """A backend ran but failed mid-operation"""
    pass


class NoCapableBackendError(ImageRaceError):
    """No candidate backend can preserve image metadata"""
    pass
