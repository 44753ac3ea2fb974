"""
Data output exceptions.

Custom exceptions raised while validating, authorizing and rendering
data outputs.
"""


class HeraldError(Exception):
    """Base exception for all data output errors."""

    pass


class AuthorizationError(HeraldError):
    """Exception raised when a request carries no valid secret."""

    pass


class ConfigurationError(HeraldError):
    """
    Exception raised when an options document fails validation.

    Attributes:
        errors: List of OptionError entries, one per failed rule
    """

    def __init__(self, errors):
        """
        Initialize ConfigurationError.

        Args:
            errors: Non-empty list of OptionError entries
        """
        self.errors = list(errors)
        super().__init__("; ".join(str(error) for error in self.errors))


class RenderError(HeraldError):
    """
    Exception raised when a template cannot be rendered.

    Options are validated before they are saved, so this only surfaces
    when an invalid template reaches the renderer some other way. It is
    never turned into a partial document.
    """

    pass
