class SafeLinksError(Exception):
    """Base error for the link rewriting pipeline."""


class DocumentError(SafeLinksError):
    """A document could not be parsed or serialized."""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path
