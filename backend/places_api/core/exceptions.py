class PlaceQueryError(Exception):
    """Raised when a gateway request cannot be served; carries the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class LLMResponseError(Exception):
    """Raised when the model answered with something that is not the JSON we asked for."""
    pass
