from typing import Optional


class IllustratorError(Exception):
    """Base class for failures surfaced to the user by the pipeline."""
    pass


class PreconditionNotMetError(IllustratorError):
    """Local validation failed; nothing was sent to the backend."""
    pass


class BadCredentialsError(IllustratorError):
    pass


class RequestFailedError(IllustratorError):
    def __init__(self, status: Optional[int], message: str = ""):
        self.status = status
        if not message:
            message = f"Request failed with status {status}." if status else "Request failed."
        super().__init__(message)


class MalformedResponseError(IllustratorError):
    """The backend replied but the expected fields were absent."""
    pass


class NoImageInResponseError(IllustratorError):
    pass
