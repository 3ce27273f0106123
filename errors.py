"""
SongForge Studio - Generation Errors
Typed failures raised by the generation orchestrator and compose proxy.
"""

from typing import Optional


class GenerationError(Exception):
    """Base class for failures surfaced while generating a track."""

    code = "GENERATION_FAILED"
    status_code = 500

    def __init__(self, message: str, hint: Optional[str] = None,
                 suggestion: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.suggestion = suggestion
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"error": self.message, "code": self.code}
        if self.hint:
            body["hint"] = self.hint
        if self.suggestion:
            body["suggestion"] = self.suggestion
        return body


class EmptyPromptError(GenerationError):
    code = "EMPTY_PROMPT"
    status_code = 400


class ConnectivityError(GenerationError):
    code = "CONNECTIVITY_ERROR"
    status_code = 503


class CredentialError(GenerationError):
    code = "INVALID_API_KEY"
    status_code = 401


class BackendUnavailableError(GenerationError):
    code = "CONNECTION_ERROR"
    status_code = 502


class PromptRejectedError(GenerationError):
    code = "PROMPT_REJECTED"
    status_code = 400


class GenerationFailedError(GenerationError):
    code = "GENERATION_FAILED"


class ComposeError(Exception):
    """Compose proxy failure carrying the HTTP status and JSON body to return."""

    def __init__(self, status_code: int, body: dict):
        super().__init__(body.get("error", "Compose request failed"))
        self.status_code = status_code
        self.body = body
