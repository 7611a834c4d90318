"""
Error taxonomy for the feature registry.

Registry operations raise these instead of HTTPException so they can be used
from scripts and tests without a request context. app.main maps them to
client-facing 4xx responses.
"""
from typing import Any, Dict, List, Optional


class RegistryError(Exception):
    """Base class for recoverable registry errors"""
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.detail}


class ValidationError(RegistryError):
    """Missing or malformed field, or a value outside its allowed set"""
    status_code = 400

    def __init__(self, detail: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(detail)
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class ConflictError(RegistryError):
    """Duplicate name on create, or delete of a feature other features depend on"""
    status_code = 409


class NotFoundError(RegistryError):
    """Unknown feature name"""
    status_code = 404
