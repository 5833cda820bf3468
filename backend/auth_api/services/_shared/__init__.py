"""Shared service-layer building blocks: base service, tagged errors and ports."""

from auth_api.services._shared.base import BaseService
from auth_api.services._shared.errors import AuthError, ErrorKind, ServiceError

__all__ = ["AuthError", "BaseService", "ErrorKind", "ServiceError"]
