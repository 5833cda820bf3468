# auth_api/infra/jwt/flask_jwt_token_codec.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, cast

import jwt
from flask_jwt_extended import create_access_token, create_refresh_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException

from auth_api.services._shared.ports import (
    SessionToken,
    TokenCodec,
    TokenKind,
    TokenVerificationError,
)
from auth_api.services.auth.dto import AuthTokenConfig

EMAIL_CLAIM = "email"


def _to_session_token(claims: dict[str, Any]) -> SessionToken | None:
    """Build a :class:`SessionToken` from raw claims, or ``None`` if they are incomplete."""
    subject = claims.get("sub")
    email = claims.get(EMAIL_CLAIM)
    raw_kind = claims.get("type")
    if not isinstance(subject, str) or not isinstance(email, str):
        return None
    try:
        kind = TokenKind(raw_kind)
    except ValueError:
        return None

    exp = claims.get("exp")
    expires_at = datetime.fromtimestamp(int(exp), tz=UTC) if isinstance(exp, int | float) else None
    return SessionToken(
        subject_id=subject,
        subject_email=email,
        kind=kind,
        expires_at=expires_at,
        jti=claims.get("jti"),
        claims=dict(claims),
    )


@dataclass(slots=True)
class JWTTokenCodec(TokenCodec):
    """
    Adapter for Flask-JWT-Extended.

    Signing, the ``type`` claim and the ``jti`` come from the library; the
    per-kind lifetime comes from :class:`AuthTokenConfig`.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    config: AuthTokenConfig

    def issue(self, subject_id: str, subject_email: str, kind: TokenKind) -> str:
        kind = TokenKind(kind)
        claims = {EMAIL_CLAIM: subject_email}
        expires = self.config.lifetime_for(kind.value)
        if kind is TokenKind.REFRESH:
            token = create_refresh_token(
                identity=str(subject_id), additional_claims=claims, expires_delta=expires
            )
        else:
            token = create_access_token(
                identity=str(subject_id), additional_claims=claims, expires_delta=expires
            )
        return cast(str, token)

    def verify(self, token: str) -> SessionToken:
        try:
            claims = cast(dict[str, Any], decode_token(token))
        except jwt.ExpiredSignatureError as exc:
            raise TokenVerificationError("Token has expired", expired=True) from exc
        except (jwt.PyJWTError, JWTExtendedException, ValueError) as exc:
            raise TokenVerificationError("Token is invalid") from exc

        session_token = _to_session_token(claims)
        if session_token is None:
            raise TokenVerificationError("Token payload is malformed")
        return session_token

    def decode_unsafe(self, token: str) -> SessionToken | None:
        """
        Parse ``token`` without checking signature or expiry.

        Inspection only: never base an authorization decision on the result.
        """
        try:
            claims = jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError:
            return None
        if not isinstance(claims, dict):
            return None
        return _to_session_token(claims)
