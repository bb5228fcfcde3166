# learners/credentials.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass

import jwt
from django.conf import settings

from coursetrack.exceptions import AuthError


@dataclass(frozen=True)
class Credential:
    token: str
    learner_id: str
    issued_at: dt.datetime
    expires_at: dt.datetime


class CredentialSigner:
    """
    Mints and verifies learner bearer tokens (HS256 JWT).
    Nothing is stored server-side: a token is valid while its signature
    checks out and `exp` lies in the future.
    """

    def __init__(self, secret: str, *, ttl: dt.timedelta, algorithm: str = "HS256"):
        self.secret = secret
        self.ttl = ttl
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls) -> "CredentialSigner":
        return cls(
            settings.CREDENTIAL_SECRET,
            ttl=dt.timedelta(days=settings.CREDENTIAL_TTL_DAYS),
            algorithm=settings.CREDENTIAL_ALGORITHM,
        )

    def mint(self, learner_id, *, now: dt.datetime | None = None) -> Credential:
        issued_at = (now or dt.datetime.now(dt.timezone.utc)).replace(microsecond=0)
        expires_at = issued_at + self.ttl
        payload = {
            "learner_id": str(learner_id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return Credential(token=token, learner_id=str(learner_id), issued_at=issued_at, expires_at=expires_at)

    def verify(self, token: str) -> str:
        """Return the learner id carried by `token`, or raise AuthError."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthError("Token has expired.")
        except jwt.InvalidTokenError:
            raise AuthError("Invalid token.")

        learner_id = payload.get("learner_id")
        if not learner_id:
            raise AuthError("Token missing 'learner_id' claim.")
        return learner_id
