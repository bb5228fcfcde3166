# learners/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction

from coursetrack.exceptions import ConflictError, NotFoundError, ValidationError, storage_errors

from .credentials import Credential, CredentialSigner
from .models import Learner

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3


@dataclass(frozen=True)
class IssuedCredential:
    credential: Credential
    username: str
    learner_id: str
    last_task: int

    def as_response(self) -> dict:
        return {
            "token": self.credential.token,
            "username": self.username,
            "userId": self.learner_id,
            "lastTask": self.last_task,
        }


class IdentityIssuer:
    """
    Registers and logs in learners. Identity is possession of the username;
    there is no password.
    """

    def __init__(self, learners=None, signer: CredentialSigner | None = None):
        self.learners = learners if learners is not None else Learner.objects
        self.signer = signer or CredentialSigner.from_settings()

    def _issue(self, learner: Learner) -> IssuedCredential:
        return IssuedCredential(
            credential=self.signer.mint(learner.pk),
            username=learner.username,
            learner_id=str(learner.pk),
            last_task=learner.last_task or 1,
        )

    @storage_errors
    def register(self, username: str) -> IssuedCredential:
        if not username or len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters.")

        try:
            with transaction.atomic():
                learner = self.learners.create(username=username, last_task=1)
        except IntegrityError:
            # unique(username) also covers two registrations racing each other
            raise ConflictError("Username already exists.")

        logger.info("registered learner %s", learner.pk)
        return self._issue(learner)

    @storage_errors
    def login(self, username: str) -> IssuedCredential:
        learner = self.learners.filter(username=username).first()
        if learner is None:
            raise NotFoundError("User not found.")
        return self._issue(learner)
