from types import SimpleNamespace

from rest_framework.authentication import BaseAuthentication, get_authorization_header

from coursetrack.exceptions import AuthError

from .credentials import CredentialSigner


class AuthenticatedLearner(SimpleNamespace):
    """
    Principal for a validated credential.
    Carries only the learner id; nothing is loaded from the database here.
    """
    @property
    def is_authenticated(self) -> bool:
        return True


class BearerCredentialAuthentication(BaseAuthentication):
    """
    Validates `Authorization: Bearer <token>` on every protected call.
    - No header -> None, so IsAuthenticated answers 401.
    - Malformed, tampered or expired token -> AuthError (401).
    """

    keyword = b"bearer"

    def authenticate(self, request):
        auth = get_authorization_header(request).split()

        if not auth or auth[0].lower() != self.keyword:
            return None

        if len(auth) == 1:
            raise AuthError("Invalid Authorization header. No credentials provided.")
        elif len(auth) > 2:
            raise AuthError("Invalid Authorization header format.")

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise AuthError("Invalid token.")

        learner_id = CredentialSigner.from_settings().verify(token)
        return (AuthenticatedLearner(id=learner_id), token)

    def authenticate_header(self, request):
        return "Bearer"
