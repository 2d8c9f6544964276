# authx/authentication.py
# DRF authentication class for identity-provider bearer tokens

from rest_framework.authentication import BaseAuthentication

from .gate import AuthGate


class IdentityTokenAuthentication(BaseAuthentication):
    """
    Reads ``Authorization: Bearer <token>`` and asks the AuthGate to verify
    it. An invalid, expired or revoked token leaves the request anonymous
    instead of failing it; views that need a caller reject anonymous
    requests themselves.
    """
    keyword = "Bearer"

    def authenticate(self, request):
        auth_header = request.headers.get("Authorization", "")

        if not auth_header.startswith(f"{self.keyword} "):
            return None

        token = auth_header.split(" ", 1)[1].strip()
        identity = AuthGate().authenticate(token)
        if identity is None:
            return None

        return (identity, token)

    def authenticate_header(self, request):
        return self.keyword
