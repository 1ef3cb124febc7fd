"""Admin session token verification.

The embedded admin UI sends a session token (an HS256 JWT signed with the
app secret) in the ``Authorization`` header. Its ``dest`` claim is the shop
URL, which scopes every admin request to one shop.
"""

import logging
from datetime import UTC, datetime, timedelta
from urllib.parse import urlparse

import jwt

logger = logging.getLogger(__name__)


class AuthService:
    """Create and verify admin session tokens"""

    def __init__(self, api_key: str, api_secret: str, algorithm: str = "HS256"):
        if not api_secret:
            raise ValueError("API secret cannot be empty")

        self.api_key = api_key
        self.api_secret = api_secret
        self.algorithm = algorithm

    def create_session_token(self, shop_id: str, expire_minutes: int = 1) -> str:
        """Mint a session token for a shop (local tooling and tests)"""
        now = datetime.now(UTC)
        payload = {
            "iss": f"https://{shop_id}/admin",
            "dest": f"https://{shop_id}",
            "aud": self.api_key,
            "sub": shop_id,
            "iat": now,
            "nbf": now - timedelta(seconds=5),
            "exp": now + timedelta(minutes=expire_minutes),
        }
        return jwt.encode(payload, self.api_secret, algorithm=self.algorithm)

    def verify_session_token(self, token: str) -> str | None:
        """Return the shop id the token was issued for, or None if invalid"""
        try:
            payload = jwt.decode(
                token,
                self.api_secret,
                algorithms=[self.algorithm],
                audience=self.api_key,
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Session token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid session token: {e}")
            return None

        shop_id = urlparse(str(payload.get("dest", ""))).hostname
        if not shop_id:
            logger.warning("Session token missing dest")
            return None
        return shop_id
