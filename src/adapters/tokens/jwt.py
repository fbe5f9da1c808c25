"""
JWT token adapter - Implements TokenSigner protocol.

Tokens carry the username as the ``sub`` claim and are signed with
python-jose using the configured secret and algorithm.
"""

from jose import jwt


class JwtTokenSigner:
    """
    Implements TokenSigner protocol via python-jose.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    def sign(self, subject: str) -> str:
        """Encode ``{"sub": subject}`` as a signed JWT."""
        return jwt.encode({"sub": subject}, self._secret, algorithm=self._algorithm)
