"""Token adapters - Session token issuance."""

from .jwt import JwtTokenSigner

__all__ = ["JwtTokenSigner"]
