"""Segurança: tokens JWT e hash de senhas."""
from .jwt_tokens import (
    JwtTokenIssuer,
    JwtTokenVerifier,
    extract_bearer_token,
    load_signing_secret,
)
from .passwords import BcryptPasswordHasher

__all__ = [
    'JwtTokenIssuer',
    'JwtTokenVerifier',
    'extract_bearer_token',
    'load_signing_secret',
    'BcryptPasswordHasher'
]
