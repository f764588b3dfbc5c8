# core/exceptions.py
"""
Exceções do domínio de autenticação.

Erros de token são recuperáveis: quem chama deve tratá-los como
"não autenticado" e pedir novo login.
"""


class TokenValidationError(Exception):
    """Base para qualquer token rejeitado pelo verificador."""
    pass


class MalformedTokenError(TokenValidationError):
    """Estrutura inválida: segmentos, base64url ou claims."""
    pass


class InvalidSignatureError(TokenValidationError):
    """Assinatura não confere com o segredo configurado."""
    pass


class ExpiredTokenError(TokenValidationError):
    """Token com exp já ultrapassado."""
    pass


class ImmatureTokenError(TokenValidationError):
    """Token com iat no futuro."""
    pass


class AuthError(Exception):
    """Base para erros do fluxo de registro/login."""
    pass


class RegistrationError(AuthError):
    """Dados de registro inválidos ou usuário já existente."""
    pass


class AuthenticationError(AuthError):
    """Credenciais inválidas."""
    pass


__all__ = [
    'TokenValidationError',
    'MalformedTokenError',
    'InvalidSignatureError',
    'ExpiredTokenError',
    'ImmatureTokenError',
    'AuthError',
    'RegistrationError',
    'AuthenticationError',
]
