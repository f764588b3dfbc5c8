# application/services/auth/__init__.py
"""
Serviço de autenticação stateless.
Registro, login com emissão de token e validação de requisições.
"""
from .service import AuthService

__all__ = ['AuthService']
