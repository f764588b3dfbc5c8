# application/services/auth/service.py
"""Serviço de autenticação: registro, login e validação de requisições."""
import logging
from datetime import datetime, timezone
from typing import Optional

from core.contracts.messaging import ISystemEventBus
from core.contracts.repository import ICredentialStore
from core.contracts.security import IPasswordHasher, ITokenIssuer, ITokenVerifier
from core.entities.event import AuthEventType
from core.entities.token import VerifiedToken
from core.entities.user import LoginResult, UserAccount
from core.exceptions import AuthenticationError, RegistrationError, TokenValidationError
from infrastructure.security.jwt_tokens import extract_bearer_token
from infrastructure.security.passwords import BCRYPT_MAX_PASSWORD_BYTES

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Usuário ou senha inválidos"


class AuthService:
    """
    Orquestra o fluxo de autenticação sem sessão no servidor.

    Cada etapa publica um AuthEventType no barramento; os observers
    inscritos (auditoria, notificações) reagem de forma independente.
    """

    def __init__(self, event_bus: ISystemEventBus,
                 credential_store: ICredentialStore,
                 password_hasher: IPasswordHasher,
                 token_issuer: ITokenIssuer,
                 token_verifier: ITokenVerifier,
                 default_role: str = "USER",
                 min_password_length: int = 8):
        self.event_bus = event_bus
        self.credential_store = credential_store
        self.password_hasher = password_hasher
        self.token_issuer = token_issuer
        self.token_verifier = token_verifier
        self.default_role = default_role
        self.min_password_length = min_password_length

        # Usado quando o usuário não existe, para o login custar o mesmo tempo
        self._dummy_hash = password_hasher.hash("dummy-password-for-timing")

    def _validate_registration(self, username: str, password: str) -> str:
        if not isinstance(username, str) or not username.strip():
            raise RegistrationError("Username é obrigatório")
        if not isinstance(password, str) or len(password) < self.min_password_length:
            raise RegistrationError(
                f"Senha deve ter pelo menos {self.min_password_length} caracteres"
            )
        if len(password.encode('utf-8')) > BCRYPT_MAX_PASSWORD_BYTES:
            raise RegistrationError(f"Senha não pode exceder {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return username.strip()

    def register(self, username: str, password: str, role: Optional[str] = None) -> UserAccount:
        """
        Registra um novo usuário com a senha em hash.

        Raises:
            RegistrationError: dados inválidos ou username já registrado
        """
        username = self._validate_registration(username, password)

        if self.credential_store.exists(username):
            raise RegistrationError(f"Usuário já registrado: {username}")

        user = UserAccount(
            username=username,
            password_hash=self.password_hasher.hash(password),
            role=role or self.default_role
        )

        # Dois registros simultâneos do mesmo nome: só um entra
        if not self.credential_store.add(user):
            raise RegistrationError(f"Usuário já registrado: {username}")

        logger.info(f"Usuário registrado: {user.username} ({user.role})")

        self.event_bus.publish(AuthEventType.USER_REGISTERED.value, {
            'username': user.username,
            'role': user.role,
            'timestamp': user.created_at
        })

        return user

    def login(self, username: str, password: str) -> LoginResult:
        """
        Valida credenciais e emite um token.

        Raises:
            AuthenticationError: usuário inexistente ou senha errada (mesma mensagem)
        """
        user = self.credential_store.get(username) if isinstance(username, str) else None
        password = password if isinstance(password, str) else ""

        if user is None:
            self.password_hasher.verify(password, self._dummy_hash)
            valid = False
        else:
            valid = self.password_hasher.verify(password, user.password_hash)

        if not valid:
            logger.warning(f"Falha de login para '{username}'")
            self.event_bus.publish(AuthEventType.LOGIN_FAILED.value, {
                'username': username,
                'timestamp': datetime.now(timezone.utc)
            })
            raise AuthenticationError(INVALID_CREDENTIALS)

        issued = self.token_issuer.issue_token(user.username, role=user.role)

        logger.info(f"Login bem sucedido: {user.username}")

        self.event_bus.publish(AuthEventType.USER_LOGGED_IN.value, {
            'username': user.username,
            'role': user.role,
            'expires_at': issued.expires_at,
            'timestamp': issued.issued_at
        })

        return LoginResult(
            token=issued.token,
            username=user.username,
            role=user.role,
            expires_at=issued.expires_at
        )

    def authenticate(self, authorization: Optional[str]) -> VerifiedToken:
        """
        Valida o header Authorization de uma requisição.

        Raises:
            TokenValidationError: qualquer motivo de rejeição do token
        """
        try:
            token = extract_bearer_token(authorization)
            return self.token_verifier.verify(token)
        except TokenValidationError as e:
            logger.warning(f"Token rejeitado: {type(e).__name__}")
            self.event_bus.publish(AuthEventType.TOKEN_REJECTED.value, {
                'reason': type(e).__name__,
                'detail': str(e),
                'timestamp': datetime.now(timezone.utc)
            })
            raise
