#infrastructure/security/jwt_tokens.py
"""
Emissão e verificação de tokens JWT (serialização compacta, HMAC).

Fluxo:
  1. Usuário faz login com username/senha
  2. Servidor valida as credenciais e emite o token
  3. Cliente envia "Authorization: Bearer <token>" em cada requisição
  4. Servidor valida assinatura e validade sem guardar sessão
"""
import base64
import logging
import math
import re
from datetime import datetime, timezone
from typing import Callable, Optional, Union

import jwt
from jwt import exceptions as jwt_errors
from pydantic import ValidationError

from config.settings import ConfigurationError, MIN_SECRET_BYTES
from core.contracts.security import ITokenIssuer, ITokenVerifier
from core.entities.token import TokenClaims, IssuedToken, VerifiedToken
from core.exceptions import (
    MalformedTokenError,
    InvalidSignatureError,
    ExpiredTokenError,
    ImmatureTokenError,
)

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_ALGORITHM = 'HS256'

# Alfabeto base64url sem padding
SEGMENT_PATTERN = re.compile(r'[A-Za-z0-9_-]+')

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_datetime(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def load_signing_secret(secret: Union[str, bytes, None],
                        algorithm: str = DEFAULT_ALGORITHM) -> bytes:
    """
    Converte e valida o segredo de assinatura.

    Raises:
        ConfigurationError: algoritmo não suportado, segredo ausente ou curto demais
    """
    if algorithm not in MIN_SECRET_BYTES:
        raise ConfigurationError(
            f"Algoritmo de assinatura não suportado: {algorithm} "
            f"(suportados: {', '.join(MIN_SECRET_BYTES)})"
        )

    if secret is None or len(secret) == 0:
        raise ConfigurationError("Segredo de assinatura não configurado")

    key = secret.encode('utf-8') if isinstance(secret, str) else bytes(secret)

    minimum = MIN_SECRET_BYTES[algorithm]
    if len(key) < minimum:
        raise ConfigurationError(
            f"Segredo de assinatura fraco para {algorithm}: "
            f"{len(key) * 8} bits (mínimo {minimum * 8})"
        )

    return key


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Extrai o token de um header "Authorization: Bearer <token>".

    Raises:
        MalformedTokenError: header ausente ou em outro esquema
    """
    if not authorization or not authorization.strip():
        raise MalformedTokenError("Header Authorization ausente")

    scheme, _, token = authorization.strip().partition(' ')
    token = token.strip()
    if scheme.lower() != 'bearer' or not token:
        raise MalformedTokenError("Header Authorization deve ser 'Bearer <token>'")

    return token


class JwtTokenIssuer(ITokenIssuer):
    """
    Emite tokens assinados com validade limitada.

    iat é o instante de emissão em segundos inteiros (arredondado para baixo)
    e exp = iat + TTL.
    """

    def __init__(self, secret: Union[str, bytes, None],
                 ttl_seconds: int = DEFAULT_TTL_SECONDS,
                 algorithm: str = DEFAULT_ALGORITHM,
                 clock: Clock = utc_now):
        """
        Args:
            secret: Segredo HMAC compartilhado com o verificador
            ttl_seconds: Validade do token
            algorithm: HS256, HS384 ou HS512
            clock: Fonte de tempo (datetime com timezone)

        Raises:
            ConfigurationError: segredo inválido ou TTL não positivo
        """
        self._key = load_signing_secret(secret, algorithm)

        if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, int) or ttl_seconds <= 0:
            raise ConfigurationError(f"TTL do token deve ser um inteiro positivo: {ttl_seconds!r}")

        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm
        self.clock = clock

        logger.info(f"JwtTokenIssuer inicializado - algoritmo: {algorithm}, ttl: {ttl_seconds}s")

    def issue_token(self, identity: str, role: Optional[str] = None) -> IssuedToken:
        """
        Emite um token para uma identidade já autenticada.

        Args:
            identity: Sujeito do token (claim sub)
            role: Papel opcional (claim role)

        Returns:
            IssuedToken com o token compacto e as datas de emissão/expiração
        """
        if not isinstance(identity, str) or not identity.strip():
            raise ValueError("Identidade do token não pode ser vazia")

        now = self.clock().timestamp()
        issued_at = math.floor(now)
        expires_at = issued_at + self.ttl_seconds

        claims = {'sub': identity, 'iat': issued_at, 'exp': expires_at}
        if role:
            claims['role'] = role

        token = jwt.encode(claims, self._key, algorithm=self.algorithm)

        logger.debug(f"Token emitido para '{identity}' (expira em {expires_at})")

        return IssuedToken(
            token=token,
            subject=identity,
            issued_at=_to_datetime(issued_at),
            expires_at=_to_datetime(expires_at),
            role=role
        )

    def issue(self, identity: str, role: Optional[str] = None) -> str:
        """Emite um token e retorna apenas a serialização compacta."""
        return self.issue_token(identity, role).token


class JwtTokenVerifier(ITokenVerifier):
    """
    Verifica tokens emitidos por JwtTokenIssuer com o mesmo segredo.

    Ordem: estrutura, assinatura (comparação em tempo constante),
    claims, relógio. Não existe sessão nem lista de revogação.
    """

    # Expiração e iat são checados aqui com o relógio injetado
    DECODE_OPTIONS = {
        'verify_signature': True,
        'verify_exp': False,
        'verify_iat': False,
        'verify_nbf': False,
        'verify_aud': False,
        'verify_iss': False,
        'require': ['sub', 'iat', 'exp'],
    }

    def __init__(self, secret: Union[str, bytes, None],
                 algorithm: str = DEFAULT_ALGORITHM,
                 leeway_seconds: int = 0,
                 clock: Clock = utc_now):
        self._key = load_signing_secret(secret, algorithm)

        if isinstance(leeway_seconds, bool) or not isinstance(leeway_seconds, int) or leeway_seconds < 0:
            raise ConfigurationError(f"Leeway deve ser um inteiro não negativo: {leeway_seconds!r}")

        self.algorithm = algorithm
        self.leeway_seconds = leeway_seconds
        self.clock = clock

    @staticmethod
    def _check_structure(token: str) -> None:
        """Exige três segmentos base64url não vazios e assinatura canônica."""
        if not isinstance(token, str):
            raise MalformedTokenError(f"Token deve ser string, recebeu {type(token).__name__}")

        segments = token.split('.')
        if len(segments) != 3:
            raise MalformedTokenError(
                f"Token deve ter 3 segmentos separados por '.', encontrou {len(segments)}"
            )

        for name, segment in zip(('header', 'payload', 'signature'), segments):
            # Comprimento % 4 == 1 nunca é base64 válido
            if not SEGMENT_PATTERN.fullmatch(segment) or len(segment) % 4 == 1:
                raise MalformedTokenError(f"Segmento {name} não é base64url válido")

        # Assinatura em base64url canônico: bits de preenchimento zerados
        signature = segments[2]
        padded = signature + '=' * (-len(signature) % 4)
        canonical = base64.urlsafe_b64encode(base64.urlsafe_b64decode(padded)).rstrip(b'=')
        if canonical.decode('ascii') != signature:
            raise InvalidSignatureError("Assinatura do token inválida")

    def _decode(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[self.algorithm],
                options=self.DECODE_OPTIONS
            )
        # InvalidSignatureError é subclasse de DecodeError: precisa vir antes
        except jwt_errors.InvalidSignatureError as e:
            raise InvalidSignatureError("Assinatura do token inválida") from e
        except jwt_errors.InvalidAlgorithmError as e:
            raise InvalidSignatureError(
                f"Algoritmo do token não aceito (esperado {self.algorithm})"
            ) from e
        except jwt_errors.InvalidTokenError as e:
            raise MalformedTokenError(f"Token malformado: {e}") from e

        try:
            return TokenClaims.model_validate(payload)
        except ValidationError as e:
            raise MalformedTokenError(f"Claims inválidos: {e.error_count()} erro(s)") from e

    def verify(self, token: str) -> VerifiedToken:
        """
        Verifica um token e recupera a identidade.

        Raises:
            MalformedTokenError: estrutura, base64url ou claims inválidos
            InvalidSignatureError: assinatura não confere
            ExpiredTokenError: agora >= exp
            ImmatureTokenError: iat no futuro
        """
        self._check_structure(token)
        claims = self._decode(token)

        now = self.clock().timestamp()
        if now >= claims.exp + self.leeway_seconds:
            raise ExpiredTokenError(f"Token expirado em {_to_datetime(claims.exp).isoformat()}")
        if now + self.leeway_seconds < claims.iat:
            raise ImmatureTokenError(f"Token emitido no futuro ({_to_datetime(claims.iat).isoformat()})")

        return VerifiedToken(
            subject=claims.sub,
            issued_at=_to_datetime(claims.iat),
            expires_at=_to_datetime(claims.exp),
            role=claims.role
        )
