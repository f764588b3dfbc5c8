# config/settings.py
"""
Carregador de configurações do sistema de autenticação e eventos.
"""
import os
import re
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, List
from functools import lru_cache

# Tenta importar python-dotenv se disponível
try:
    from dotenv import load_dotenv
    HAS_DOTENV = True
except ImportError:
    HAS_DOTENV = False

logger = logging.getLogger(__name__)


# Tamanho mínimo do segredo (bytes) por algoritmo HMAC
MIN_SECRET_BYTES = {
    'HS256': 32,
    'HS384': 48,
    'HS512': 64,
}


class ConfigurationError(Exception):
    """Exceção para erros de configuração."""
    pass


class ConfigValidator:
    """Valida configurações do sistema."""

    @staticmethod
    def validate_config(config: Dict[str, Any]) -> List[str]:
        """
        Valida a configuração e retorna lista de erros.

        Returns:
            Lista de mensagens de erro (vazia se tudo OK)
        """
        errors = []

        required_sections = ['system', 'security']

        for section in required_sections:
            if section not in config:
                errors.append(f"Seção obrigatória ausente: {section}")

        security = config.get('security') or {}
        jwt_config = security.get('jwt') or {}

        algorithm = jwt_config.get('algorithm', 'HS256')
        if algorithm not in MIN_SECRET_BYTES:
            errors.append(
                f"security.jwt.algorithm inválido: {algorithm} "
                f"(suportados: {', '.join(MIN_SECRET_BYTES)})"
            )

        # Segredo é obrigatório e precisa ter força mínima
        secret = jwt_config.get('secret')
        if secret is None or secret == '':
            errors.append("security.jwt.secret é obrigatório")
        elif algorithm in MIN_SECRET_BYTES:
            size = len(str(secret).encode('utf-8'))
            minimum = MIN_SECRET_BYTES[algorithm]
            if size < minimum:
                errors.append(
                    f"security.jwt.secret muito curto para {algorithm}: "
                    f"{size * 8} bits (mínimo {minimum * 8})"
                )

        expiration = jwt_config.get('expiration_seconds', 86400)
        if isinstance(expiration, int) and expiration <= 0:
            errors.append("security.jwt.expiration_seconds deve ser positivo")

        password = security.get('password') or {}
        rounds = password.get('bcrypt_rounds', 12)
        if isinstance(rounds, int) and not 4 <= rounds <= 31:
            errors.append(f"security.password.bcrypt_rounds fora do intervalo 4..31: {rounds}")

        return errors

    @staticmethod
    def validate_types(config: Dict[str, Any]) -> List[str]:
        """Valida tipos de dados."""
        errors = []

        type_specs = {
            'security.jwt.expiration_seconds': int,
            'security.jwt.leeway_seconds': int,
            'security.password.bcrypt_rounds': int,
            'security.password.min_length': int,
            'events.isolate_failures': bool,
            'audit.flush_interval': (float, int),
        }

        for path, expected_types in type_specs.items():
            value = ConfigValidator._get_nested_value(config, path)
            if value is not None:
                # bool é subclasse de int, não deve passar como inteiro
                if isinstance(value, bool) and expected_types is not bool:
                    errors.append(f"{path} deve ser {expected_types}, mas é {type(value)}")
                elif not isinstance(value, expected_types):
                    errors.append(
                        f"{path} deve ser {expected_types}, mas é {type(value)}"
                    )

        return errors

    @staticmethod
    def _get_nested_value(config: Dict, path: str) -> Any:
        """Obtém valor aninhado do config."""
        keys = path.split('.')
        value = config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return None

        return value


class ConfigLoader:
    """Carregador principal de configurações."""

    # Padrão para variáveis de ambiente: ${VAR_NAME:default_value}
    ENV_VAR_PATTERN = re.compile(r'\$\{([^:}]+)(?::([^}]*))?\}')

    # Chaves cujo valor vindo do ambiente nunca é convertido de tipo
    RAW_STRING_KEYS = frozenset({'secret'})

    def __init__(self, config_path: str = "config/config.yaml",
                 env_file: str = ".env"):
        """
        Inicializa o carregador de configurações.

        Args:
            config_path: Caminho do arquivo YAML
            env_file: Caminho do arquivo .env (opcional)
        """
        self.config_path = Path(config_path)
        self.env_file = Path(env_file)
        self._config_cache = None
        self._last_modified = None

        # Carrega variáveis de ambiente do arquivo .env se disponível
        if HAS_DOTENV and self.env_file.exists():
            load_dotenv(self.env_file)
            logger.info(f"Variáveis de ambiente carregadas de {self.env_file}")

    def load(self, validate: bool = True) -> Dict[str, Any]:
        """
        Carrega configurações com cache e validação.

        Args:
            validate: Se deve validar a configuração

        Returns:
            Dicionário de configuração

        Raises:
            ConfigurationError: Se houver erro na configuração
        """
        if self._is_cache_valid():
            return self._config_cache

        config = self._load_yaml()
        config = self._substitute_env_vars(config)
        config = self._merge_with_defaults(config)

        if validate:
            self._validate_config(config)

        self._config_cache = config
        self._last_modified = self.config_path.stat().st_mtime

        logger.info("Configuração carregada com sucesso")
        return config

    def _is_cache_valid(self) -> bool:
        """Verifica se o cache ainda é válido."""
        if self._config_cache is None or self._last_modified is None:
            return False

        if not self.config_path.exists():
            return False

        current_mtime = self.config_path.stat().st_mtime
        return current_mtime == self._last_modified

    def _load_yaml(self) -> Dict[str, Any]:
        """Carrega arquivo YAML."""
        if not self.config_path.exists():
            raise ConfigurationError(
                f"Arquivo de configuração não encontrado: {self.config_path}"
            )

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Erro ao parsear YAML: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Erro ao carregar configuração: {e}") from e

        if not isinstance(config, dict):
            raise ConfigurationError("Configuração deve ser um dicionário")

        return config

    @staticmethod
    def _convert_env_value(value: str) -> Any:
        """Converte valores vindos do ambiente para tipos básicos."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'
        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            return value

    def _substitute_env_vars(self, obj: Any, convert: bool = True) -> Any:
        """
        Substitui variáveis de ambiente recursivamente.
        Formato: ${VAR_NAME:default_value}

        Se a string inteira é uma variável, o valor convertido substitui a
        string (None quando a variável não existe e não há default).
        Valores de RAW_STRING_KEYS ficam como string.
        """
        if isinstance(obj, str):
            def lookup(match):
                return os.environ.get(match.group(1), match.group(2))

            full = self.ENV_VAR_PATTERN.fullmatch(obj)
            if full:
                value = lookup(full)
                if value is None:
                    return None
                return self._convert_env_value(value) if convert else value

            # Substituição parcial mantém string
            return self.ENV_VAR_PATTERN.sub(lambda m: lookup(m) or '', obj)

        elif isinstance(obj, dict):
            return {
                k: self._substitute_env_vars(v, convert=k not in self.RAW_STRING_KEYS)
                for k, v in obj.items()
            }

        elif isinstance(obj, list):
            return [self._substitute_env_vars(item) for item in obj]

        else:
            return obj

    def _merge_with_defaults(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge com valores default."""
        defaults = self._get_default_config()
        return self._deep_merge(defaults, config)

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """Merge profundo de dicionários."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """Valida a configuração."""
        validator = ConfigValidator()

        errors = validator.validate_config(config)
        errors.extend(validator.validate_types(config))

        if errors:
            error_msg = "Erros de configuração encontrados:\n"
            error_msg += "\n".join(f"  - {error}" for error in errors)
            raise ConfigurationError(error_msg)

    def _get_default_config(self) -> Dict[str, Any]:
        """Retorna configuração padrão mínima."""
        return {
            'system': {
                'log_dir': 'logs',
                'log_level': 'INFO',
                'environment': 'production'
            },
            'security': {
                'jwt': {
                    'algorithm': 'HS256',
                    'expiration_seconds': 86400,
                    'leeway_seconds': 0
                },
                'password': {
                    'bcrypt_rounds': 12,
                    'min_length': 8
                },
                'default_role': 'USER'
            },
            'events': {
                'isolate_failures': True
            },
            'audit': {
                'enabled': True,
                'flush_interval': 5
            }
        }

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Obtém uma seção específica da configuração.

        Args:
            section: Nome da seção

        Returns:
            Configuração da seção
        """
        config = self.load()
        return config.get(section, {})

    def reload(self) -> Dict[str, Any]:
        """Força recarga da configuração."""
        self._config_cache = None
        self._last_modified = None
        return self.load()


# Funções de conveniência
@lru_cache(maxsize=1)
def load_config(config_path: str = "config/config.yaml") -> Dict[str, Any]:
    """
    Carrega configurações (com cache).

    Args:
        config_path: Caminho do arquivo de configuração

    Returns:
        Dicionário de configuração
    """
    loader = ConfigLoader(config_path)
    return loader.load()


__all__ = [
    'ConfigLoader',
    'ConfigValidator',
    'ConfigurationError',
    'MIN_SECRET_BYTES',
    'load_config',
]
