# tests/test_settings.py
"""Testes do carregador de configurações."""
import pytest

from config.settings import ConfigLoader, ConfigurationError
from conftest import SECRET

BASE_YAML = """
system:
  log_dir: {log_dir}
security:
  jwt:
    secret: {secret}
"""


def _loader(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return ConfigLoader(str(path), env_file=str(tmp_path / ".env"))


def test_secret_comes_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", SECRET)
    loader = _loader(tmp_path, BASE_YAML.format(log_dir="logs", secret="${JWT_SECRET}"))

    config = loader.load()

    assert config['security']['jwt']['secret'] == SECRET


def test_defaults_are_merged(tmp_path):
    config = _loader(tmp_path, BASE_YAML.format(log_dir="logs", secret=SECRET)).load()

    assert config['security']['jwt']['expiration_seconds'] == 86400
    assert config['security']['jwt']['algorithm'] == 'HS256'
    assert config['events']['isolate_failures'] is True
    assert config['system']['log_level'] == 'INFO'


def test_missing_secret_is_fatal(tmp_path, monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    loader = _loader(tmp_path, BASE_YAML.format(log_dir="logs", secret="${JWT_SECRET}"))

    with pytest.raises(ConfigurationError, match="secret é obrigatório"):
        loader.load()


def test_short_secret_is_fatal(tmp_path):
    loader = _loader(tmp_path, BASE_YAML.format(log_dir="logs", secret="curto-demais"))

    with pytest.raises(ConfigurationError, match="mínimo 256"):
        loader.load()


def test_env_defaults_and_type_conversion(tmp_path, monkeypatch):
    monkeypatch.delenv("TOKEN_TTL", raising=False)
    monkeypatch.delenv("ISOLATE", raising=False)
    monkeypatch.setenv("APP_NAME", "bootcamp")
    content = BASE_YAML.format(log_dir="logs/${APP_NAME}", secret=SECRET) + """
  password:
    bcrypt_rounds: 4
events:
  isolate_failures: ${ISOLATE:false}
"""
    content = content.replace("    secret:", "    expiration_seconds: ${TOKEN_TTL:600}\n    secret:")

    config = _loader(tmp_path, content).load()

    assert config['system']['log_dir'] == "logs/bootcamp"
    assert config['security']['jwt']['expiration_seconds'] == 600
    assert config['events']['isolate_failures'] is False


def test_invalid_values_are_reported_together(tmp_path):
    content = BASE_YAML.format(log_dir="logs", secret=SECRET) + """
    algorithm: RS256
  password:
    bcrypt_rounds: 2
"""
    with pytest.raises(ConfigurationError) as error:
        _loader(tmp_path, content).load()

    message = str(error.value)
    assert "RS256" in message
    assert "bcrypt_rounds" in message


def test_missing_file_and_bad_yaml(tmp_path):
    with pytest.raises(ConfigurationError, match="não encontrado"):
        ConfigLoader(str(tmp_path / "missing.yaml")).load()

    with pytest.raises(ConfigurationError, match="YAML"):
        _loader(tmp_path, "security: [unclosed").load()


def test_reload_picks_up_changes(tmp_path):
    loader = _loader(tmp_path, BASE_YAML.format(log_dir="logs", secret=SECRET))
    assert loader.get_section('system')['log_dir'] == "logs"

    loader.config_path.write_text(BASE_YAML.format(log_dir="other", secret=SECRET), encoding="utf-8")

    assert loader.reload()['system']['log_dir'] == "other"


@pytest.mark.parametrize("secret", [
    "1234567890123456789012345678901234.5678",
    "00123456789012345678901234567890123456789",
    "true-" + "x" * 40,
])
def test_secret_from_environment_is_never_type_converted(tmp_path, monkeypatch, secret):
    monkeypatch.setenv("JWT_SECRET", secret)
    loader = _loader(tmp_path, BASE_YAML.format(log_dir="logs", secret="${JWT_SECRET}"))

    config = loader.load()

    assert config['security']['jwt']['secret'] == secret
