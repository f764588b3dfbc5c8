# main.py
"""
Auth Events - demonstração do fluxo completo
Registra um usuário, faz login e autentica a requisição com o token emitido.

Uso: python main.py [username] [senha]
"""
import sys
import logging
from pathlib import Path
from rich.console import Console
from rich.logging import RichHandler

from config.settings import ConfigurationError, load_config
from core.bootstrap.system import SystemBootstrap
from core.exceptions import AuthError, TokenValidationError


def setup_logging(console: Console, log_dir: str = 'logs', level: str = 'INFO') -> None:
    """Configura o sistema de logging."""
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    file_handler = logging.FileHandler(
        log_path / "system.log",
        mode='w',
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    console_handler = RichHandler(
        console=console,
        level=getattr(logging, str(level).upper(), logging.INFO),
        show_time=False,
        markup=False
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)


def print_banner(console: Console) -> None:
    """Exibe o banner do sistema."""
    banner = """
    ╔═══════════════════════════════════════════════════════════╗
    ║      AUTH EVENTS - TOKENS STATELESS + OBSERVERS           ║
    ║                                                           ║
    ║  🔐 JWT (HMAC) sem sessão no servidor                     ║
    ║  📣 Barramento de eventos com observers                   ║
    ╚═══════════════════════════════════════════════════════════╝
    """
    console.print(banner, style="bold cyan")


def console_notifier(console: Console):
    """Notifier que apenas mostra a mensagem no console."""
    def notify(recipient: str, message: str) -> None:
        console.print(f"  📧 Para {recipient}: {message}")
    return notify


def run_demo(console: Console, bootstrap: SystemBootstrap, username: str, password: str) -> bool:
    """Executa registro, login e autenticação."""
    auth = bootstrap.auth

    try:
        user = auth.register(username, password)
        console.print(f"[green]✓ Usuário registrado:[/green] {user.username} ({user.role})")

        result = auth.login(username, password)
        console.print(f"[green]✓ Login ok[/green] - token expira em {result.expires_at.isoformat()}")

        verified = auth.authenticate(f"Bearer {result.token}")
        console.print(f"[green]✓ Requisição autenticada como[/green] {verified.subject}")

        tampered = result.token[:-3] + ('A' if result.token[-3] != 'A' else 'B') + result.token[-2:]
        try:
            auth.authenticate(f"Bearer {tampered}")
        except TokenValidationError as e:
            console.print(f"[yellow]✓ Token adulterado rejeitado:[/yellow] {type(e).__name__}")
        else:
            console.print("[red]❌ Token adulterado foi aceito[/red]")
            return False

        return True

    except (AuthError, TokenValidationError) as e:
        console.print(f"[red]❌ {type(e).__name__}: {e}[/red]")
        return False


def main() -> None:
    """Função principal."""
    console = Console()

    username = sys.argv[1] if len(sys.argv) > 1 else "alice"
    password = sys.argv[2] if len(sys.argv) > 2 else "correct-horse-battery"

    print_banner(console)

    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red]❌ {e}[/red]")
        console.print("[yellow]Defina JWT_SECRET (mínimo 32 bytes) no ambiente ou no .env[/yellow]")
        sys.exit(1)

    setup_logging(console, config['system']['log_dir'], config['system']['log_level'])

    bootstrap = SystemBootstrap(config=config, notifier=console_notifier(console))

    if not bootstrap.initialize():
        console.print("\n[red]❌ Falha na inicialização do sistema[/red]")
        sys.exit(1)

    try:
        ok = run_demo(console, bootstrap, username, password)
    finally:
        bootstrap.shutdown()

    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
