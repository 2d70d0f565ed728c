"""
Runtime configuration for the quiz certificate service.
Values come from the process environment (a `.env` file is loaded by the runner).
"""
import os
import logging
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

REQUIRED_VARS = ('LINKEDIN_CLIENT_ID', 'LINKEDIN_CLIENT_SECRET', 'LINKEDIN_REDIRECT_URI')

DEFAULT_PORT = 3003
DEFAULT_TIMEOUT = 10.0
DEFAULT_QUIZ_TITLE = 'The Lube Buzz Quiz 2024'
DEFAULT_CERTIFICATES_DIR = Path(__file__).resolve().parent / 'certificates'


class ConfigError(RuntimeError):
    """Raised when the environment cannot produce a usable configuration."""


@dataclass(frozen=True)
class Settings:
    linkedin_client_id: str
    linkedin_client_secret: str = field(repr=False)
    linkedin_redirect_uri: str
    secret_key: str = field(repr=False)
    port: int = DEFAULT_PORT
    certificates_dir: Path = DEFAULT_CERTIFICATES_DIR
    certificate_template: Optional[Path] = None
    cors_origins: Tuple[str, ...] = ('*',)
    linkedin_timeout: float = DEFAULT_TIMEOUT
    quiz_title: str = DEFAULT_QUIZ_TITLE


def _split_origins(raw: str) -> Tuple[str, ...]:
    origins = tuple(o.strip() for o in raw.split(',') if o.strip())
    return origins or ('*',)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from `environ` (defaults to os.environ).

    Raises ConfigError naming every missing LinkedIn variable so startup fails fast.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in REQUIRED_VARS if not (env.get(name) or '').strip()]
    if missing:
        raise ConfigError(f"Missing required LinkedIn environment variables: {', '.join(missing)}")

    try:
        port = int(env.get('PORT') or DEFAULT_PORT)
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got {env.get('PORT')!r}")

    try:
        timeout = float(env.get('LINKEDIN_TIMEOUT') or DEFAULT_TIMEOUT)
    except ValueError:
        raise ConfigError(f"LINKEDIN_TIMEOUT must be a number, got {env.get('LINKEDIN_TIMEOUT')!r}")

    secret_key = env.get('SECRET_KEY')
    if not secret_key:
        # Sessions (and the OAuth state they carry) will not survive a restart
        logging.warning('[CONFIG] SECRET_KEY not set; using a random key for this process')
        secret_key = secrets.token_hex(32)

    template = env.get('CERTIFICATE_TEMPLATE')

    return Settings(
        linkedin_client_id=env['LINKEDIN_CLIENT_ID'].strip(),
        linkedin_client_secret=env['LINKEDIN_CLIENT_SECRET'].strip(),
        linkedin_redirect_uri=env['LINKEDIN_REDIRECT_URI'].strip(),
        secret_key=secret_key,
        port=port,
        certificates_dir=Path(env.get('CERTIFICATES_DIR') or DEFAULT_CERTIFICATES_DIR),
        certificate_template=Path(template) if template else None,
        cors_origins=_split_origins(env.get('CORS_ORIGINS') or '*'),
        linkedin_timeout=timeout,
        quiz_title=env.get('QUIZ_TITLE') or DEFAULT_QUIZ_TITLE,
    )
