"""Configuration for term-todo.

Priority: real environment variable > project .env file > default.
Command-line options are applied on top by cli.py.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from storage import PLAIN_FILE, TASKS_FILE

ENV_FILE_NAME = '.env'

KNOWN_KEYS = {
    'TODO_FILE', 'TODO_PLAIN_FILE', 'TODO_ALT_SCREEN', 'TODO_WRAP_NAVIGATION',
    'TODO_WARN_EMPTY_COMMIT', 'TODO_LOG_LEVEL', 'TODO_LOG_FILE',
    'TODO_COLOR_PRIMARY', 'TODO_COLOR_DONE', 'TODO_COLOR_SELECTED', 'TODO_COLOR_INSERT',
}


def _truthy_env(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def read_env_file(path: Path) -> Dict[str, str]:
    """Parse KEY=VALUE lines of a .env file, keeping only known keys."""
    values: Dict[str, str] = {}
    if not path.exists():
        return values
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if k in KNOWN_KEYS:
            values[k] = v
    return values


@dataclass
class Config:
    """Runtime settings for the editor and the plain-file commands."""

    # Storage
    tasks_file: Path = TASKS_FILE
    plain_file: Path = PLAIN_FILE

    # Interaction policy
    wrap_navigation: bool = False
    warn_empty_commit: bool = False

    # Presentation
    alt_screen: bool = True
    colors: Dict[str, str] = field(default_factory=dict)

    # Logging
    log_level: str = 'WARNING'
    log_file: Optional[str] = None


def load_config(environ: Optional[Mapping[str, str]] = None, env_file: Optional[Path] = None) -> Config:
    env = dict(read_env_file(env_file if env_file is not None else Path.cwd() / ENV_FILE_NAME))
    env.update({k: v for k, v in (os.environ if environ is None else environ).items() if k in KNOWN_KEYS})

    cfg = Config()
    if env.get('TODO_FILE'):
        cfg.tasks_file = Path(env['TODO_FILE']).expanduser()
    if env.get('TODO_PLAIN_FILE'):
        cfg.plain_file = Path(env['TODO_PLAIN_FILE']).expanduser()
    cfg.alt_screen = _truthy_env(env.get('TODO_ALT_SCREEN'), True)
    cfg.wrap_navigation = _truthy_env(env.get('TODO_WRAP_NAVIGATION'), False)
    cfg.warn_empty_commit = _truthy_env(env.get('TODO_WARN_EMPTY_COMMIT'), False)
    cfg.log_level = env.get('TODO_LOG_LEVEL') or cfg.log_level
    cfg.log_file = env.get('TODO_LOG_FILE') or None
    for key in ('PRIMARY', 'DONE', 'SELECTED', 'INSERT'):
        value = env.get(f'TODO_COLOR_{key}')
        if value:
            cfg.colors[key.lower()] = value
    return cfg
