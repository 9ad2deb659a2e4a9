"""
Resolución de rutas de configuración y estado.

- config_path(): archivo declarativo (ctplane.yaml).
- state_path(): archivo de estado JSON (.ctplane/state.json).
- project_base(): directorio base del proyecto.

El core NO escribe en disco aquí; solo expone estas rutas. Quién escribe
(StateStore) usa state_path().
"""

import os
from pathlib import Path
from typing import Optional


DEFAULT_CONFIG_FILE = "ctplane.yaml"
STATE_DIR = ".ctplane"
STATE_FILE = "state.json"


def project_base() -> Path:
    """
    Directorio base del proyecto.
    Resolución: CTPLANE_PROJECT_ROOT → primer directorio (cwd o padres) con .ctplane/ o ctplane.yaml → cwd.
    """
    explicit = os.environ.get("CTPLANE_PROJECT_ROOT", "").strip()
    if explicit:
        return Path(explicit).expanduser().resolve()

    cwd = Path.cwd()
    for d in [cwd, *cwd.parents]:
        if (d / STATE_DIR).exists() or (d / DEFAULT_CONFIG_FILE).exists():
            return d.resolve()
    return cwd.resolve()


def config_path(explicit: Optional[Path] = None) -> Path:
    """Archivo declarativo: argumento explícito → CTPLANE_CONFIG → <proyecto>/ctplane.yaml"""
    if explicit:
        return Path(explicit).expanduser()
    env = os.environ.get("CTPLANE_CONFIG", "").strip()
    if env:
        return Path(env).expanduser()
    return project_base() / DEFAULT_CONFIG_FILE


def state_path(explicit: Optional[Path] = None) -> Path:
    """Archivo de estado: argumento explícito → CTPLANE_STATE → <proyecto>/.ctplane/state.json"""
    if explicit:
        return Path(explicit).expanduser()
    env = os.environ.get("CTPLANE_STATE", "").strip()
    if env:
        return Path(env).expanduser()
    return project_base() / STATE_DIR / STATE_FILE
