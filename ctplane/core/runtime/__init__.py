"""
Runtime: resolución de rutas, estado persistido y reintentos.

El estado real vive en .ctplane/state.json (o CTPLANE_STATE).
"""

from ctplane.core.runtime.resolver import config_path, state_path, project_base

__all__ = ["config_path", "state_path", "project_base"]
