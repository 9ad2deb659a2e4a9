"""
Project: modelos del archivo declarativo, validación, planificación y reconciliación.
"""

from ctplane.core.project.models import ResourceConfig, RootConfig
from ctplane.core.project.validator import validate_address, validate_desired_config
from ctplane.core.project.planner import ChangeAction, ResourceChange, plan_changes, plan_from_diffs

__all__ = [
    "ResourceConfig",
    "RootConfig",
    "validate_address",
    "validate_desired_config",
    "ChangeAction",
    "ResourceChange",
    "plan_changes",
    "plan_from_diffs",
]
