"""
Loader y parser del archivo declarativo
Carga YAML y lo convierte a modelos Pydantic
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from ctplane.core.errors import ConfigError
from ctplane.core.project.models import ResourceConfig, RootConfig


logger = logging.getLogger(__name__)


class DeclarativeLoader:
    """Carga y gestiona el estado deseado"""

    def __init__(self, config_file: Path):
        self.config_file = config_file
        self._root: Optional[RootConfig] = None
        self._resources: Dict[str, ResourceConfig] = {}

    def load(self) -> RootConfig:
        """
        Carga el archivo declarativo.

        Raises:
            ConfigError: archivo inexistente, YAML inválido, estructura inválida o direcciones duplicadas
        """
        if not self.config_file.exists():
            raise ConfigError(f"Archivo declarativo no encontrado: {self.config_file}")

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"YAML inválido en {self.config_file}: {e}") from e

        try:
            root = RootConfig(**data)
        except PydanticValidationError as e:
            raise ConfigError(f"Estructura inválida en {self.config_file}: {e}") from e
        except TypeError as e:
            raise ConfigError(f"Estructura inválida en {self.config_file}: se esperaba un mapa") from e

        resources: Dict[str, ResourceConfig] = {}
        for rc in root.resources:
            if rc.address in resources:
                raise ConfigError(f"Recurso duplicado: {rc.address}")
            resources[rc.address] = rc

        self._root = root
        self._resources = resources
        logger.debug("Cargados %d recursos desde %s", len(resources), self.config_file)
        return root

    def get_resource(self, address: str) -> Optional[ResourceConfig]:
        """Obtiene la configuración de un recurso por dirección"""
        return self._resources.get(address)

    def resources(self) -> List[ResourceConfig]:
        return list(self._resources.values())

    def addresses(self) -> List[str]:
        return list(self._resources.keys())
