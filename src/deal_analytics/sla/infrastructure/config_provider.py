"""
SLA Configuration Provider
===========================

Loads phase definitions, thresholds and the first-communication policy
from YAML.

Example ``sla_config.yaml``::

    phases:
      follow_up:
        fragment: "Follow up in 24 Hours"
      price_sharing:
        stage_ids:
          "1": ["C1:UC_NX31U2"]
          "3": ["C3:UC_8KD1"]
    thresholds_hours:
      first_communication: 1
    initial_response_policy: exclude
"""

import threading
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from deal_analytics.core import ConfigurationException
from deal_analytics.shared.infrastructure.logging import get_logger
from deal_analytics.sla.application.services import ISLAConfigProvider
from deal_analytics.sla.domain import SLAConfig

logger = get_logger(__name__)


class YAMLConfigProvider(ISLAConfigProvider):
    """
    SLA configuration provider backed by a YAML file.

    A missing file yields the default configuration. ``reload`` swaps the
    configuration atomically and keeps the previous one if the new file is
    invalid.
    """

    def __init__(self, config_path: Union[str, Path]):
        self._path = Path(config_path)
        self._lock = threading.Lock()
        self._config: SLAConfig = self._load_from_file()

    @property
    def path(self) -> Path:
        return self._path

    def _load_from_file(self) -> SLAConfig:
        """Load and validate the YAML file."""
        if not self._path.exists():
            logger.warning(f"SLA config file not found: {self._path}, using defaults")
            return SLAConfig()

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationException(f"invalid YAML: {e}", source=str(self._path)) from e

        if not isinstance(data, dict):
            raise ConfigurationException("top level must be a mapping", source=str(self._path))

        try:
            return SLAConfig(**data)
        except ValidationError as e:
            raise ConfigurationException(
                "invalid SLA configuration",
                source=str(self._path),
                details={"errors": e.errors(include_url=False)}
            ) from e

    def get_config(self) -> SLAConfig:
        """Get current SLA configuration."""
        with self._lock:
            return self._config

    def reload(self) -> bool:
        """Reload configuration from file; returns False if the file is invalid."""
        try:
            new_config = self._load_from_file()
        except ConfigurationException as e:
            logger.error(f"Failed to reload SLA config: {e}")
            return False

        with self._lock:
            self._config = new_config
        logger.info("SLA configuration reloaded successfully", extra={"path": str(self._path)})
        return True


_default_provider: Optional[YAMLConfigProvider] = None


def get_config_provider() -> YAMLConfigProvider:
    """Process-wide provider for the configured SLA YAML path."""
    global _default_provider
    if _default_provider is None:
        from deal_analytics.config import settings
        _default_provider = YAMLConfigProvider(settings.sla_config_path)
    return _default_provider
