"""
Provider Command Base Class

Base class for commands that talk to the control-plane API.
Provides config loading and automatic service initialization.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from .base_command import BaseCommand
from cpln_provider.client import Client
from cpln_provider.config import ProviderConfig, load_provider_config
from cpln_provider.services import PlanService, StateService
from cpln_provider.utils import load_yaml_file


class ProviderCommand(BaseCommand):
    """
    Base class for config-driven commands.

    Provides:
    - Config document and provider settings loading
    - Lazily built client, state and plan services
    """

    def __init__(
        self,
        config_path: Path,
        state_path: Path,
        verbose: bool = False,
        json_output: bool = False,
    ):
        super().__init__(verbose=verbose, json_output=json_output)
        self.config_path = Path(config_path)
        self.state_path = Path(state_path)

        self._config_doc: Optional[Dict[str, Any]] = None
        self._provider_config: Optional[ProviderConfig] = None
        self.state_service = StateService(self.state_path)
        self.plan_service: Optional[PlanService] = None

    def load_config_doc(self, required: bool = True) -> Dict[str, Any]:
        """
        Load the YAML config document (cached).

        Args:
            required: When False, a missing file yields an empty document
        """
        if self._config_doc is None:
            if not required and not self.config_path.exists():
                self._config_doc = {}
            else:
                self._config_doc = load_yaml_file(self.config_path)
        return self._config_doc

    def provider_config(self) -> ProviderConfig:
        if self._provider_config is None:
            doc = self.load_config_doc(required=False)
            self._provider_config = load_provider_config(doc.get("provider"))
        return self._provider_config

    def ensure_plan_service(self, command_name: str) -> PlanService:
        """
        Build logger, client and plan service for an API-backed command.

        Args:
            command_name: Used for the log file name
        """
        if self.plan_service is None:
            config = self.provider_config()
            logger = self.init_logger(
                config.org,
                command_name,
                config.log_dir,
                details={
                    "Endpoint": config.endpoint,
                    "Config": str(self.config_path),
                    "State": str(self.state_path),
                },
            )
            client = Client(config, logger=logger)
            self.plan_service = PlanService(client, self.state_service, logger=logger)
        return self.plan_service
