"""Deployment configuration persistence for a workspace."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from npl_deploy.config import get_paths

from .models import DeploymentConfig

log = logging.getLogger(__name__)


class DeploymentConfigManager:
    """Reads and writes npl-deploy.json at the root of a workspace."""

    def config_path(self, workspace: Path) -> Path:
        return get_paths(workspace).config_file

    def load(self, workspace: Path) -> Optional[DeploymentConfig]:
        """Load the workspace deployment config.

        Returns:
            The parsed config, or None when the file is absent or invalid.
        """
        config_file = self.config_path(workspace)
        if not config_file.exists():
            return None

        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            return DeploymentConfig.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            log.error(f"Failed to load deployment configuration: {e}")
            return None

    def save(self, workspace: Path, config: DeploymentConfig) -> Path:
        config_file = self.config_path(workspace)
        try:
            config_file.write_text(
                json.dumps(config.to_json_dict(), indent=2) + "\n", encoding="utf-8"
            )
        except OSError as e:
            log.error(f"Failed to save deployment configuration: {e}")
            raise

        log.debug(f"Deployment configuration written to {config_file}")
        return config_file
