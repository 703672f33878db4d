"""
Centralized Path Configuration for Gatekeeper

All file paths derive from GatekeeperSettings so that deployments and tests
can relocate the permission documents with GATEKEEPER_DATA_DIR.

Usage:
    from gatekeeper.config_paths import get_config_paths

    paths = get_config_paths()
    groups_file = paths.group_permissions_file
"""

from pathlib import Path
from typing import Optional

from .config import GatekeeperSettings, get_settings


class PathConfig:
    """
    Centralized path configuration with environment variable support
    """

    def __init__(self, settings: Optional[GatekeeperSettings] = None):
        self.settings = settings or get_settings()
        self.data_dir = Path(self.settings.data_dir).expanduser().resolve()

        # Ensure base directory exists
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def save_dir(self) -> Path:
        """Directory holding both permission documents"""
        path = self.data_dir / self.settings.save_dir_name
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def group_permissions_file(self) -> Path:
        """Group permissions document"""
        return self.save_dir / self.settings.group_permissions_filename

    @property
    def player_permissions_file(self) -> Path:
        """Player permissions document"""
        return self.save_dir / self.settings.player_permissions_filename


def get_config_paths(settings: Optional[GatekeeperSettings] = None) -> PathConfig:
    """Build path configuration for the given (or global) settings"""
    return PathConfig(settings)
