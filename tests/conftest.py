"""
Shared pytest fixtures for Gatekeeper tests.

Provides:
- Settings pointing at a per-test data directory
- Store, override registry and gateway fixtures
- A loaded engine (default documents synthesized)
- Player registry and command dispatcher fixtures
"""

import logging
from pathlib import Path

import pytest

from gatekeeper.config import GatekeeperSettings, get_settings
from gatekeeper.permissions.engine import PermissionEngine, create_permission_system
from gatekeeper.permissions.overrides import OverrideRegistry
from gatekeeper.permissions.storage import PersistenceGateway
from gatekeeper.permissions.store import PermissionStore
from gatekeeper.players import PlayerRegistry

ADMIN_UID = 76561198000000001
PLAYER_UID = 76561198000000002


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset the get_settings singleton between tests"""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo configure_logging() handlers and levels after each test"""
    logger = logging.getLogger("gatekeeper")
    level, handlers = logger.level, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers


@pytest.fixture
def settings(tmp_path: Path) -> GatekeeperSettings:
    """Settings writing every document below tmp_path"""
    return GatekeeperSettings(data_dir=str(tmp_path / "data"), environment="testing")


# ============================================================================
# Component Fixtures
# ============================================================================

@pytest.fixture
def store() -> PermissionStore:
    return PermissionStore()


@pytest.fixture
def overrides() -> OverrideRegistry:
    return OverrideRegistry()


@pytest.fixture
def gateway(store: PermissionStore, settings: GatekeeperSettings) -> PersistenceGateway:
    return PersistenceGateway.from_settings(store, settings)


@pytest.fixture
def engine(settings: GatekeeperSettings) -> PermissionEngine:
    """
    Engine loaded from synthesized default documents.

    Groups: Default (help, location, pm), Moderator (kick, mute, unmute),
    Administrator (*). Players: the example moderator record.
    """
    return create_permission_system(settings)


@pytest.fixture
def empty_engine(settings: GatekeeperSettings) -> PermissionEngine:
    """Engine with nothing loaded and nothing on disk"""
    return create_permission_system(settings, load=False)


# ============================================================================
# Player / Command Fixtures
# ============================================================================

@pytest.fixture
def registry() -> PlayerRegistry:
    return PlayerRegistry()


@pytest.fixture
def admin(engine: PermissionEngine, registry: PlayerRegistry):
    """Online session whose record is in the Administrator group"""
    engine.create_player(ADMIN_UID, groups=["Administrator"])
    return registry.connect(ADMIN_UID, "Alice")


@pytest.fixture
def player(registry: PlayerRegistry):
    """Online session without a permission record"""
    return registry.connect(PLAYER_UID, "Bob")


@pytest.fixture
def dispatcher(engine: PermissionEngine, registry: PlayerRegistry):
    from gatekeeper.commands import default_dispatcher

    return default_dispatcher(engine, registry)


@pytest.fixture
def gatekeeper_caplog(caplog):
    """caplog capturing every gatekeeper logger at DEBUG"""
    caplog.set_level(logging.DEBUG, logger="gatekeeper")
    return caplog
