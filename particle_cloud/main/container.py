"""
Dependency container injection module - Main Layer

Composition root wiring the settings into the Particle cloud gateway and
the use cases built on it.
"""

from dependency_injector import containers, providers

from particle_cloud.application.use_cases.device_use_cases import (
    ListDevicesUseCase,
)
from particle_cloud.infrastructure.gateways.particle_cloud_gateway import (
    ParticleCloudGateway,
)
from particle_cloud.shared import get_logger

from .config import AppSettings

logger = get_logger(__name__)


class AppContainer(containers.DeclarativeContainer):
    """Composition Root using dependency-injector."""

    wiring_config = containers.WiringConfiguration(packages=["..application"])

    # Settings
    config = providers.Configuration()

    # Gateways
    particle_cloud_gateway = providers.Singleton(
        ParticleCloudGateway,
        api_url=config.particle.api_url,
        access_token=config.particle.access_token,
        timeout=config.particle.timeout,
    )

    # Application (use cases)
    list_devices_use_case = providers.Factory(
        ListDevicesUseCase,
        particle_cloud_gateway=particle_cloud_gateway,
    )


# -------------------------
# Global Container Instance
# -------------------------
_app_container: AppContainer | None = None


def init_container(settings: AppSettings) -> AppContainer:
    """Initialize global container with application settings."""

    global _app_container

    container = AppContainer()
    container.config.from_pydantic(settings)
    _app_container = container

    if not settings.particle.access_token:
        logger.warning("container.particle.missing_access_token")
    logger.info("container.initialized", api_url=settings.particle.api_url)
    return container


def get_container() -> AppContainer:
    """Get the initialized global container."""

    if _app_container is None:
        raise RuntimeError("Container has not been initialized yet")

    return _app_container
