"""
Dependency lookup for API routes.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..service_container import ServiceContainer


# Set during app startup
_container_instance: Optional["ServiceContainer"] = None


def set_service_container(container: Optional["ServiceContainer"]) -> None:
    """Set (or clear) the process-wide service container."""
    global _container_instance
    _container_instance = container


def get_service_container() -> Optional["ServiceContainer"]:
    """Return the service container, or None before startup."""
    return _container_instance
