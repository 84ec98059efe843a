"""
HTTP client registry

Client classes register themselves with ``@http_client(<service>)``; the
application enables them once at startup, binding each class to the
endpoint configured for its service.
"""

from importlib import import_module
from typing import Dict, List, Optional, Type, TypeVar

import httpx

from vacation.clients.base import HttpClient
from vacation.config import Settings
from vacation.exceptions import ConfigurationError
from vacation.utils.logging import get_logger

logger = get_logger(__name__)

C = TypeVar("C", bound=HttpClient)

# Modules declaring clients; imported on enable so their decorators run
CLIENT_MODULES = (
    "vacation.clients.hr",
    "vacation.clients.payroll",
)

_REGISTERED: Dict[str, Type[HttpClient]] = {}


def http_client(service_name: str):
    """Class decorator registering a declarative client for ``service_name``."""
    if not service_name or not service_name.strip():
        raise ValueError("HTTP client service name must be a non-empty string")

    def decorator(cls: Type[C]) -> Type[C]:
        if not issubclass(cls, HttpClient):
            raise TypeError(f"{cls.__name__} must subclass HttpClient")
        existing = _REGISTERED.get(service_name)
        if existing is not None and existing.__qualname__ != cls.__qualname__:
            raise ValueError(f"HTTP client already registered for service: {service_name}")
        cls.service_name = service_name
        _REGISTERED[service_name] = cls
        return cls

    return decorator


def registered_clients() -> Dict[str, Type[HttpClient]]:
    return dict(_REGISTERED)


class ClientRegistry:
    """
    Live client instances for the running application.

    Example:
        >>> registry = ClientRegistry.enable(get_settings())
        >>> hr = registry.get(HrClient)
        >>> hr.get_employee(7)
    """

    def __init__(self):
        self._clients: Dict[Type[HttpClient], HttpClient] = {}

    @classmethod
    def enable(
        cls,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "ClientRegistry":
        """
        Instantiate every registered client that has a configured endpoint.

        Args:
            settings: application settings, endpoints come from ``service_endpoints``
            transport: optional httpx transport shared by all clients (tests)

        Returns:
            Registry, empty when ``http_clients_enabled`` is off
        """
        registry = cls()
        if not settings.http_clients_enabled:
            logger.info("HTTP clients disabled, running without inter-service calls")
            return registry

        for module in CLIENT_MODULES:
            import_module(module)

        endpoints = settings.service_endpoints
        for name, client_cls in registered_clients().items():
            endpoint = endpoints.get(name)
            if endpoint is None:
                logger.warning("No endpoint configured for HTTP client %r, skipping", name)
                continue
            registry.register(
                client_cls(
                    base_url=endpoint.url,
                    timeout=endpoint.timeout,
                    max_retries=endpoint.max_retries,
                    transport=transport,
                )
            )
            logger.info("HTTP client %r enabled -> %s", name, endpoint.url)
        return registry

    def register(self, client: HttpClient) -> None:
        self._clients[type(client)] = client

    def find(self, client_cls: Type[C]) -> Optional[C]:
        """Client instance or None when the client is not enabled."""
        return self._clients.get(client_cls)  # type: ignore[return-value]

    def get(self, client_cls: Type[C]) -> C:
        client = self.find(client_cls)
        if client is None:
            raise ConfigurationError(
                client_cls.service_name or client_cls.__name__,
                "HTTP client is not enabled",
            )
        return client

    def names(self) -> List[str]:
        return sorted(client.service_name for client in self._clients.values())

    def __contains__(self, client_cls: Type[HttpClient]) -> bool:
        return client_cls in self._clients

    def __len__(self) -> int:
        return len(self._clients)

    def close(self) -> None:
        for client in self._clients.values():
            client.close()
        self._clients.clear()
