"""Service registry: select backing services by name or instance.

The provider looks services up here when its configuration names them
by string. Factories are zero-argument callables, so the host
application decides how a service is built (base URL, shared client...).
"""

from collections.abc import Callable
from typing import Any, TypeAlias

from roost.errors import ConfigurationError

ServiceFactory: TypeAlias = Callable[[], Any]


class ServiceRegistry:
    """Name -> factory table for session and account services.

    Usage::

        services = ServiceRegistry()
        services.register("SessionService", lambda: HttpSessionService(API))
        session_service = services.resolve("SessionService", SessionService)
    """

    __slots__ = ("_factories",)

    def __init__(self) -> None:
        self._factories: dict[str, ServiceFactory] = {}

    def register(self, name: str, factory: ServiceFactory) -> None:
        if not isinstance(name, str) or not name:
            msg = f"Service name must be a non-empty string, got {name!r}."
            raise ConfigurationError(msg)
        if not callable(factory):
            msg = f"Service factory for {name!r} must be callable."
            raise ConfigurationError(msg)
        self._factories[name] = factory

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def resolve(self, service: Any, protocol: type, *, role: str) -> Any:
        """Return a service instance for a name or an instance.

        Raises ``ConfigurationError`` if the name is unknown, or if the
        result does not implement *protocol*.
        """
        if service is None:
            msg = f"SessionProvider: please configure a {role}"
            raise ConfigurationError(msg)

        if isinstance(service, str):
            factory = self._factories.get(service)
            if factory is None:
                msg = (
                    f"SessionProvider: please configure a {role} "
                    f"(no service registered as {service!r})"
                )
                raise ConfigurationError(msg)
            service = factory()

        if not isinstance(service, protocol):
            msg = f"SessionProvider: {type(service).__name__} does not implement {protocol.__name__}"
            raise ConfigurationError(msg)
        return service
