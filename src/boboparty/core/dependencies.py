import threading
from typing import TypeVar, Type, Dict, Any, Callable

T = TypeVar('T')


class DependencyContainer:
    """
    Per-app service registry

    Factories run on first lookup, under a lock, so concurrent requests share
    one gateway and one session. `override` swaps in a replacement and drops
    every factory-built instance, so dependents are rebuilt against it.
    """

    def __init__(self):
        self._instances: Dict[type, Any] = {}
        self._factories: Dict[type, Callable[[], Any]] = {}
        self._lock = threading.RLock()

    def register_singleton(self, service_class: Type[T], instance: T) -> None:
        """Register a ready-made instance"""
        with self._lock:
            self._instances[service_class] = instance

    def register_factory(self, service_class: Type[T], factory: Callable[[], T]) -> None:
        """Register a zero-argument builder, called at most once"""
        with self._lock:
            self._factories[service_class] = factory
            self._instances.pop(service_class, None)

    def override(self, service_class: Type[T], instance: T) -> None:
        """Replace a service, e.g. the Shopify gateway in tests"""
        with self._lock:
            self._instances = {
                cls: existing for cls, existing in self._instances.items()
                if cls not in self._factories
            }
            self._instances[service_class] = instance

    def get(self, service_class: Type[T]) -> T:
        with self._lock:
            if service_class in self._instances:
                return self._instances[service_class]

            factory = self._factories.get(service_class)
            if factory is None:
                raise ValueError(f"Service {service_class.__name__} not registered")

            # The factory may resolve its own dependencies; the lock is reentrant
            instance = factory()
            self._instances[service_class] = instance
            return instance

    def __contains__(self, service_class: type) -> bool:
        return service_class in self._instances or service_class in self._factories
