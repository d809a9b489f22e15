"""Cached singleton factories for services.

Usage:
    @service_factory
    def get_pricing_calculator() -> PricingCalculator:
        return PricingCalculator()

Calling a decorated factory with the same arguments returns the same
instance; different arguments get their own instance.
"""

import functools
import sys
import threading
from typing import Any, Callable, TypeVar, ParamSpec

P = ParamSpec("P")
T = TypeVar("T")


def service_factory(func: Callable[P, T]) -> Callable[P, T]:
    """Decorator that converts a factory function into a cached singleton factory.

    Args:
        func: Factory function that creates service instances

    Returns:
        Wrapped function that returns cached instances, keyed by arguments
    """
    cache: dict[tuple, Any] = {}
    lock = threading.Lock()

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        key = (args, tuple(sorted(kwargs.items())))

        if key not in cache:
            with lock:
                # Double-check after acquiring lock
                if key not in cache:
                    cache[key] = func(*args, **kwargs)

        return cache[key]

    wrapper.clear_cache = lambda: cache.clear()  # type: ignore
    wrapper.cache_info = lambda: {"size": len(cache), "keys": list(cache.keys())}  # type: ignore

    return wrapper


def clear_all_service_caches() -> None:
    """Clear every service singleton cache (used by tests).

    Only factories in modules already imported are reached.
    """
    services_module = __name__.rsplit(".", 1)[0]
    for module_name in list(sys.modules.keys()):
        if module_name.startswith(services_module):
            module = sys.modules[module_name]
            for attr_name in dir(module):
                attr = getattr(module, attr_name, None)
                if callable(attr) and hasattr(attr, "clear_cache"):
                    attr.clear_cache()
