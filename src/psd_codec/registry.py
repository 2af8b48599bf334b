"""
Registry pattern utility for creating type registries.

This module provides the ``new_registry`` function which creates a registry
dictionary and a decorator for registering types/handlers. It drives the
tagged block dispatch in :py:mod:`psd_codec.psd.tagged_blocks` and the path
record dispatch in :py:mod:`psd_codec.psd.vector`.

Usage example::

    from psd_codec.registry import new_registry

    TYPES, register = new_registry(attribute='key')

    @register(b'luni')
    class UnicodeLayerName:
        pass

    handler = TYPES[b'luni']
"""

from typing import Any, Callable, Tuple, TypeVar, Union

T = TypeVar("T")


def new_registry(attribute: Union[str, None] = None) -> Tuple[dict, Callable]:
    """
    Returns an empty dict and a @register decorator.

    :param attribute: Optional attribute name to set on registered objects.
                     The key will be stored as this attribute on the object.
    :return: Tuple of (registry_dict, register_decorator)
    """
    registry = {}

    def register(key: Any) -> Callable[[Callable[..., T]], Callable[..., T]]:
        def decorator(func: Callable[..., T]) -> Callable[..., T]:
            registry[key] = func
            if attribute:
                setattr(func, attribute, key)
            return func

        return decorator

    return registry, register
