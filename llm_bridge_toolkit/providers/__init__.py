# llm_bridge_toolkit/llm_bridge_toolkit/providers/__init__.py
import os
import importlib
import logging
from typing import Any, Type
from ._base import BaseContentGenerator
from ..exceptions import ConfigurationError

_generator_registry: dict[str, Type[BaseContentGenerator]] = {}
_generators_discovered = False
module_logger = logging.getLogger(__name__)


def register_generator(name: str):
    """
    Decorator to register content generator classes.

    Args:
        name (str): The identifier for the generator (e.g., 'custom_llm').
    """
    def decorator(cls):
        if not issubclass(cls, BaseContentGenerator):
            raise TypeError(
                f"Class {cls.__name__} must inherit from BaseContentGenerator to be registered."
            )
        if name in _generator_registry:
            module_logger.warning(f"Generator '{name}' is already registered. Overwriting with {cls.__name__}.")
        _generator_registry[name] = cls
        module_logger.debug(f"Registered generator: '{name}' -> {cls.__name__}")
        return cls
    return decorator


def _discover_generators(generator_dir: str | None = None):
    """
    Imports every generator module in the package so their registration
    decorators run.
    """
    global _generators_discovered
    if _generators_discovered:
        return

    if generator_dir is None:
        generator_dir = os.path.dirname(__file__)

    module_logger.debug(f"Discovering generators in: {generator_dir}")
    for filename in sorted(os.listdir(generator_dir)):
        if filename.endswith('.py') and not filename.startswith('_'):
            module_path = f"{__name__}.{filename[:-3]}"
            try:
                importlib.import_module(module_path)
                module_logger.debug(f"Successfully imported generator module: {module_path}")
            except ImportError as e:
                module_logger.warning(f"Could not import generator module {module_path}. Error: {e}")

    _generators_discovered = True


def create_content_generator(generator_type: str, **kwargs: Any) -> BaseContentGenerator:
    """
    Creates an instance of the specified content generator.

    Args:
        generator_type (str): The registered name of the generator (e.g., 'custom_llm').
        **kwargs: Keyword arguments for the generator's constructor (e.g., config).

    Raises:
        ConfigurationError: If the type is not registered or construction fails.
    """
    _discover_generators()

    generator_class = _generator_registry.get(generator_type.lower())
    if not generator_class:
        available = list(_generator_registry.keys())
        raise ConfigurationError(
            f"Invalid generator type: '{generator_type}'. Available generators: {available}"
        )

    try:
        return generator_class(**kwargs)
    except ConfigurationError:
        raise
    except Exception as e:
        module_logger.error(f"Failed to instantiate generator '{generator_type}': {e}", exc_info=True)
        raise ConfigurationError(f"Could not create instance of generator '{generator_type}': {e}") from e


__all__ = ['BaseContentGenerator', 'register_generator', 'create_content_generator']
