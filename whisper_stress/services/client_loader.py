"""Resolve the configured transcription client factory."""

from __future__ import annotations

import functools
import importlib
from typing import TYPE_CHECKING, Any

from whisper_stress.core.errors import ClientFactoryError
from whisper_stress.utils.logger import get_logger

if TYPE_CHECKING:
    from whisper_stress.services.protocols import ClientFactoryProtocol

logger = get_logger(__name__)


def resolve_import_path(import_path: str) -> Any:
    """Import ``package.module:attribute`` and return the attribute."""
    module_name, sep, attribute_path = import_path.partition(":")
    if not sep or not module_name or not attribute_path:
        msg = f"Invalid client factory '{import_path}', expected 'package.module:attribute'"
        raise ClientFactoryError(msg)

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import client module '{module_name}': {exc}"
        raise ClientFactoryError(msg) from exc

    for attribute in attribute_path.split("."):
        try:
            target = getattr(target, attribute)
        except AttributeError as exc:
            msg = f"Module '{module_name}' has no attribute '{attribute_path}'"
            raise ClientFactoryError(msg) from exc
    return target


def load_client_factory(
    import_path: str | None,
    client_options: dict[str, Any] | None = None,
) -> ClientFactoryProtocol:
    """Build a zero-argument factory that creates a fresh client per session.

    ``client_options`` are bound as keyword arguments, so every session gets
    an identically configured, unshared client instance.
    """
    if not import_path:
        msg = (
            "No transcription client configured. Set WHISPER_STRESS_CLIENT_FACTORY "
            "or pass --client-factory (e.g. 'my_client.module:WhisperLiveClient')."
        )
        raise ClientFactoryError(msg)

    target = resolve_import_path(import_path)
    if not callable(target):
        msg = f"Client factory '{import_path}' is not callable"
        raise ClientFactoryError(msg)

    logger.debug("client_factory_loaded", factory=import_path, options=client_options or {})
    return functools.partial(target, **(client_options or {}))
