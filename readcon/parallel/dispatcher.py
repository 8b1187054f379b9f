"""Selection of the backend that decodes frame ranges."""

from __future__ import annotations

import importlib
import logging
import os
from typing import Literal

from .backends.base import ParallelBackend
from .backends.serial import SerialBackend

logger = logging.getLogger(__name__)

BackendType = Literal["serial", "threads", "multiprocessing"]

# name -> (module under .backends, class name); imported on first use
_REGISTRY: dict[str, tuple[str, str]] = {
    "serial": ("serial", "SerialBackend"),
    "threads": ("threads", "ThreadBackend"),
    "multiprocessing": ("multiprocessing_backend", "MultiprocessingBackend"),
}

# Below this many frames a pool costs more than it saves
MIN_PARALLEL_FRAMES = 8

_default_backend: ParallelBackend | None = None


def available_backends() -> list[str]:
    """Names accepted by :func:`create_backend`."""
    return list(_REGISTRY)


def create_backend(name: BackendType, **kwargs) -> ParallelBackend:
    """
    Instantiate a backend by name.

    Args:
        name: One of :func:`available_backends`.
        **kwargs: Passed to the backend constructor, e.g. ``n_workers``.

    Raises:
        ValueError: If no backend has that name.
    """
    try:
        module_name, class_name = _REGISTRY[name]
    except KeyError:
        raise ValueError(
            f"Unknown backend: {name}. Available: {', '.join(_REGISTRY)}"
        ) from None

    module = importlib.import_module(f".backends.{module_name}", __package__)
    backend = getattr(module, class_name)(**kwargs)
    logger.debug("Created %r", backend)
    return backend


def get_backend(
    backend: BackendType | ParallelBackend | None = None,
    **kwargs,
) -> ParallelBackend:
    """
    Resolve the backend a decode call should run on.

    An instance is used as given, a name creates a fresh backend, and None
    falls back to the process-wide default (serial unless changed with
    :func:`set_default_backend`).

    Example:
        >>> get_backend("threads", n_workers=4)
        ThreadBackend(n_workers=4)
    """
    global _default_backend

    if isinstance(backend, ParallelBackend):
        return backend
    if backend is not None:
        return create_backend(backend, **kwargs)

    if _default_backend is None:
        _default_backend = SerialBackend()
    return _default_backend


def set_default_backend(
    backend: BackendType | ParallelBackend,
    **kwargs,
) -> ParallelBackend:
    """Make a backend the default for calls that do not name one."""
    global _default_backend

    _default_backend = get_backend(backend, **kwargs)
    logger.debug("Default backend is now %r", _default_backend)
    return _default_backend


def reset_default_backend() -> None:
    """Forget the default backend; the next lookup creates a serial one."""
    global _default_backend
    _default_backend = None


def detect_best_backend(n_frames: int | None = None) -> BackendType:
    """
    Suggest a backend for decoding a trajectory.

    Decoding is CPU-bound Python, so only a process pool gives a speedup.
    It is suggested when more than one CPU is available and the trajectory
    is not too short to amortize starting the workers.

    Args:
        n_frames: Number of frames to decode, if known.
    """
    if (os.cpu_count() or 1) < 2:
        return "serial"
    if n_frames is not None and n_frames < MIN_PARALLEL_FRAMES:
        return "serial"
    return "multiprocessing"
