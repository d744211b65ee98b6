"""
Base class for album loaders.
Defines the interface all loaders must implement.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Iterable, Union

from pydantic import ValidationError

from album_atlas.core.album import Album

logger = logging.getLogger(__name__)


class BaseAlbumLoader(ABC):
    """
    Abstract base class for album loaders.

    All loaders return a list of validated ``Album`` records. Records that
    fail validation are dropped with a warning; the rest of the collection
    stays usable.
    """

    @abstractmethod
    def load(self) -> list[Album]:
        """
        Load and return the album collection.

        Returns:
            List of validated Album records

        Raises:
            AlbumLoadError: If the source cannot be read or holds no valid record
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Unique name for this source.

        Returns:
            String identifier for the dataset
        """
        pass

    def validate(self, lines: Iterable[Union[str, bytes]], encoding: str = "utf-8") -> list[Album]:
        """
        Parse and validate raw JSON lines.

        Args:
            lines: One JSON document per line; blank lines are skipped
            encoding: Used to decode lines given as bytes; lines that fail to
                decode are dropped like malformed JSON

        Returns:
            Albums that passed validation, in input order. Later records win
            when two lines share a global id.
        """
        albums: dict[str, Album] = {}
        total = 0
        dropped = 0

        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            total += 1
            try:
                text = line.decode(encoding) if isinstance(line, bytes) else line
                album = Album.model_validate(json.loads(text))
            except UnicodeDecodeError as e:
                dropped += 1
                logger.warning(f"Line {line_number}: undecodable bytes ({e.reason})")
                continue
            except json.JSONDecodeError as e:
                dropped += 1
                logger.warning(f"Line {line_number}: invalid JSON ({e.msg})")
                continue
            except ValidationError as e:
                dropped += 1
                fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
                logger.warning(f"Line {line_number}: invalid album record ({fields})")
                continue
            albums[album.global_id] = album

        if dropped > 0:
            logger.warning(
                f"Dropped {dropped} invalid records "
                f"({dropped / total * 100:.1f}% of {total} total)"
            )

        logger.info(f"Validated albums: {len(albums)} records (from {total} lines)")

        return list(albums.values())


# Registry for available loaders
_LOADER_REGISTRY: dict[str, type[BaseAlbumLoader]] = {}


def register_loader(name: str):
    """
    Decorator to register a loader class.

    Usage:
        @register_loader("ndjson")
        class NdjsonAlbumLoader(BaseAlbumLoader):
            ...

    Raises:
        TypeError: If class doesn't inherit from BaseAlbumLoader
        ValueError: If name is already registered
    """
    def decorator(cls: type[BaseAlbumLoader]):
        if not issubclass(cls, BaseAlbumLoader):
            raise TypeError(f"{cls.__name__} must inherit from BaseAlbumLoader")
        if name in _LOADER_REGISTRY:
            raise ValueError(
                f"Loader '{name}' already registered by {_LOADER_REGISTRY[name].__name__}"
            )
        _LOADER_REGISTRY[name] = cls
        return cls
    return decorator


def get_loader(name: str, **kwargs) -> BaseAlbumLoader:
    """
    Get a loader instance by name.

    Args:
        name: Registered loader name
        **kwargs: Arguments passed to loader constructor

    Returns:
        Loader instance

    Raises:
        ValueError: If loader name not found
    """
    if name not in _LOADER_REGISTRY:
        available = list(_LOADER_REGISTRY.keys())
        raise ValueError(f"Unknown loader '{name}'. Available: {available}")

    return _LOADER_REGISTRY[name](**kwargs)


def list_loaders() -> list[str]:
    """Return list of registered loader names."""
    return list(_LOADER_REGISTRY.keys())
