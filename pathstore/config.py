"""Configuration for path stores and write operations.

Provides the per-call WriteOptions, the per-store StoreConfig and the
connect_store factory that validates keyword configuration.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from .base import Visibility
from .mimetype import guess_mimetype

MimetypeGuesser = Callable[[str, bytes], str]

_VISIBILITIES = {v.value for v in Visibility}


@dataclass(frozen=True)
class WriteOptions:
    """Options accepted by create_dir, write and update.

    Attributes:
        visibility: Visibility to apply to the file. None keeps the current
            value (or the store default for new files).
        timestamp: Explicit modification time in seconds since the epoch.
            None means "now".
    """

    visibility: str | None = None
    timestamp: int | None = None


@dataclass
class StoreConfig:
    """Configuration for a PathStore.

    Attributes:
        default_visibility: Visibility given to newly written files.
        clock: Returns the current time in seconds since the epoch.
        mimetype_guesser: Called once per write/update with the path and
            the new contents.
    """

    default_visibility: str = Visibility.PUBLIC.value
    clock: Callable[[], float] = time.time
    mimetype_guesser: MimetypeGuesser = field(default=guess_mimetype)


def connect_store(**kwargs) -> StoreConfig:
    """Configure a path store.

    Args:
        **kwargs: Any StoreConfig field.
            - default_visibility (str): "public" or "private".
            - clock (callable): Time source returning epoch seconds.
            - mimetype_guesser (callable): (path, contents) -> mimetype.

    Returns:
        StoreConfig for PathStore construction.

    Raises:
        ValueError: On unknown arguments or an unknown visibility.

    Examples:
        >>> connect_store(default_visibility="private").default_visibility
        'private'
    """
    default_visibility = kwargs.pop("default_visibility", Visibility.PUBLIC.value)
    clock = kwargs.pop("clock", time.time)
    mimetype_guesser = kwargs.pop("mimetype_guesser", guess_mimetype)

    if kwargs:
        raise ValueError(f"Unexpected arguments for path store: {list(kwargs.keys())}")

    if isinstance(default_visibility, Visibility):
        default_visibility = default_visibility.value
    if default_visibility not in _VISIBILITIES:
        raise ValueError(
            f"Unsupported visibility: {default_visibility}. Use 'public' or 'private'."
        )

    if not callable(clock) or not callable(mimetype_guesser):
        raise ValueError("clock and mimetype_guesser must be callable")

    return StoreConfig(
        default_visibility=default_visibility,
        clock=clock,
        mimetype_guesser=mimetype_guesser,
    )
