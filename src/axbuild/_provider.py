"""Provider resolution.

A provider is an opaque handle to the compute backend used while compiling.
The pipeline never connects to it; it only selects one per build.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from ._errors import ResolutionError

logger = logging.getLogger(__name__)

PROVIDER_ENV_VAR = "PROVIDER_URI"


@dataclass(slots=True, frozen=True)
class Provider:
    """Handle to a compute/execution backend, identified by its URI."""

    uri: str

    def __str__(self) -> str:
        return self.uri


def resolve_provider(identifier: str | None = None) -> Provider:
    """Resolve a provider from an explicit identifier or the environment.

    Args:
        identifier: Provider URI given by the caller. Takes precedence over
            the ``PROVIDER_URI`` environment variable.

    Returns:
        The selected Provider

    Raises:
        ResolutionError: If no provider is given and ``PROVIDER_URI`` is unset or blank

    """
    uri = identifier if identifier is not None else os.environ.get(PROVIDER_ENV_VAR)
    if uri is None or not uri.strip():
        msg = f"No provider provided. Pass --provider or set the {PROVIDER_ENV_VAR} environment variable."
        raise ResolutionError(msg)

    logger.debug(f"Using provider: {uri.strip()}")
    return Provider(uri=uri.strip())
