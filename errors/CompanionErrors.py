# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: CompanionErrors
# -----------------------------------------------------------------------------


class CompanionError(Exception):
    """Base class for errors raised by the observation pipeline."""


class ProviderError(CompanionError):
    """
    Network, rate-limit, auth or timeout failure at the embedding or
    generation boundary. Recoverable: surfaced to the user, never allowed
    to corrupt persisted state.
    """


class StorageError(CompanionError):
    """The persisted index document could not be read, validated or written."""


class RetrievalError(CompanionError):
    """The query could not be embedded or ranked, so no context was produced."""
