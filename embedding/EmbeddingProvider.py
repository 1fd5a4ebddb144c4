# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: EmbeddingProvider
# -----------------------------------------------------------------------------

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Anything that turns a text into a fixed-length vector.
    Calls may suspend on network I/O and fail with ProviderError.
    """

    async def embed(self, text: str) -> List[float]:
        ...
