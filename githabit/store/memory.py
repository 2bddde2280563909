"""Process-local handle store."""

from typing import Optional

from .base import HandleStore


class MemoryHandleStore(HandleStore):
    """Keeps the value in memory; nothing survives the process."""

    def __init__(self, initial: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self._value = initial
        self.write_count = 0

    async def _load(self) -> Optional[str]:
        return self._value

    async def _save(self, value: str) -> None:
        self._value = value
        self.write_count += 1
