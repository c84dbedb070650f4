from __future__ import annotations

from typing import Protocol


class AvatarProcessorPort(Protocol):
    def process(self, *, content: bytes, filename: str, user_id: str) -> str:
        ...
