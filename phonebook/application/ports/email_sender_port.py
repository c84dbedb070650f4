from __future__ import annotations

from typing import Protocol


class EmailSenderPort(Protocol):
    def send(self, *, to_email: str, subject: str, text_body: str) -> None:
        ...
