"""Append-only diagnostic message log of an analysis run."""

import logging
from typing import Iterator, List

logger = logging.getLogger(__name__)


class MessageLog:
    """
    Ordered, indented diagnostic messages.

    Every message is kept for the output document and mirrored to the
    module logger at DEBUG level.
    """

    INDENT = "  "

    def __init__(self):
        self._messages: List[str] = []

    def post(self, level: int, message: str) -> None:
        """Append ``message`` indented by ``level`` steps."""
        line = f"{self.INDENT * level}{message}"
        self._messages.append(line)
        logger.debug(line)

    @property
    def messages(self) -> List[str]:
        """Copy of the posted messages."""
        return list(self._messages)

    @property
    def errors(self) -> List[str]:
        """Posted messages reporting an error."""
        return [m.strip() for m in self._messages if m.strip().startswith("Error:")]

    def contains(self, text: str) -> bool:
        return any(text in m for m in self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)
