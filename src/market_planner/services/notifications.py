"""Operator-facing notices (info, warnings, errors)."""

import logging
from typing import Callable

from market_planner.schemas import Notice

logger = logging.getLogger(__name__)

_LOG_LEVELS = {"info": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


class NotificationCenter:
    """Collects notices and forwards each one to optional subscribers."""

    def __init__(self, limit: int = 50) -> None:
        self.limit = limit
        self._notices: list[Notice] = []
        self._subscribers: list[Callable[[Notice], None]] = []

    @property
    def notices(self) -> list[Notice]:
        return list(self._notices)

    @property
    def latest(self) -> Notice | None:
        return self._notices[-1] if self._notices else None

    def subscribe(self, callback: Callable[[Notice], None]) -> None:
        self._subscribers.append(callback)

    def post(self, level: str, message: str) -> Notice:
        notice = Notice(level=level, message=message)
        self._notices = (self._notices + [notice])[-self.limit :]
        logger.log(_LOG_LEVELS[notice.level], f"Notice: {message}")
        for callback in list(self._subscribers):
            callback(notice)
        return notice

    def info(self, message: str) -> Notice:
        return self.post("info", message)

    def warning(self, message: str) -> Notice:
        return self.post("warning", message)

    def error(self, message: str) -> Notice:
        return self.post("error", message)

    def clear(self) -> None:
        self._notices = []
