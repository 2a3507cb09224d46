import logging
from flask import g, has_request_context

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"
INFO = "info"

_LOG_LEVELS = {SUCCESS: logging.INFO, INFO: logging.INFO, ERROR: logging.WARNING}


class Notifier:
    """Fire-and-forget user-facing notification ("toast") channel."""

    def notify(self, severity: str, message: str) -> None:
        raise NotImplementedError

    def success(self, message: str) -> None:
        self.notify(SUCCESS, message)

    def error(self, message: str) -> None:
        self.notify(ERROR, message)

    def info(self, message: str) -> None:
        self.notify(INFO, message)


class RequestNotifier(Notifier):
    """Collects toasts on the current request; the JSON envelope carries them."""

    def notify(self, severity, message):
        logger.log(_LOG_LEVELS.get(severity, logging.INFO), "toast %s: %s", severity, message)
        if has_request_context():
            g.setdefault("notifications", []).append({"severity": severity, "message": message})


class RecordingNotifier(Notifier):
    """Keeps toasts in memory, for callers outside a request."""

    def __init__(self):
        self.messages = []

    def notify(self, severity, message):
        self.messages.append((severity, message))

    @property
    def last(self):
        return self.messages[-1] if self.messages else None
