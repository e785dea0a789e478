import logging


class PrivacyFilter(logging.Filter):
    """Redact credentials and user-written content from structured logs."""

    BLOCKED_KEYS = {"password", "token", "text", "reply"}

    def filter(self, record: logging.LogRecord) -> bool:
        for key in self.BLOCKED_KEYS:
            if hasattr(record, key):
                setattr(record, key, "[REDACTED]")
        return True


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    privacy = PrivacyFilter()
    # Records from child loggers skip the root logger's own filters, so attach to handlers.
    for handler in logging.getLogger().handlers:
        if not any(isinstance(existing, PrivacyFilter) for existing in handler.filters):
            handler.addFilter(privacy)
