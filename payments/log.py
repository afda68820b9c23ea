import json
import logging


class GatewayLogger:
    """Per-provider log sink: ``[PROVIDER] message | Context: {...}``."""

    def __init__(self, gateway_id: str):
        self.gateway_id = gateway_id
        self.logger = logging.getLogger(f"payments.gateways.{gateway_id}")

    def debug(self, message, context=None):
        self.log(logging.DEBUG, message, context)

    def info(self, message, context=None):
        self.log(logging.INFO, message, context)

    def warning(self, message, context=None):
        self.log(logging.WARNING, message, context)

    def error(self, message, context=None):
        self.log(logging.ERROR, message, context)

    def critical(self, message, context=None):
        self.log(logging.CRITICAL, message, context)

    def log(self, level, message, context=None):
        if not self.logger.isEnabledFor(level):
            return
        entry = f"[{self.gateway_id.upper()}] {message}"
        if context:
            entry += " | Context: " + json.dumps(context, default=str, sort_keys=True)
        self.logger.log(level, entry, extra={"context": context or {}})
