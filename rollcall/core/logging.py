"""Root logging setup. Call once from the app factory."""

import logging
import sys

_configured = False


def configure_logging(level_name: str = "INFO") -> None:
    global _configured
    if _configured:
        return

    level = getattr(logging, level_name.upper(), logging.INFO)
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]
    logging.captureWarnings(True)

    # Access logs are noisy; errors still propagate.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _configured = True
