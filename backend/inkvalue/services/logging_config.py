"""Log output for InkValue Studio: one JSON object per line, or plain text for local runs."""
import json
import logging
import sys
from datetime import datetime, timezone

# Context the studio attaches through `extra=`
CONTEXT_FIELDS = ("proposal_id", "request_id", "status_code", "duration_ms")

QUIET_LOGGERS = ("uvicorn.access", "httpx", "LiteLLM")


class JSONFormatter(logging.Formatter):
    def format(self, record):
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = True):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        JSONFormatter() if json_output
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # uvicorn.access duplicates the request line below
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
