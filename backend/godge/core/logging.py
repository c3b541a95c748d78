import logging, json, sys

# submission context attached through `extra=`; emitted only when present
CONTEXT_FIELDS = ("user", "task", "language", "container")


class JsonFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
            "thread": record.threadName,
            "time": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(level: str = "INFO"):
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.setLevel(logging.getLevelName(level.upper()))
    root.handlers = [h]
    # the docker SDK logs every HTTP call to the daemon at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
