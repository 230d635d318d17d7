import logging
import json
import time
from flask import has_request_context, request

# Fields callers attach through `extra=` that are worth keeping in the JSON line
_CONTEXT_FIELDS = ("network", "artifact", "organization_id", "job_id")


class JsonRequestFormatter(logging.Formatter):
    def format(self, record):
        # health checks are noise
        if has_request_context() and request.path == "/healthz":
            return ""

        data = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }

        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                data[field] = value

        if has_request_context():
            data.update({
                "method": request.method,
                "path": request.path,
                "remote_addr": request.headers.get("X-Forwarded-For", request.remote_addr),
                "request_id": request.headers.get("X-Request-ID"),
            })

        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(data, ensure_ascii=False, default=str)


def setup_logging(app=None):
    level_name = (app.config.get("LOG_LEVEL") if app else None) or "INFO"
    level = getattr(logging, str(level_name).upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    # drop handlers left over from a previous factory call (reloader, tests)
    for h in list(root.handlers):
        root.removeHandler(h)

    h = logging.StreamHandler()
    h.setFormatter(JsonRequestFormatter())
    root.addHandler(h)

    if app:
        app.logger.handlers = [h]
        app.logger.setLevel(level)
