from __future__ import annotations
import os, logging
from logging.config import dictConfig
from logging import Filter

DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class HealthProbeFilter(Filter):
    """
    Drop uvicorn access-log lines for /health, /readyz and /metrics.

    Orchestrators poll these every few seconds and drown out the todo traffic.
    """
    PROBE_PATHS = ("/health", "/readyz", "/metrics")

    def filter(self, record):
        if record.name != "uvicorn.access":
            return True
        args = record.args
        if isinstance(args, tuple) and len(args) >= 3:
            path = str(args[2]).split("?", 1)[0]
            return path not in self.PROBE_PATHS
        return True

_STDOUT_ONLY = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "std": {"format": "%(asctime)s %(levelname)s %(name)s %(message)s"}
    },
    "handlers": {
        "stdout": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
            "formatter": "std",
            "level": DEFAULT_LEVEL,
            "filters": ["health_probe_filter"],
        }
    },
    "filters": {
        "health_probe_filter": {
            "()": "tasktrack.logging_setup.HealthProbeFilter",
        }
    },
    "loggers": {
        "uvicorn.access": {"handlers": ["stdout"], "level": DEFAULT_LEVEL, "propagate": False},
    },
    "root": {"level": DEFAULT_LEVEL, "handlers": ["stdout"]},
}

def setup_logging(config_path_env: str = "TASKTRACK_LOGCFG"):
    """
    Call this as the FIRST thing in your entrypoint.
    - If TASKTRACK_LOGCFG points to a YAML/JSON dictConfig file, we load it.
    - Otherwise we use a stdout-only config.
    """
    cfg_path = os.getenv(config_path_env, "").strip()
    if cfg_path and os.path.exists(cfg_path):
        import json, io
        with open(cfg_path, "r", encoding="utf-8") as fh:
            text = fh.read()
        try:
            # Try JSON first
            dictConfig(json.loads(text))
        except json.JSONDecodeError:
            # Fall back to YAML
            import yaml
            dictConfig(yaml.safe_load(io.StringIO(text)))
        return

    dictConfig(_STDOUT_ONLY)
    logging.getLogger(__name__).debug("Logging configured (level=%s)", DEFAULT_LEVEL)
