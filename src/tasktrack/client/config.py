"""
Client connection configuration for tasktrack.

The client needs exactly one setting, the service base URL. It can be given
directly or derived from where the client runs: an Android emulator reaches
the host machine through 10.0.2.2, a physical device needs the host's LAN
address, and simulators or local runs use localhost.
"""

import os
from typing import Optional
from dataclasses import dataclass

DEFAULT_PORT = 5000

TARGET_ANDROID_EMULATOR = "android-emulator"
TARGET_DEVICE = "device"
TARGET_SIMULATOR = "simulator"
TARGET_LOCAL = "local"

_TARGET_HOSTS = {
    TARGET_ANDROID_EMULATOR: "10.0.2.2",
    TARGET_SIMULATOR: "localhost",
    TARGET_LOCAL: "localhost",
}


@dataclass
class ClientConfig:
    """Where the todo service lives."""

    api_url: Optional[str] = None
    target: str = TARGET_LOCAL
    lan_host: Optional[str] = None
    port: int = DEFAULT_PORT

    def __post_init__(self):
        if not self.api_url:
            self.api_url = f"http://{self._host()}:{self.port}"
        self.api_url = self.api_url.rstrip("/")

    def _host(self) -> str:
        if self.target == TARGET_DEVICE:
            if not self.lan_host:
                raise ValueError(
                    "TASKTRACK_LAN_HOST must be set when running on a physical device"
                )
            return self.lan_host
        try:
            return _TARGET_HOSTS[self.target]
        except KeyError:
            raise ValueError(f"Unknown deployment target: {self.target!r}") from None

    @classmethod
    def from_env(cls, **overrides) -> 'ClientConfig':
        """
        Create configuration from environment variables.

        Non-empty ``overrides`` (api_url, target, lan_host, port) take
        precedence over the environment. An explicit target without an
        explicit URL re-derives the URL instead of using TASKTRACK_API_URL.
        """
        values = {
            'api_url': os.getenv('TASKTRACK_API_URL') or None,
            'target': os.getenv('TASKTRACK_TARGET', TARGET_LOCAL).strip().lower(),
            'lan_host': os.getenv('TASKTRACK_LAN_HOST') or None,
            'port': int(os.getenv('TASKTRACK_API_PORT', str(DEFAULT_PORT))),
        }
        overrides = {k: v for k, v in overrides.items() if v}
        if 'target' in overrides and 'api_url' not in overrides:
            values['api_url'] = None
        values.update(overrides)
        return cls(**values)
