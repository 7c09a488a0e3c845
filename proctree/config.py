from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_WINDIR = "C:\\Windows"
DEFAULT_PS = "/bin/ps"
DEFAULT_PORT = 8902

PLATFORMS = ("windows", "darwin", "linux")


@dataclass(frozen=True)
class Config:
    windir: str = DEFAULT_WINDIR
    platform: str | None = None
    ps_path: str = DEFAULT_PS
    encoding: str = "utf-8"
    log_level: str = "INFO"
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if self.platform is not None and self.platform not in PLATFORMS:
            raise ValueError(
                f"Unknown platform {self.platform!r} (expected one of: {', '.join(PLATFORMS)})"
            )

    @classmethod
    def from_env(cls, env_path: str | Path | None = None) -> Config:
        """Build a Config from the environment, after loading an optional .env file.

        WINDIR               Windows root used to locate WMIC.exe
        PROCTREE_PLATFORM    force windows / darwin / linux instead of autodetecting
        PROCTREE_PS          ps executable on macOS and linux
        PROCTREE_ENCODING    encoding of the listing output
        PROCTREE_LOG_LEVEL   log level for the command line
        PROCTREE_PORT        port of the MCP HTTP server
        """
        load_dotenv(env_path)

        platform = os.getenv("PROCTREE_PLATFORM", "").strip().lower() or None

        return cls(
            windir=os.getenv("WINDIR") or DEFAULT_WINDIR,
            platform=platform,
            ps_path=os.getenv("PROCTREE_PS") or DEFAULT_PS,
            encoding=os.getenv("PROCTREE_ENCODING") or "utf-8",
            log_level=os.getenv("PROCTREE_LOG_LEVEL", "INFO").upper(),
            port=int(os.getenv("PROCTREE_PORT", str(DEFAULT_PORT))),
        )
