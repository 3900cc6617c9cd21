import logging
import os
from dataclasses import dataclass

from chessboard.oracle import ORACLES


@dataclass(frozen=True)
class Settings:
    rules: str = "standard"
    log_level: str = "INFO"
    cors_origins: tuple[str, ...] = ("*",)
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ

        rules = env.get("CHESSBOARD_RULES", "standard").strip().lower() or "standard"
        if rules not in ORACLES:
            raise ValueError(f"CHESSBOARD_RULES must be one of {sorted(ORACLES)}, got {rules!r}")

        raw_port = env.get("CHESSBOARD_PORT", "8000").strip()
        try:
            port = int(raw_port)
        except ValueError:
            raise ValueError(f"CHESSBOARD_PORT must be an integer, got {raw_port!r}") from None

        origins = tuple(
            origin.strip()
            for origin in env.get("CHESSBOARD_CORS_ORIGINS", "*").split(",")
            if origin.strip()
        )

        return cls(
            rules=rules,
            log_level=env.get("CHESSBOARD_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            cors_origins=origins or ("*",),
            host=env.get("CHESSBOARD_HOST", "127.0.0.1").strip() or "127.0.0.1",
            port=port,
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
