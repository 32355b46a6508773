from __future__ import annotations

import os
import sys

from dotenv import load_dotenv

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000


def _parse_port(value: str | None, fallback: int) -> int:
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def _option(argv: list[str], flag: str) -> str | None:
    if flag in argv:
        i = argv.index(flag)
        if i + 1 < len(argv):
            return argv[i + 1]
    return None


def _parse_host_port(argv: list[str]) -> tuple[str, int]:
    host = os.getenv("HOST", DEFAULT_HOST)
    port = _parse_port(os.getenv("PORT"), DEFAULT_PORT)

    host = _option(argv, "--host") or host
    port = _parse_port(_option(argv, "--port"), port)

    if len(argv) == 1 and argv[0].isdigit():
        port = int(argv[0])
    elif len(argv) == 2 and argv[1].isdigit():
        host = argv[0]
        port = int(argv[1])

    return host, port


def main() -> None:
    """Main entry point for the Nova AI service."""

    load_dotenv()
    host, port = _parse_host_port(sys.argv[1:])

    import uvicorn

    uvicorn.run("nova.cli.server:app", host=host, port=port)


if __name__ == "__main__":
    main()
