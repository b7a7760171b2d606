"""Entry point: python -m forget_api CONTROLLER [CONTROLLER ...]

Prints the client module generated for each controller file.
"""

from __future__ import annotations

import sys

from .codegen import transform_file
from .loader import load_config


def main(argv: list[str] | None = None) -> int:
    paths = sys.argv[1:] if argv is None else argv
    if not paths:
        print("usage: python -m forget_api CONTROLLER [CONTROLLER ...]", file=sys.stderr)
        return 2
    config = load_config()
    for path in paths:
        print(f"# {path}")
        print(transform_file(path, config=config))
    return 0

if __name__ == "__main__":
    sys.exit(main())
