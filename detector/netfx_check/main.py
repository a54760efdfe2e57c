# netfx_check/main.py
from __future__ import annotations
import sys

# robust imports (work with/without package context)
try:
    from . import cli
except ImportError:  # frozen exe starting main.py as a script
    import netfx_check.cli as cli


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    return cli.run_cli(argv)


if __name__ == "__main__":
    raise SystemExit(main())
