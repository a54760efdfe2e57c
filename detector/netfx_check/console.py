from __future__ import annotations
import sys

from tqdm import tqdm

_verbose = False


def set_verbose(on: bool) -> None:
    global _verbose
    _verbose = bool(on)


def is_verbose() -> bool:
    return _verbose


def log(msg: str) -> None:
    """
    Write a diagnostic line to stderr.
    - Prefer tqdm.write if available and working.
    - Fallback to plain print when there is no stderr (windowed build).
    """
    if getattr(sys, "stderr", None) is not None:
        try:
            tqdm.write(msg, file=sys.stderr)
            return
        except Exception:
            pass
        print(msg, file=sys.stderr)
    else:
        print(msg)


def debug(msg: str) -> None:
    if _verbose:
        log(f"[debug] {msg}")


def headline(text: str) -> str:
    bar = "#" * (len(text) + 4)
    return f"{bar}\n# {text} #\n{bar}"


def print_headline(text: str) -> None:
    print(headline(text))
