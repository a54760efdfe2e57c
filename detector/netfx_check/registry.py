"""
Read-only access to the HKLM registry hive.

Two stores share one interface:
  WinRegistry       live registry through winreg (32-bit view), Windows only
  SnapshotRegistry  in-memory tree, built from a dict or loaded from a JSON
                    document / regedit .reg export

Keys are opened with `with store.open_key(path) as key:`; `key` is None when
the path does not exist or cannot be opened, and the handle is closed when
the block ends.
"""
from __future__ import annotations
import json
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from .console import debug

Value = Union[str, int]


class SnapshotError(ValueError):
    """A registry snapshot file could not be understood."""


def split_path(path: str) -> list[str]:
    parts = [p for p in path.replace("/", "\\").split("\\") if p]
    if parts and parts[0].upper() in ("HKEY_LOCAL_MACHINE", "HKLM"):
        parts = parts[1:]
    return parts


class RegistryKey(ABC):
    name: str

    @abstractmethod
    def subkeys(self) -> list[str]:
        """Names of the immediate child keys."""

    @abstractmethod
    def value(self, name: str) -> Value | None:
        """A string or integer value, or None when absent or of another type."""

    @abstractmethod
    def open_subkey(self, name: str):
        """Context manager yielding the child key or None."""


class RegistryStore(ABC):
    @abstractmethod
    def open_key(self, path: str):
        """Context manager yielding the key at `path` (relative to HKLM) or None."""


# -----------------------------
# live registry
# -----------------------------
class _WinKey(RegistryKey):
    def __init__(self, winreg, handle, name: str):
        self._winreg = winreg
        self._h = handle
        self.name = name

    def subkeys(self) -> list[str]:
        names: list[str] = []
        i = 0
        while True:
            try:
                names.append(self._winreg.EnumKey(self._h, i))
            except OSError:  # ERROR_NO_MORE_ITEMS
                break
            i += 1
        return names

    def value(self, name: str) -> Value | None:
        try:
            val, _ = self._winreg.QueryValueEx(self._h, name)
        except FileNotFoundError:
            return None
        except OSError as e:
            debug(f"cannot read value {self.name}\\{name}: {e}")
            return None
        if isinstance(val, (str, int)):
            return val
        return None

    def open_subkey(self, name: str):
        return _open_winreg(self._winreg, self._h, name, name)


@contextmanager
def _open_winreg(winreg, parent, path: str, label: str) -> Iterator[_WinKey | None]:
    try:
        h = winreg.OpenKey(parent, path, 0, winreg.KEY_READ | winreg.KEY_WOW64_32KEY)
    except OSError as e:  # FileNotFoundError, PermissionError
        debug(f"cannot open {label}: {e}")
        h = None
    if h is None:
        yield None
        return
    with h:
        yield _WinKey(winreg, h, label)


class WinRegistry(RegistryStore):
    """HKEY_LOCAL_MACHINE, opened read-only in the 32-bit view."""

    def __init__(self):
        import winreg
        self._winreg = winreg

    def open_key(self, path: str):
        parts = split_path(path)
        label = parts[-1] if parts else "HKEY_LOCAL_MACHINE"
        return _open_winreg(self._winreg, self._winreg.HKEY_LOCAL_MACHINE, "\\".join(parts), label)


# -----------------------------
# snapshot registry
# -----------------------------
class _Node(RegistryKey):
    def __init__(self, name: str):
        self.name = name
        self._values: dict[str, Value] = {}
        self._children: dict[str, _Node] = {}
        self._order: list[str] = []

    def child(self, name: str, create: bool = False) -> _Node | None:
        node = self._children.get(name.lower())
        if node is None and create:
            node = _Node(name)
            self._children[name.lower()] = node
            self._order.append(name.lower())
        return node

    def set_value(self, name: str, val: Value) -> None:
        self._values[name.lower()] = val

    def subkeys(self) -> list[str]:
        return [self._children[k].name for k in self._order]

    def value(self, name: str) -> Value | None:
        return self._values.get(name.lower())

    @contextmanager
    def open_subkey(self, name: str):
        yield self.child(name)


def _fill(node: _Node, tree: dict) -> None:
    for name, item in tree.items():
        if isinstance(item, dict):
            # "SOFTWARE\\Microsoft" opens one level per part
            sub = node
            for part in split_path(name):
                sub = sub.child(part, create=True)
            _fill(sub, item)
        elif isinstance(item, (str, int)) and not isinstance(item, bool):
            node.set_value(name, item)
        else:
            debug(f"snapshot: skipping value {name!r} of type {type(item).__name__}")


class SnapshotRegistry(RegistryStore):
    """
    In-memory HKLM tree.

    `tree` is nested dicts: a dict item is a subkey, a str/int item is a value.
    A subkey name may be a backslash path ("SOFTWARE\\Microsoft"); it is split
    into one key per part.
    Name lookups are case-insensitive, like the real registry.

        SnapshotRegistry({"SOFTWARE": {"Microsoft": {...}}})
        SnapshotRegistry.from_keys({r"SOFTWARE\\Microsoft\\...\\v4\\Full": {"Release": 528049}})
        SnapshotRegistry.load("ndp.reg")
    """

    def __init__(self, tree: dict | None = None):
        self._root = _Node("HKEY_LOCAL_MACHINE")
        _fill(self._root, tree or {})

    @classmethod
    def from_keys(cls, keys: dict[str, dict[str, Value]]) -> "SnapshotRegistry":
        """Build from full key paths mapped to their values."""
        reg = cls()
        for path, values in keys.items():
            node = reg._ensure(path)
            for name, val in values.items():
                node.set_value(name, val)
        return reg

    @classmethod
    def load(cls, path: str | Path) -> "SnapshotRegistry":
        """Read a JSON tree if possible, fall back to a regedit export."""
        p = Path(path)
        try:
            raw = p.read_bytes()
        except OSError as e:
            raise SnapshotError(f"cannot read snapshot {p}: {e}") from e
        text = _decode(raw)
        if text.lstrip().startswith("{"):
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                raise SnapshotError(f"{p}: invalid JSON: {e}") from e
            return cls(data)
        return cls.from_keys(parse_reg(text))

    def _ensure(self, path: str) -> _Node:
        node = self._root
        for part in split_path(path):
            node = node.child(part, create=True)
        return node

    @contextmanager
    def open_key(self, path: str):
        node: _Node | None = self._root
        for part in split_path(path):
            node = node.child(part)
            if node is None:
                debug(f"snapshot: no key {path}")
                break
        yield node


# -----------------------------
# .reg parsing
# -----------------------------
_REG_HEADERS = ("Windows Registry Editor Version 5.00", "REGEDIT4")
_HIVE_PREFIXES = ("HKEY_LOCAL_MACHINE\\", "HKLM\\")
_VALUE_LINE = re.compile(r'^(@|"(?:[^"\\]|\\.)*")\s*=\s*(.*)$')


def _decode(raw: bytes) -> str:
    if raw.startswith((b"\xff\xfe", b"\xfe\xff")):
        return raw.decode("utf-16")
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("cp1252")


def _unquote(s: str) -> str:
    return re.sub(r"\\(.)", r"\1", s[1:-1])


def _logical_lines(text: str) -> Iterator[str]:
    buf = ""
    for line in text.splitlines():
        line = line.strip() if buf else line.rstrip()
        if line.endswith("\\") and not line.startswith("["):
            buf += line[:-1]
            continue
        yield buf + line
        buf = ""
    if buf:
        yield buf


def _hex_bytes(data: str) -> bytes:
    return bytes(int(b, 16) for b in data.replace(" ", "").split(",") if b)


def _parse_data(data: str) -> Value | None:
    data = data.strip()
    if data.startswith('"') and data.endswith('"') and len(data) >= 2:
        return _unquote(data)
    low = data.lower()
    if low.startswith("dword:"):
        return int(low[6:], 16)
    if low.startswith("hex(b):"):
        return int.from_bytes(_hex_bytes(low[7:]), "little")
    if low.startswith("hex(2):"):
        return _hex_bytes(low[7:]).decode("utf-16-le").rstrip("\x00")
    # binary / multi-string / deletions: not needed by the scanner
    return None


def _fold_key(path: str) -> str | None:
    upper = path.upper()
    for prefix in _HIVE_PREFIXES:
        if upper.startswith(prefix):
            path = path[len(prefix):]
            break
    else:
        return None  # another hive
    parts = path.split("\\")
    if len(parts) > 1 and parts[0].upper() == "SOFTWARE" and parts[1].upper() == "WOW6432NODE":
        parts = parts[:1] + parts[2:]
    return "\\".join(parts)


def parse_reg(text: str) -> dict[str, dict[str, Value]]:
    """Parse a regedit export into {key path relative to HKLM: {value name: data}}."""
    lines = _logical_lines(text)
    header = next((ln.strip() for ln in lines if ln.strip()), "")
    if header not in _REG_HEADERS:
        raise SnapshotError(f"not a registry export (header {header[:40]!r})")

    keys: dict[str, dict[str, Value]] = {}
    current: dict[str, Value] | None = None
    for line in lines:
        s = line.strip()
        if not s or s.startswith(";"):
            continue
        if s.startswith("[") and s.endswith("]"):
            name = s[1:-1]
            path = None if name.startswith("-") else _fold_key(name)
            current = keys.setdefault(path, {}) if path is not None else None
            continue
        if current is None:
            continue
        m = _VALUE_LINE.match(s)
        if not m:
            debug(f"reg: skipping line {s[:60]!r}")
            continue
        name = "" if m.group(1) == "@" else _unquote(m.group(1))
        try:
            val = _parse_data(m.group(2))
        except ValueError as e:
            debug(f"reg: bad data for {name!r}: {e}")
            continue
        if val is not None:
            current[name] = val
    return keys
