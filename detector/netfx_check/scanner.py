from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from .console import debug
from .paths import LEGACY_PREFIX, MODERN_KEY_NAME, NDP_KEY, V4_FULL_KEY
from .registry import RegistryKey, RegistryStore
from .releases import describe_release

MODERN_NOT_DETECTED = ".NET Framework Version 4.5 or later is not detected."


class InstallState(Enum):
    CONFIRMED = "confirmed"      # Install == 1
    UNCONFIRMED = "unconfirmed"  # Install present, anything else
    ABSENT = "absent"            # no Install value: status lives in the child keys


@dataclass
class LegacyInstall:
    """One version entry found under NDP (1.0 through 4.0)."""
    key: str
    version: str
    service_pack: int | None = None
    state: InstallState = InstallState.CONFIRMED
    child: bool = False

    def line(self) -> str:
        text = f"{self.key}  {self.version}"
        if self.state is InstallState.CONFIRMED and self.service_pack is not None:
            text += f"  SP{self.service_pack}"
        if self.child:
            text = "  " + text
        return text


@dataclass
class ModernInstall:
    """Result of the 4.5+ lookup under NDP\\v4\\Full."""
    reachable: bool
    release: int | None
    description: str

    @property
    def detected(self) -> bool:
        return self.release is not None

    def line(self) -> str:
        if not self.detected:
            return MODERN_NOT_DETECTED
        return f".NET Framework Version: {self.description}"


# ---- value helpers (malformed values read as absent) ----

def _as_str(val) -> str:
    return val if isinstance(val, str) else ""


def _as_int(val) -> int | None:
    if isinstance(val, bool):
        return None
    if isinstance(val, int):
        return val
    if isinstance(val, str):
        digits = val.strip()
        # plain decimal only, as regedit writes it
        if digits.isascii() and digits.isdigit():
            return int(digits)
    return None


def _install_state(key: RegistryKey) -> InstallState:
    raw = key.value("Install")
    flag = "" if raw is None else str(raw).strip()
    if not flag:
        return InstallState.ABSENT
    return InstallState.CONFIRMED if flag == "1" else InstallState.UNCONFIRMED


def _is_legacy_key(name: str) -> bool:
    return name.startswith(LEGACY_PREFIX) and name != MODERN_KEY_NAME


def scan_legacy(store: RegistryStore) -> list[LegacyInstall]:
    """
    Walk NDP and return the 1.0 - 4.0 installations in registry order.

    A version key without an Install value and without a Version is only a
    container; its children carry the install state. A key that has its own
    Version is never descended into, so nothing is reported twice. Every key
    is closed before this returns.
    """
    found: list[LegacyInstall] = []
    with store.open_key(NDP_KEY) as ndp:
        if ndp is None:
            debug(f"{NDP_KEY} not found; no legacy versions")
            return found
        for key_name in ndp.subkeys():
            if not _is_legacy_key(key_name):
                continue
            with ndp.open_subkey(key_name) as vkey:
                if vkey is None:
                    continue
                found.extend(_scan_version_key(key_name, vkey))
    return found


def _scan_version_key(key_name: str, vkey: RegistryKey) -> Iterator[LegacyInstall]:
    version = _as_str(vkey.value("Version"))
    sp = _as_int(vkey.value("SP"))
    state = _install_state(vkey)
    debug(f"{key_name}: Version={version!r} SP={sp} Install={state.value}")

    if state is not InstallState.UNCONFIRMED:
        yield LegacyInstall(key_name, version, sp, state)
    if version:
        return

    for sub_name in vkey.subkeys():
        with vkey.open_subkey(sub_name) as skey:
            if skey is None:
                continue
            version = _as_str(skey.value("Version"))
            # SP only refreshes alongside a Version; otherwise the last one seen stays
            if version:
                sp = _as_int(skey.value("SP"))
            state = _install_state(skey)
            debug(f"{key_name}\\{sub_name}: Version={version!r} SP={sp} Install={state.value}")
            if state is InstallState.ABSENT:
                yield LegacyInstall(key_name, version, sp, state, child=True)
            elif state is InstallState.CONFIRMED:
                yield LegacyInstall(sub_name, version, sp, state, child=True)


def read_release(store: RegistryStore) -> int | None:
    return scan_modern(store).release


def scan_modern(store: RegistryStore, documented_451: bool = False) -> ModernInstall:
    """Look up Release under NDP\\v4\\Full and classify it."""
    with store.open_key(V4_FULL_KEY) as full:
        if full is None:
            debug(f"{V4_FULL_KEY} not found")
            return ModernInstall(False, None, MODERN_NOT_DETECTED)
        raw = full.value("Release")
    release = _as_int(raw)
    if release is None:
        debug(f"{V4_FULL_KEY} has no usable Release value ({raw!r})")
        return ModernInstall(True, None, MODERN_NOT_DETECTED)
    debug(f"Release={release}")
    return ModernInstall(True, release, describe_release(release, documented_451))
