from __future__ import annotations
import platform
from enum import Enum

import cpuinfo
import psutil


class Platform(Enum):
    WINDOWS = "Windows"
    LINUX = "Linux"
    MACOS = "MacOS"
    UNDETECTED = "=undetected="


def detect_platform() -> Platform:
    if psutil.WINDOWS:
        return Platform.WINDOWS
    if psutil.LINUX:
        return Platform.LINUX
    if psutil.MACOS:
        return Platform.MACOS
    return Platform.UNDETECTED


def _format_bytes(n: int) -> str:
    # GiB with one decimal
    return f"{n / (1024**3):.1f} GiB"


def host_summary() -> dict[str, str]:
    """OS / CPU / memory facts for the verbose log. Each field degrades to '—'."""
    try:
        os_name = f"{platform.system()} {platform.release()} ({platform.machine()})"
    except Exception:
        os_name = "—"
    try:
        cpu = cpuinfo.get_cpu_info()["brand_raw"]
    except Exception:
        cpu = "CPU"
    try:
        phys = psutil.cpu_count(logical=False) or 1
        logi = psutil.cpu_count(logical=True) or phys
        cores = f"{phys} cores / {logi} threads"
    except Exception:
        cores = "—"
    try:
        vm = psutil.virtual_memory()
        ram = f"{_format_bytes(vm.total)} total, {_format_bytes(vm.available)} free"
    except Exception:
        ram = "—"
    return {"os": os_name, "cpu": cpu, "cores": cores, "ram": ram}
