import os

from .paths import APP_ROOT

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str) -> bool | None:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip().lower() in _TRUTHY


def _marker(name: str) -> bool:
    return os.path.exists(os.path.join(APP_ROOT, name))


def is_verbose_mode() -> bool:
    env = _env_flag("NETFX_CHECK_VERBOSE")
    if env is not None:
        return env
    return _marker("verbose.enable")


def use_documented_451() -> bool:
    """Order the 4.5.1 release checks as documented instead of historically."""
    env = _env_flag("NETFX_CHECK_DOCUMENTED_451")
    if env is not None:
        return env
    return _marker("documented-451.enable")


def default_snapshot() -> str | None:
    return os.environ.get("NETFX_CHECK_SNAPSHOT") or None
