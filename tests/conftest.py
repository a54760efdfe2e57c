import pytest

from netfx_check.console import set_verbose
from netfx_check.registry import SnapshotRegistry

NDP = r"SOFTWARE\Microsoft\NET Framework Setup\NDP"


@pytest.fixture(autouse=True)
def _clean_config(monkeypatch):
    """Keep marker env vars and the verbose switch from leaking between tests."""
    for name in ("NETFX_CHECK_VERBOSE", "NETFX_CHECK_DOCUMENTED_451", "NETFX_CHECK_SNAPSHOT"):
        monkeypatch.delenv(name, raising=False)
    set_verbose(False)
    yield
    set_verbose(False)


def make_ndp(versions: dict) -> SnapshotRegistry:
    """Registry with `versions` as the children of the NDP key."""
    return SnapshotRegistry({"SOFTWARE": {"Microsoft": {"NET Framework Setup": {"NDP": versions}}}})


@pytest.fixture
def workstation() -> SnapshotRegistry:
    """NDP layout of a Windows 10 machine with 2.0 - 4.8 installed."""
    return make_ndp({
        "CDF": {"v4.0": {"Install": 1}},
        "v2.0.50727": {"Version": "2.0.50727.4927", "SP": 2, "Install": 1},
        "v3.0": {
            "Version": "3.0.30729.4926", "SP": 2, "Install": 1,
            "Setup": {"InstallSuccess": 1, "Version": "3.2.30729.4926"},
        },
        "v3.5": {"Version": "3.5.30729.4926", "SP": 1, "Install": 1},
        "v4": {
            "Client": {"Install": 1, "Version": "4.8.04084", "Release": 528049},
            "Full": {"Install": 1, "Version": "4.8.04084", "Release": 528049},
        },
        "v4.0": {"": "deprecated", "Client": {"Install": 1, "Version": "4.0.0.0"}},
    })
