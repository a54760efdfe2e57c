import json
import sys

import pytest

from netfx_check.registry import (
    SnapshotError,
    SnapshotRegistry,
    WinRegistry,
    parse_reg,
    split_path,
)

REG_EXPORT = r"""Windows Registry Editor Version 5.00

; exported from a Windows 10 machine
[HKEY_LOCAL_MACHINE\SOFTWARE\WOW6432Node\Microsoft\NET Framework Setup\NDP\v4\Full]
"Release"=dword:0008103c
"Version"="4.8.04084"
"InstallPath"="C:\\Windows\\Microsoft.NET\\Framework\\v4.0.30319\\"
"Blob"=hex:01,02,\
  03,04
"Path"=hex(2):25,00,00,00
"Big"=hex(b):01,00,00,00,00,00,00,00

[HKEY_LOCAL_MACHINE\SOFTWARE\Microsoft\NET Framework Setup\NDP\v3.5]
"Version"="3.5.30729.4926"
"SP"=dword:00000001
"Install"=dword:00000001
@="default"

[-HKEY_LOCAL_MACHINE\SOFTWARE\Microsoft\NET Framework Setup\NDP\v1.0]

[HKEY_CURRENT_USER\Software\Example]
"Ignored"="yes"
"""

FULL = r"SOFTWARE\Microsoft\NET Framework Setup\NDP\v4\Full"
V35 = r"SOFTWARE\Microsoft\NET Framework Setup\NDP\v3.5"


def test_split_path_strips_hive_and_empty_parts():
    assert split_path("HKEY_LOCAL_MACHINE\\SOFTWARE\\Foo\\") == ["SOFTWARE", "Foo"]
    assert split_path(r"HKLM\SOFTWARE") == ["SOFTWARE"]
    assert split_path("SOFTWARE/Foo") == ["SOFTWARE", "Foo"]
    assert split_path("") == []


def test_snapshot_tree_values_and_subkeys():
    store = SnapshotRegistry({"SOFTWARE": {"A": {"Name": "x", "Count": 3}, "B": {}}})
    with store.open_key("SOFTWARE") as key:
        assert key.subkeys() == ["A", "B"]
        with key.open_subkey("a") as sub:
            assert sub.value("NAME") == "x"
            assert sub.value("count") == 3
            assert sub.value("missing") is None
        with key.open_subkey("C") as sub:
            assert sub is None


def test_snapshot_missing_path_is_none():
    store = SnapshotRegistry({"SOFTWARE": {}})
    with store.open_key(r"SOFTWARE\Nope\Deeper") as key:
        assert key is None


def test_snapshot_drops_unsupported_value_types():
    store = SnapshotRegistry({"K": {"flag": True, "ratio": 1.5, "list": [1], "ok": 1}})
    with store.open_key("K") as key:
        assert key.value("flag") is None
        assert key.value("ratio") is None
        assert key.value("list") is None
        assert key.value("ok") == 1


def test_from_keys_creates_intermediate_keys():
    store = SnapshotRegistry.from_keys({FULL: {"Release": 461808}})
    with store.open_key(r"SOFTWARE\Microsoft\NET Framework Setup\NDP") as ndp:
        assert ndp.subkeys() == ["v4"]


def test_parse_reg_values():
    keys = parse_reg(REG_EXPORT)
    assert set(keys) == {FULL, V35}
    full = keys[FULL]
    assert full["Release"] == 0x8103C
    assert full["Version"] == "4.8.04084"
    assert full["InstallPath"] == "C:\\Windows\\Microsoft.NET\\Framework\\v4.0.30319\\"
    assert "Blob" not in full
    assert full["Path"] == "%"
    assert full["Big"] == 1
    assert keys[V35] == {"Version": "3.5.30729.4926", "SP": 1, "Install": 1, "": "default"}


def test_parse_reg_rejects_other_text():
    with pytest.raises(SnapshotError, match="not a registry export"):
        parse_reg("hello\nworld\n")


def test_parse_reg_regedit4_header():
    keys = parse_reg('REGEDIT4\n\n[HKEY_LOCAL_MACHINE\\SOFTWARE\\X]\n"A"="b"\n')
    assert keys == {r"SOFTWARE\X": {"A": "b"}}


def test_parse_reg_skips_bad_dword():
    keys = parse_reg('REGEDIT4\n[HKLM\\K]\n"A"=dword:zz\n"B"=dword:00000002\n')
    assert keys == {"K": {"B": 2}}


def test_load_utf16_reg_export(tmp_path):
    path = tmp_path / "ndp.reg"
    path.write_text(REG_EXPORT, encoding="utf-16")
    store = SnapshotRegistry.load(path)
    with store.open_key(FULL) as key:
        assert key.value("Release") == 528444


def test_load_utf8_reg_export(tmp_path):
    path = tmp_path / "ndp.reg"
    path.write_text(REG_EXPORT, encoding="utf-8")
    store = SnapshotRegistry.load(str(path))
    with store.open_key(V35) as key:
        assert key.value("SP") == 1


def test_load_json_tree(tmp_path):
    path = tmp_path / "ndp.json"
    path.write_text(json.dumps({"SOFTWARE": {"Microsoft": {"K": {"V": "1"}}}}), encoding="utf-8")
    store = SnapshotRegistry.load(path)
    with store.open_key(r"SOFTWARE\Microsoft\K") as key:
        assert key.value("V") == "1"


def test_load_bad_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SnapshotError, match="invalid JSON"):
        SnapshotRegistry.load(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(SnapshotError, match="cannot read snapshot"):
        SnapshotRegistry.load(tmp_path / "nope.reg")


def test_snapshot_error_is_value_error():
    assert issubclass(SnapshotError, ValueError)


@pytest.mark.skipif(sys.platform != "win32", reason="live registry is Windows only")
def test_win_registry_reads_ndp():
    store = WinRegistry()
    with store.open_key(r"SOFTWARE\Microsoft\NET Framework Setup\NDP") as ndp:
        if ndp is not None:
            assert all(isinstance(n, str) for n in ndp.subkeys())
    with store.open_key(r"SOFTWARE\Definitely\Not\There") as key:
        assert key is None


def test_snapshot_tree_accepts_path_style_key_names():
    store = SnapshotRegistry({
        r"SOFTWARE\Microsoft\NET Framework Setup\NDP": {"v4": {"Full": {"Release": 528049}}},
    })
    with store.open_key(FULL) as key:
        assert key.value("Release") == 528049
    with store.open_key(r"SOFTWARE\Microsoft") as key:
        assert key.subkeys() == ["NET Framework Setup"]


def test_load_json_with_path_style_and_hive_names(tmp_path):
    path = tmp_path / "ndp.json"
    path.write_text(json.dumps({
        "HKEY_LOCAL_MACHINE": {r"SOFTWARE\Microsoft\NET Framework Setup\NDP\v3.5": {"Install": 1}},
    }), encoding="utf-8")
    store = SnapshotRegistry.load(path)
    with store.open_key(V35) as key:
        assert key.value("Install") == 1
