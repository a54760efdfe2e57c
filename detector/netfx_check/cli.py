from __future__ import annotations
import argparse

from . import __version__
from .console import debug, is_verbose, log, print_headline, set_verbose
from .flags import default_snapshot, is_verbose_mode, use_documented_451
from .registry import RegistryStore, SnapshotError, SnapshotRegistry, WinRegistry
from .releases import MINIMUM_RELEASES, describe_release, minimum_release, release_satisfies
from .scanner import read_release, scan_legacy, scan_modern
from .system import Platform, detect_platform, host_summary

LEGACY_HEADLINE = "Detect .NET Framework 1.0 through 4.0"
MODERN_HEADLINE = "Detect .NET Framework 4.5 and later versions"


def _open_store(args: argparse.Namespace) -> RegistryStore | None:
    """Snapshot if one was given, else the live registry (Windows only)."""
    if args.snapshot:
        debug(f"reading snapshot {args.snapshot}")
        return SnapshotRegistry.load(args.snapshot)

    plat = detect_platform()
    debug(f"platform: {plat.value}")
    if plat is not Platform.WINDOWS:
        print(f"No Windows OS version detected! Your OS is based on {plat.value}")
        return None
    return WinRegistry()


def _check_required(version: str, release: int | None) -> int:
    need = minimum_release(version)
    if release_satisfies(release, version):
        print(f"Requirement met: .NET Framework {version} (release {release} >= {need})")
        return 0
    found = "none" if release is None else str(release)
    print(f"Missing prerequisite: .NET Framework {version} (found release {found}, need {need})")
    return 1


def _cmd_release(args: argparse.Namespace, documented: bool) -> int:
    print(describe_release(args.release, documented_451=documented))
    if args.require:
        return _check_required(args.require, args.release)
    return 0


def _cmd_scan(args: argparse.Namespace, documented: bool) -> int:
    try:
        store = _open_store(args)
    except SnapshotError as e:
        log(f"error: {e}")
        return 2
    if store is None:
        # nothing to read, so a requirement cannot be met
        return _check_required(args.require, None) if args.require else 0

    if not args.modern_only:
        print_headline(LEGACY_HEADLINE)
        for rec in scan_legacy(store):
            print(rec.line())

    release = None
    if not args.legacy_only:
        print_headline(MODERN_HEADLINE)
        modern = scan_modern(store, documented_451=documented)
        print(modern.line())
        release = modern.release
    elif args.require:
        release = read_release(store)

    if args.require:
        return _check_required(args.require, release)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="netfx-check",
                                description="Detect installed .NET Framework versions from the registry")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--snapshot", type=str, default=default_snapshot(),
                   help="Read a JSON or .reg registry export instead of the live registry")
    p.add_argument("--release", type=int, help="Classify a Release number and exit")
    p.add_argument("--require", type=str, metavar="VERSION",
                   help=f"Exit 1 unless at least this version is installed ({', '.join(MINIMUM_RELEASES)})")
    p.add_argument("--documented-451", action="store_true",
                   help="Tell 4.5.1 on Windows 8.1 apart from other systems")
    only = p.add_mutually_exclusive_group()
    only.add_argument("--legacy-only", action="store_true", help="Only list 1.0 through 4.0")
    only.add_argument("--modern-only", action="store_true", help="Only check 4.5 and later")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug output on stderr")
    return p


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.require and args.require.strip() not in MINIMUM_RELEASES:
        parser.error(f"unknown version for --require: {args.require} (known: {', '.join(MINIMUM_RELEASES)})")

    set_verbose(args.verbose or is_verbose_mode())
    documented = args.documented_451 or use_documented_451()
    if documented:
        debug("using documented 4.5.1 ordering")

    if args.release is not None:
        return _cmd_release(args, documented)

    if is_verbose():
        for field, val in host_summary().items():
            debug(f"host {field}: {val}")
    return _cmd_scan(args, documented)
