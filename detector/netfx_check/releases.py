"""
Map the `Release` value under NDP\\v4\\Full to a .NET Framework 4.5+ label.

The checks run top to bottom and the first matching row wins, so the row
order is part of the behaviour. Checking with >= keeps newer builds of a
known update classified as that update.
"""
from __future__ import annotations
from typing import NamedTuple

NOT_DETECTED = "No 4.5 or later version detected"


class _Row(NamedTuple):
    bound: int
    label: str
    strict: bool = False      # '>' instead of '>='
    historical: bool = False  # only present in the historical ordering

    def matches(self, release: int) -> bool:
        return release > self.bound if self.strict else release >= self.bound


_ROWS: tuple[_Row, ...] = (
    _Row(528372, ".NET Framework 4.8 or later", strict=True),
    _Row(528372, ".NET Framework 4.8 on Windows 10 May 2020 Update and Windows 10 October 2020 Update"),
    _Row(528049, ".NET Framework 4.8 on all Windows operating systems (including other Windows 10 operating systems) other than Windows 10 May 2019 Update, Windows 10 November 2019 Update, Windows 10 May 2020 Update and Windows 10 October 2020 Update"),
    _Row(528040, ".NET Framework 4.8 on Windows 10 May 2019 Update and Windows 10 November 2019 Update"),
    _Row(461814, ".NET Framework 4.7.2 on all Windows operating systems other than Windows 10 April 2018 Update and Windows Server, version 1803"),
    _Row(461808, ".NET Framework 4.7.2 on Windows 10 April 2018 Update and Windows Server, version 1803"),
    _Row(461310, ".NET Framework 4.7.1 on all Windows operating systems (including other Windows 10 operating systems) other than Windows 10 Fall Creators Update and Windows Server, version 1709"),
    _Row(461308, ".NET Framework 4.7.1 on Windows 10 Fall Creators Update and Windows Server, version 1709"),
    _Row(460805, ".NET Framework 4.7 on all Windows operating systems (including other Windows 10 operating systems) other than Windows 10 Creators Update"),
    _Row(460798, ".NET Framework 4.7 on Windows 10 Creators Update"),
    _Row(394806, ".NET Framework 4.6.2 on all Windows operating systems (including other Windows 10 operating systems) other than Windows 10 Anniversary Update and Windows Server 2016"),
    _Row(394802, ".NET Framework 4.6.2 on Windows 10 Anniversary Update and Windows Server 2016"),
    _Row(394271, ".NET Framework 4.6.1 on all Windows operating systems (including Windows 10) other than Windows 10 November Update Systems"),
    _Row(394254, ".NET Framework 4.6.1 on Windows 10 November Update systems"),
    _Row(393297, ".NET Framework 4.6 on all Windows operating systems other than Windows 10"),
    _Row(393295, ".NET Framework 4.6 on Windows 10"),
    _Row(379893, ".NET Framework 4.5.2 "),
    # Shadows the two 4.5.1 rows below: everything from 378675 lands here.
    _Row(378675, "4.5.1 on all Windows operating systems", historical=True),
    _Row(378758, ".NET Framework 4.5.1 on all Windows operating systems other than Windows 8.1 and Windows Server 2012 R2"),
    _Row(378675, ".NET Framework 4.5.1 on Windows 8.1 and Windows Server 2012 R2"),
    _Row(378389, ".NET Framework 4.5 on all Windows operating systems"),
)

NEWEST = _ROWS[0].label

# smallest release number shipped for each version
MINIMUM_RELEASES: dict[str, int] = {
    "4.5":   378389,
    "4.5.1": 378675,
    "4.5.2": 379893,
    "4.6":   393295,
    "4.6.1": 394254,
    "4.6.2": 394802,
    "4.7":   460798,
    "4.7.1": 461308,
    "4.7.2": 461808,
    "4.8":   528040,
}


def describe_release(release: int, documented_451: bool = False) -> str:
    """
    Return the label for a release number.

    Total over all integers: anything below 378389 is NOT_DETECTED, anything
    above the newest known build is NEWEST.

    documented_451=False keeps the historical ordering, where every release
    from 378675 up to 379892 reads "4.5.1 on all Windows operating systems".
    documented_451=True drops that row so 378675..378757 (Windows 8.1 / Server
    2012 R2) and 378758.. (everything else) are told apart.
    """
    for row in _ROWS:
        if documented_451 and row.historical:
            continue
        if row.matches(release):
            return row.label
    return NOT_DETECTED


def minimum_release(version: str) -> int:
    try:
        return MINIMUM_RELEASES[version.strip()]
    except KeyError:
        known = ", ".join(MINIMUM_RELEASES)
        raise ValueError(f"unknown .NET Framework version {version!r} (known: {known})") from None


def release_satisfies(release: int | None, version: str) -> bool:
    """True if `release` is at least the first build of `version`."""
    need = minimum_release(version)
    return release is not None and release >= need
