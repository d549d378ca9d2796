"""Row types shared with callers of the storage layer."""

from __future__ import annotations

from dataclasses import astuple, dataclass


@dataclass(frozen=True)
class DbRow:
    """One ``vrs_locations`` record, minus its surrogate key."""

    vrs_id: str
    chr: str
    pos: int
    uri_id: int

    def as_params(self) -> tuple[str, str, int, int]:
        """Column-ordered values for a parameterized INSERT."""
        return astuple(self)
