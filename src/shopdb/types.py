"""Shared types for the shopdb package."""

from typing import Any, Sequence

Params = Sequence[Any]
Row = list[str | None]
ResultSet = list[Row]
