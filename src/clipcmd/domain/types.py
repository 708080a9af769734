"""Domain types — NewType aliases for command-line building blocks."""

from datetime import timedelta
from typing import NewType

FilterFragment = NewType("FilterFragment", str)

# A point in time or span, either as a timedelta or as a number of seconds.
TimeValue = timedelta | float | int
