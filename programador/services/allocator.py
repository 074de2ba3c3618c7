"""
Hour Allocator

Greedily fills a day's segments with the requested hours and returns the
concrete time blocks plus entry and exit times.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Optional

from programador.core.dates import minutes_to_hm
from programador.services.segments import Segment


@dataclass
class Block:
    day: date
    start_minutes: int
    end_minutes: int

    @property
    def hours(self) -> float:
        return (self.end_minutes - self.start_minutes) / 60

    def to_dict(self) -> dict:
        iso = self.day.isoformat()
        return {
            "start": f"{iso}T{minutes_to_hm(self.start_minutes)}:00",
            "end": f"{iso}T{minutes_to_hm(self.end_minutes)}:00",
            "hours": self.hours,
        }


@dataclass
class Allocation:
    blocks: List[Block] = field(default_factory=list)
    used_hours: float = 0.0
    entry_time: Optional[str] = None
    exit_time: Optional[str] = None


def allocate(day: date, segments: Iterable[Segment], hours_needed: float) -> Allocation:
    """
    Place ``hours_needed`` into ``segments`` in order.

    Minutes that do not fit in the segments extend the last block, so the
    requested hours are never dropped (banked and extended days rely on it).
    Hours are converted to whole minutes by rounding.
    """
    segments = list(segments)
    if hours_needed is None or hours_needed <= 0 or not segments:
        return Allocation()

    requested = int(round(hours_needed * 60))
    remaining = requested
    cursor = segments[0].start
    blocks: List[Block] = []

    for seg in segments:
        if remaining <= 0:
            break
        if cursor < seg.start:
            cursor = seg.start
        if cursor >= seg.end:
            continue
        take = min(seg.end - cursor, remaining)
        blocks.append(Block(day, cursor, cursor + take))
        cursor += take
        remaining -= take

    if not blocks:
        return Allocation()
    if remaining > 0:
        blocks[-1].end_minutes += remaining

    return Allocation(
        blocks=blocks,
        used_hours=requested / 60,
        entry_time=minutes_to_hm(blocks[0].start_minutes),
        exit_time=minutes_to_hm(blocks[-1].end_minutes),
    )
