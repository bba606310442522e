from dataclasses import dataclass, field
from types import MappingProxyType

from .constants import QUIT_HINT, TITLE
from .events import Category


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time copy of the display buffer and the lifetime counters."""

    events: tuple            # ((Category, (event, ...)), ...) in display order
    totals: MappingProxyType
    capacities: MappingProxyType
    policy: str
    closed: bool = False
    buffered: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "buffered", sum(len(group) for _, group in self.events))

    def events_for(self, category):
        for cat, group in self.events:
            if cat is category:
                return group
        return ()


def take_snapshot(buffer, counters, closed=False):
    return Snapshot(
        events=tuple((category, buffer.events(category)) for category in Category),
        totals=MappingProxyType(counters.as_dict()),
        capacities=MappingProxyType(dict(buffer.capacities)),
        policy=buffer.policy,
        closed=closed,
    )


def render_snapshot(snapshot):
    """Render a snapshot as a full terminal frame. Same snapshot, same text."""
    lines = [f"{TITLE}  ({QUIT_HINT})", f"eviction: {snapshot.policy}", ""]

    for category, group in snapshot.events:
        lines.append(
            f"{category.label}  [{len(group)}/{snapshot.capacities[category]}]"
            f"  total: {snapshot.totals[category]}"
        )
        if not group:
            lines.append("    (no events)")
        for event in group:
            lines.append(f"    {event.describe()}")
        lines.append("")

    if snapshot.closed:
        lines.append("stream closed")
    return "\n".join(lines).rstrip("\n") + "\n"
