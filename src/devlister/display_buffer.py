"""Bounded per-category buffers of recent events.

Two eviction policies are available:

``strict``
    Every category owns an independent ring. After an admission the ring is
    trimmed to its capacity by dropping the single oldest entry, so a
    category never holds more than ``capacity`` events.

``legacy``
    All categories share one ordered sequence and a live count is kept per
    category. The oldest entry of a category is only removed once its live
    count exceeds ``capacity + 1``, so every category may hold one event more
    than its nominal capacity.

In both policies the surviving entries of a category are the most recently
admitted ones, oldest first.
"""

from collections import deque

from .constants import EVICTION_LEGACY, EVICTION_STRICT
from .errors import ConfigError
from .events import Category


def validate_capacities(capacities):
    result = {}
    for category in Category:
        if category not in capacities:
            raise ConfigError(f"No capacity configured for {category.label}")
        capacity = capacities[category]
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ConfigError(
                f"Capacity for {category.label} must be a positive integer, got {capacity!r}"
            )
        result[category] = capacity
    return result


class StrictDisplayBuffer:
    policy = EVICTION_STRICT

    def __init__(self, capacities):
        self.capacities = validate_capacities(capacities)
        self._rings = {category: deque() for category in Category}

    def admit(self, event):
        ring = self._rings[event.category]
        ring.append(event)
        if len(ring) > self.capacities[event.category]:
            ring.popleft()

    def events(self, category):
        return tuple(self._rings[category])

    def entries(self):
        """All buffered events grouped in category display order."""
        return tuple(event for category in Category for event in self._rings[category])

    def __len__(self):
        return sum(len(ring) for ring in self._rings.values())


class SlackDisplayBuffer:
    policy = EVICTION_LEGACY

    def __init__(self, capacities):
        self.capacities = validate_capacities(capacities)
        self._sequence = []
        self._live = {category: 0 for category in Category}

    def admit(self, event):
        category = event.category
        self._sequence.append(event)
        self._live[category] += 1

        if self._live[category] > self.capacities[category] + 1:
            oldest = next(
                index for index, entry in enumerate(self._sequence)
                if entry.category is category
            )
            del self._sequence[oldest]
            self._live[category] -= 1

    def events(self, category):
        return tuple(event for event in self._sequence if event.category is category)

    def entries(self):
        """All buffered events in arrival order, categories interleaved."""
        return tuple(self._sequence)

    def __len__(self):
        return len(self._sequence)


BUFFER_POLICIES = {
    EVICTION_STRICT: StrictDisplayBuffer,
    EVICTION_LEGACY: SlackDisplayBuffer,
}


def make_display_buffer(policy, capacities):
    try:
        buffer_cls = BUFFER_POLICIES[policy]
    except KeyError:
        raise ConfigError(f"Unknown eviction policy: {policy!r}") from None
    return buffer_cls(capacities)
