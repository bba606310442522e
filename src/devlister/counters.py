from .events import Category


class CategoryCounters:
    """Lifetime totals per category. Unaffected by display buffer eviction."""

    def __init__(self):
        self._totals = {category: 0 for category in Category}

    def increment(self, category):
        self._totals[category] += 1

    def get(self, category):
        return self._totals[category]

    @property
    def total(self):
        return sum(self._totals.values())

    def as_dict(self):
        return dict(self._totals)
