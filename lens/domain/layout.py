"""Strategy map layout synthesis.

The model is never trusted with coordinates. Each category owns a region of
an 800x600 canvas (Operation left, Product centre, Market right, Finance
bottom, Risk top). Nodes are placed at their region's centre, pushed to one
side or the other of a secondary axis by index parity, then jittered so that
same-category nodes do not stack.

The random source is injectable: anything with uniform(a, b), e.g.
random.Random(seed) in tests.
"""

import random
from dataclasses import dataclass
from typing import Protocol

from lens.schemas.strategy_map import NodeCategory, StrategyNode

CANVAS_WIDTH: float = 800.0
CANVAS_HEIGHT: float = 600.0
JITTER: float = 50.0


class RandomSource(Protocol):
    def uniform(self, a: float, b: float) -> float: ...


@dataclass(frozen=True)
class Region:
    """Anchor for one category plus its parity spread along x and/or y."""

    center_x: float
    center_y: float
    parity_dx: float = 0.0
    parity_dy: float = 0.0

    def bounds(self) -> tuple[float, float, float, float]:
        """Return (min_x, max_x, min_y, max_y) reachable by any node in this region."""
        spread_x = self.parity_dx + JITTER
        spread_y = self.parity_dy + JITTER
        return (
            self.center_x - spread_x,
            self.center_x + spread_x,
            self.center_y - spread_y,
            self.center_y + spread_y,
        )


CATEGORY_REGIONS: dict[NodeCategory, Region] = {
    NodeCategory.OPERATION: Region(center_x=150.0, center_y=300.0, parity_dy=100.0),
    NodeCategory.PRODUCT: Region(center_x=400.0, center_y=300.0),
    NodeCategory.MARKET: Region(center_x=650.0, center_y=300.0, parity_dy=100.0),
    NodeCategory.FINANCE: Region(center_x=400.0, center_y=500.0, parity_dx=150.0),
    NodeCategory.RISK: Region(center_x=400.0, center_y=100.0, parity_dx=150.0),
}

CANVAS_CENTER = Region(center_x=CANVAS_WIDTH / 2, center_y=CANVAS_HEIGHT / 2)


def region_for(category: NodeCategory) -> Region:
    return CATEGORY_REGIONS.get(category, CANVAS_CENTER)


def place(category: NodeCategory, index: int, rng: RandomSource) -> tuple[float, float]:
    """Coordinates for the node at position index of the map's node list."""
    region = region_for(category)
    side = -1.0 if index % 2 == 0 else 1.0
    x = region.center_x + side * region.parity_dx + rng.uniform(-JITTER, JITTER)
    y = region.center_y + side * region.parity_dy + rng.uniform(-JITTER, JITTER)
    return x, y


def layout_nodes(
    raw_nodes: list[tuple[str, str, NodeCategory]],
    rng: RandomSource | None = None,
) -> list[StrategyNode]:
    """Place (id, label, category) triples onto the canvas.

    Args:
        raw_nodes: Node identity as returned by the model, in model order
        rng: Jitter source (defaults to a fresh random.Random())

    Returns:
        StrategyNode list in the same order
    """
    rng = rng or random.Random()
    nodes = []
    for index, (node_id, label, category) in enumerate(raw_nodes):
        x, y = place(category, index, rng)
        nodes.append(StrategyNode(id=node_id, label=label, category=category, x=x, y=y))
    return nodes
