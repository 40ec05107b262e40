from __future__ import annotations

import math
from typing import Dict, List, Protocol, Tuple

from pygame.math import Vector2


class Placed(Protocol):
    id: int
    position: Vector2
    radius: float


class SpatialGrid:
    def __init__(self, cell_size: float) -> None:
        self._cell_size = cell_size
        self._cells: Dict[Tuple[int, int], List[Placed]] = {}
        self._active_keys: List[Tuple[int, int]] = []

    @property
    def cell_size(self) -> float:
        return self._cell_size

    def clear(self) -> None:
        for key in self._active_keys:
            bucket = self._cells.get(key)
            if bucket:
                bucket.clear()
        self._active_keys.clear()

    def insert(self, body: Placed) -> None:
        key = self._cell_key(body.position)
        bucket = self._cells.get(key)
        if bucket is None:
            bucket = []
            self._cells[key] = bucket
            self._active_keys.append(key)
        elif not bucket:
            # Bucket exists but was cleared since the last rebuild; mark it active again.
            self._active_keys.append(key)
        bucket.append(body)

    def collect_bodies(
        self,
        position: Vector2,
        radius: float,
        out_bodies: List[Placed],
        exclude_id: int | None = None,
    ) -> None:
        """
        Fill ``out_bodies`` with every body whose circle reaches within ``radius`` of ``position``.

        Callers own the buffer; it is cleared first.
        """

        out_bodies.clear()
        base_key = self._cell_key(position)
        cell_range = int(math.ceil(radius / self._cell_size)) + 1
        pos_x = position.x
        pos_y = position.y
        cells = self._cells
        append_body = out_bodies.append

        for dx in range(-cell_range, cell_range + 1):
            for dy in range(-cell_range, cell_range + 1):
                bucket = cells.get((base_key[0] + dx, base_key[1] + dy))
                if not bucket:
                    continue
                for body in bucket:
                    if exclude_id is not None and body.id == exclude_id:
                        continue
                    reach = radius + body.radius
                    offset_x = body.position.x - pos_x
                    offset_y = body.position.y - pos_y
                    if offset_x * offset_x + offset_y * offset_y <= reach * reach:
                        append_body(body)

    def _cell_key(self, position: Vector2) -> Tuple[int, int]:
        return (int(position.x // self._cell_size), int(position.y // self._cell_size))
