from __future__ import annotations

import math
from typing import Optional

from pygame.math import Vector2

# Facing used when a heading degenerates to the zero vector.
DEFAULT_FORWARD = Vector2(0.0, 1.0)


def _safe_normalize(vector: Vector2) -> Vector2:
    return _safe_normalize_xy(vector.x, vector.y)


def _safe_normalize_xy(x: float, y: float) -> Vector2:
    magnitude_sq = x * x + y * y
    if magnitude_sq < 1e-10:
        return Vector2()
    inv = 1.0 / math.sqrt(magnitude_sq)
    return Vector2(x * inv, y * inv)


def _planar_forward(vector: Vector2) -> Vector2:
    forward = _safe_normalize(vector)
    if forward.length_squared() == 0.0:
        return Vector2(DEFAULT_FORWARD)
    return forward


def _signed_angle(source: Vector2, target: Vector2) -> float:
    """Shortest rotation in degrees taking ``source`` onto ``target``, in (-180, 180]."""
    angle = source.angle_to(target) % 360.0
    if angle > 180.0:
        angle -= 360.0
    return angle


def _ray_circle_distance(
    origin: Vector2, direction: Vector2, center: Vector2, radius: float, max_distance: float
) -> Optional[float]:
    # direction is unit length; rays starting inside a body never report it
    to_center_x = center.x - origin.x
    to_center_y = center.y - origin.y
    center_dist_sq = to_center_x * to_center_x + to_center_y * to_center_y
    radius_sq = radius * radius
    if center_dist_sq <= radius_sq:
        return None
    along = to_center_x * direction.x + to_center_y * direction.y
    if along <= 0.0:
        return None
    miss_sq = center_dist_sq - along * along
    if miss_sq > radius_sq:
        return None
    distance = along - math.sqrt(radius_sq - miss_sq)
    if distance > max_distance:
        return None
    return distance


def _clamp_value(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))
