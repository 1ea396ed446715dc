import math
from typing import Optional


def parse_corners(raw) -> Optional[list]:
    # Accepts [{"x": .., "y": ..}, ...] or [[x, y], ...]; anything else is rejected
    if not isinstance(raw, list):
        return None

    points = []
    for item in raw:
        if isinstance(item, dict):
            points.append({"x": item.get("x", 0), "y": item.get("y", 0)})
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            points.append({"x": item[0], "y": item[1]})
        else:
            return None

    return points


def has_numeric_coordinates(points: list) -> bool:
    for point in points:
        for value in (point["x"], point["y"]):
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                return False
    return True


def get_image(payload: dict) -> Optional[str]:
    image = payload.get("image")
    if not isinstance(image, str) or not image.strip():
        return None
    return image
