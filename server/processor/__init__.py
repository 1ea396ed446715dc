from typing import Tuple

from document_detection import normalize_corner_order, rectify, crop_selected_area
from document_detection.codec import decode_data_url, encode_png_data_url, detect_document_corners_from_data_url
from document_detection.corners import corners_to_points
from .helper import parse_corners, has_numeric_coordinates, get_image


# Every function returns (json payload, http status)

def detect_corners_func(payload: dict) -> Tuple[dict, int]:
    image = get_image(payload)
    if image is None:
        return {"message": "No image"}, 400

    corners = detect_document_corners_from_data_url(image)
    return {"corners": corners_to_points(corners)}, 200


def normalize_corners_func(payload: dict) -> Tuple[dict, int]:
    if "corners" not in payload:
        return {"message": "No corners"}, 400

    # Malformed input resolves to the fallback quadrilateral
    corners = normalize_corner_order(parse_corners(payload["corners"]))
    return {"corners": corners_to_points(corners)}, 200


def _prepare(payload: dict):
    image = get_image(payload)
    if image is None:
        return None, None, ({"message": "No image"}, 400)

    points = parse_corners(payload.get("corners"))
    if points is None or len(points) != 4:
        return None, None, ({"message": "Exactly 4 corners are required"}, 400)
    if not has_numeric_coordinates(points):
        return None, None, ({"message": "Corner coordinates must be numbers"}, 400)

    buffer = decode_data_url(image, max_dimension=None)
    if buffer is None:
        return None, None, ({"message": "Invalid image"}, 400)

    return buffer, points, None


def rectify_func(payload: dict) -> Tuple[dict, int]:
    buffer, points, error = _prepare(payload)
    if error is not None:
        return error

    interpolation = "nearest" if payload.get("interpolation") == "nearest" else "bilinear"
    rectified = rectify(buffer, normalize_corner_order(points), interpolation=interpolation)
    if rectified is None:
        print("[RECTIFY] Degenerate selection, nothing to rectify")
        return {"message": "Selected area is degenerate, please reselect the document corners"}, 422

    print(f"[RECTIFY] {buffer.width}x{buffer.height} -> {rectified.width}x{rectified.height}")
    return {"image": encode_png_data_url(rectified), "width": rectified.width, "height": rectified.height}, 200


def crop_selected_area_func(payload: dict) -> Tuple[dict, int]:
    buffer, points, error = _prepare(payload)
    if error is not None:
        return error

    cropped = crop_selected_area(buffer, [(p["x"], p["y"]) for p in points])
    if cropped is None:
        return {"message": "Selected area could not be cropped"}, 422

    return {"image": encode_png_data_url(cropped), "width": cropped.width, "height": cropped.height}, 200
