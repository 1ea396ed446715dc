#!/usr/bin/env python3
"""
Detect the document region in a photo, save an overlay and the rectified crop

Usage:
    python3 detect_document.py <path_to_image>
    python3 detect_document.py <path_to_image> -o out/ --nearest
"""

import argparse
import sys
import cv2
from pathlib import Path

from constants import MAX_DIMENSION
from document_detection import PixelBuffer, DocumentCornerDetector, DocumentVisualizer, rectify
from document_detection.codec import downscale_to_max_dimension
from document_detection.corners import CORNER_NAMES


def parse_args():
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Document corner detection and rectification')

    parser.add_argument('image', help='Input image')
    parser.add_argument(
        '-o', '--output',
        help='Output directory (default: next to the input image)'
    )
    parser.add_argument(
        '--nearest',
        action='store_true',
        help='Use nearest-neighbor sampling instead of bilinear'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Print detection statistics'
    )

    return parser.parse_args()


def main():
    args = parse_args()
    image_path = Path(args.image)

    if not image_path.exists():
        print(f"Error: Image not found: {image_path}")
        sys.exit(1)

    print(f"Loading image: {image_path}")
    image = cv2.imread(str(image_path))

    if image is None:
        print(f"Error: Failed to load image: {image_path}")
        sys.exit(1)

    print(f"Image dimensions: {image.shape[1]}x{image.shape[0]} px")

    # Detection runs on a downscaled copy, corners are resolution independent
    small = downscale_to_max_dimension(image, MAX_DIMENSION)
    detector = DocumentCornerDetector(debug=args.debug)
    corners = detector.detect(PixelBuffer.from_bgr(small))

    print("Document corners:")
    for name, (x, y) in zip(CORNER_NAMES, corners):
        print(f"  {name:>12}: ({x:.3f}, {y:.3f})")

    output_dir = Path(args.output) if args.output else image_path.parent
    output_dir.mkdir(parents=True, exist_ok=True)

    source = PixelBuffer.from_bgr(image)
    overlay = DocumentVisualizer().visualize_with_info(source.to_bgr(), corners)
    overlay_path = output_dir / f"detected_{image_path.stem}.png"
    cv2.imwrite(str(overlay_path), overlay)
    print(f"✓ Overlay saved: {overlay_path}")

    rectified = rectify(source, corners, interpolation="nearest" if args.nearest else "bilinear")
    if rectified is None:
        print("✗ Selected area is degenerate, nothing to rectify")
        sys.exit(1)

    rectified_path = output_dir / f"rectified_{image_path.stem}.png"
    cv2.imwrite(str(rectified_path), rectified.to_bgra())
    print(f"✓ Rectified {rectified.width}x{rectified.height} px saved: {rectified_path}")


if __name__ == "__main__":
    main()
