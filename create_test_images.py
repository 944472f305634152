import numpy as np
import cv2
import os

import image_codec

BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def make_ring_image(width=32, height=24, inner=0.5, outer=0.9):
    """Black ring on white, sized relative to the shorter side."""
    if width > height:
        aspect = (width / height, 1.0)
    else:
        aspect = (1.0, height / width)

    xs = (np.arange(width) / width * 2.0 - 1.0) * aspect[0]
    ys = (np.arange(height) / height * 2.0 - 1.0) * aspect[1]
    radius = np.hypot(xs[np.newaxis, :], ys[:, np.newaxis])

    img = np.empty((height, width, 4), dtype=np.uint8)
    img[:] = WHITE
    img[(radius >= inner) & (radius <= outer)] = BLACK
    return img


def make_box_image(width=8, height=8, box=(2, 2, 5, 5), background=WHITE, foreground=BLACK):
    """Filled rectangle with inclusive corners `box` = (x1, y1, x2, y2)."""
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[:] = background
    cv2.rectangle(img, box[:2], box[2:], foreground, -1)
    return img


def make_staircase_image(width=12, height=12, step=3, background=WHITE, foreground=BLACK):
    """Diagonal staircase: each block of `step` rows is shifted one column right."""
    img = np.empty((height, width, 4), dtype=np.uint8)
    img[:] = background
    for y in range(height):
        img[y, : 1 + y // step] = foreground
    return img


def create_test_images(output_dir="test_images"):
    os.makedirs(output_dir, exist_ok=True)
    image_codec.save_image(make_ring_image(), os.path.join(output_dir, "ring.png"))
    image_codec.save_image(make_box_image(), os.path.join(output_dir, "box.png"))
    image_codec.save_image(make_staircase_image(), os.path.join(output_dir, "staircase.png"))


if __name__ == "__main__":
    create_test_images()
