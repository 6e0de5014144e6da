"""
Small 2D helpers shared by both sketches.

Nothing here knows about frames or windows: just points, radii and boxes.
"""
import numpy as np


def ema(old, new, alpha):
    """Exponential moving average step: old + (new - old) * alpha."""
    return old + (new - old) * alpha


def ema_pt(old, new, alpha):
    return (ema(old[0], new[0], alpha), ema(old[1], new[1], alpha))


def clamp_to_radius(x, y, cx, cy, radius):
    """
    Keep (x, y) inside the disk of `radius` around (cx, cy).
    Points outside are projected onto the circle along the same angle.
    """
    dx, dy = x - cx, y - cy
    dist = np.hypot(dx, dy)
    if dist <= radius:
        return (x, y)
    angle = np.arctan2(dy, dx)
    return (cx + np.cos(angle) * radius, cy + np.sin(angle) * radius)


def rect_from_center(cx, cy, w, h):
    """Returns (left, top, right, bottom) for a box centered on (cx, cy)."""
    return (cx - w / 2, cy - h / 2, cx + w / 2, cy + h / 2)


def point_in_rect(px, py, rect):
    # Strict on all edges: the border itself is not "inside"
    left, top, right, bottom = rect
    return left < px < right and top < py < bottom


def cover_scale(canvas_w, canvas_h, img_w, img_h):
    """Scale that makes an image cover the whole canvas (may crop)."""
    return max(canvas_w / img_w, canvas_h / img_h)
