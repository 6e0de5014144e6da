"""
Sprite loading and compositing on OpenCV canvases.

Sprites are BGR or BGRA images drawn centered on a point (like p5's
imageMode(CENTER)). Missing sprite files come back as None so callers can
draw a plain shape instead.
"""
import os

import cv2
import numpy as np

from geometry import cover_scale


def load_sprite(path):
    """Load an image with its alpha channel. Returns None if it can't be read."""
    if not os.path.isfile(path):
        print(f"Warning: sprite not found: {path}")
        return None
    img = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if img is None:
        print(f"Warning: could not decode sprite: {path}")
    return img


def blank_canvas(w, h, color=(255, 255, 255)):
    canvas = np.empty((h, w, 3), dtype=np.uint8)
    canvas[:] = color
    return canvas


def sprite_cover_scale(canvas, sprite):
    h, w = canvas.shape[:2]
    sh, sw = sprite.shape[:2]
    return cover_scale(w, h, sw, sh)


def draw_sprite(canvas, sprite, cx, cy, scale=1.0):
    """
    Alpha-blend `sprite` onto `canvas` centered at (cx, cy), scaled by `scale`.
    Parts that fall outside the canvas are clipped. Modifies canvas in place.
    """
    sh, sw = sprite.shape[:2]
    dw, dh = max(1, int(round(sw * scale))), max(1, int(round(sh * scale)))
    if (dw, dh) != (sw, sh):
        interp = cv2.INTER_AREA if scale < 1.0 else cv2.INTER_LINEAR
        sprite = cv2.resize(sprite, (dw, dh), interpolation=interp)

    ch, cw = canvas.shape[:2]
    x1 = int(round(cx - dw / 2))
    y1 = int(round(cy - dh / 2))
    x2, y2 = x1 + dw, y1 + dh

    # Clip to canvas
    cx1, cy1 = max(0, x1), max(0, y1)
    cx2, cy2 = min(cw, x2), min(ch, y2)
    if cx1 >= cx2 or cy1 >= cy2:
        return canvas

    src = sprite[cy1 - y1:cy2 - y1, cx1 - x1:cx2 - x1]
    dst = canvas[cy1:cy2, cx1:cx2]

    if src.ndim == 2:
        src = cv2.cvtColor(src, cv2.COLOR_GRAY2BGR)

    if src.shape[2] == 4:
        alpha = src[:, :, 3:4].astype(np.float32) / 255.0
        blended = src[:, :, :3].astype(np.float32) * alpha + dst.astype(np.float32) * (1.0 - alpha)
        dst[:] = blended.astype(np.uint8)
    else:
        dst[:] = src[:, :, :3]
    return canvas


# ─── Procedural fallbacks ───────────────────────────────────────
def draw_eye_white(canvas, cx, cy, radius, outline=2):
    c = (int(cx), int(cy))
    cv2.circle(canvas, c, int(radius), (255, 255, 255), -1, cv2.LINE_AA)
    if outline > 0:
        cv2.circle(canvas, c, int(radius), (0, 0, 0), outline, cv2.LINE_AA)


def draw_pupil(canvas, cx, cy, radius):
    c = (int(cx), int(cy))
    cv2.circle(canvas, c, int(radius), (20, 20, 20), -1, cv2.LINE_AA)
    # Highlight
    hr = max(1, int(radius * 0.3))
    cv2.circle(canvas, (c[0] - hr, c[1] - hr), hr, (240, 240, 240), -1, cv2.LINE_AA)


def draw_label_box(canvas, rect, text, fill=(230, 230, 230), scale=0.6):
    """Filled rectangle with centered text; used when a button sprite is missing."""
    x1, y1, x2, y2 = [int(v) for v in rect]
    cv2.rectangle(canvas, (x1, y1), (x2, y2), fill, -1)
    cv2.rectangle(canvas, (x1, y1), (x2, y2), (0, 0, 0), 2)
    (tw, th), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, scale, 2)
    tx = (x1 + x2 - tw) // 2
    ty = (y1 + y2 + th) // 2
    cv2.putText(canvas, text, (tx, ty), cv2.FONT_HERSHEY_SIMPLEX, scale, (0, 0, 0), 2, cv2.LINE_AA)
