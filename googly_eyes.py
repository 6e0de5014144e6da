"""
Googly Eyes — a field of googly eyes that stare at the mouse cursor,
plus three link buttons and two hover-to-expand info panels.

Usage:
    python googly_eyes.py                 # Sprites from ./assets
    python googly_eyes.py --assets DIR
    python googly_eyes.py --seed 42       # Reproducible eye layout

Controls:
  mouse    = Eyes follow the cursor, hover to grow buttons / open panels
  click    = Open the hovered button's link in the browser
  q / ESC  = Quit
"""
import os
import sys
import webbrowser
from dataclasses import dataclass

import cv2
import numpy as np

from geometry import clamp_to_radius, point_in_rect, rect_from_center
from render import (blank_canvas, draw_eye_white, draw_label_box, draw_pupil,
                    draw_sprite, load_sprite)

WINDOW_NAME = "Googly Eyes"
DEFAULT_CANVAS = (1600, 900)

# ─── Configuration ──────────────────────────────────────────────
DEFAULT_GOOGLY_CONFIG = {
    # Eye field
    "num_eyes": 250,
    "max_distance": 20,          # Max eyeball travel from the eye center (px)
    "eye_scale": 0.3,

    # Buttons (stacked vertically around canvas center)
    "button_scale": 0.19,
    "button_spacing": 200,
    "hover_scale_step": 0.1,     # Added to a button's scale while hovered

    # Info panels (fixed positions)
    "info_pos": (350, 550),
    "info_scale": 0.2,
    "add_pos": (1300, 300),
    "add_scale": 0.2,
    "panel_hover_factor": 3,     # Hover image size relative to the base image
}

# Sprite sizes assumed when a file is missing
FALLBACK_SIZES = {
    "eye": (100, 100),
    "button": (800, 300),
    "panel": (500, 500),
}

BUTTONS = [
    # name, sprite, vertical offset in spacing units, url
    ("Trump", "trump-button2.png", -1, "https://editor.p5js.org/katzu/full/OpuITk5qy"),
    ("OJ", "OJ-button2.png", 0, "https://editor.p5js.org/katzu/full/Kde_Jdh67"),
    ("Maggie", "maggie-button2.png", 1, "https://editor.p5js.org/katzu/full/TNDR3arfe"),
]

PANELS = [
    # name, base sprite, hover sprite, config prefix
    ("info", "INFO1.png", "info2.png", "info"),
    ("add", "add.png", "add-eyes.png", "add"),
]


# ─── Data Classes ───────────────────────────────────────────────
@dataclass
class GooglyEye:
    static_x: float
    static_y: float
    move_x: float = 0.0
    move_y: float = 0.0

    def look_at(self, mx, my, max_distance):
        """Point the eyeball toward (mx, my), never leaving the eye."""
        px, py = clamp_to_radius(mx, my, self.static_x, self.static_y, max_distance)
        self.move_x = float(px - self.static_x)
        self.move_y = float(py - self.static_y)

    @property
    def eyeball_pos(self):
        return (self.static_x + self.move_x, self.static_y + self.move_y)


@dataclass
class Button:
    name: str
    url: str
    offset: int                  # In units of button_spacing from canvas center
    size: tuple                  # Unscaled sprite (w, h)
    scale: float
    hovered: bool = False

    def center(self, canvas_w, canvas_h, spacing):
        return (canvas_w / 2, canvas_h / 2 + self.offset * spacing)

    def rect(self, canvas_w, canvas_h, spacing):
        cx, cy = self.center(canvas_w, canvas_h, spacing)
        return rect_from_center(cx, cy, self.size[0] * self.scale, self.size[1] * self.scale)


@dataclass
class InfoPanel:
    name: str
    pos: tuple
    size: tuple                  # Unscaled sprite (w, h)
    scale: float
    hover_factor: float
    hovered: bool = False

    @property
    def draw_size(self):
        return (self.size[0] * self.scale, self.size[1] * self.scale)

    @property
    def rect(self):
        w, h = self.draw_size
        return rect_from_center(self.pos[0], self.pos[1], w, h)


# ─── Field ──────────────────────────────────────────────────────
class GooglyField:
    """
    All layout and hover state for the googly-eyes page, independent of drawing.
    `sizes` overrides unscaled sprite sizes by key ("eye", "button", "panel",
    or a button / panel name).
    """

    def __init__(self, canvas_w, canvas_h, config=None, sizes=None, rng=None):
        self.config = {**DEFAULT_GOOGLY_CONFIG, **(config or {})}
        cfg = self.config
        if cfg["max_distance"] < 0:
            raise ValueError(f"max_distance must be >= 0, got {cfg['max_distance']}")
        sizes = {**FALLBACK_SIZES, **(sizes or {})}
        self.canvas_w = canvas_w
        self.canvas_h = canvas_h
        self.eye_size = sizes["eye"]

        rng = rng if rng is not None else np.random.default_rng()
        xs = rng.uniform(0, canvas_w, cfg["num_eyes"])
        ys = rng.uniform(0, canvas_h, cfg["num_eyes"])
        self.eyes = [GooglyEye(float(x), float(y)) for x, y in zip(xs, ys)]

        self.buttons = [
            Button(name, url, offset, sizes.get(name, sizes["button"]), cfg["button_scale"])
            for name, _, offset, url in BUTTONS
        ]
        self.panels = [
            InfoPanel(name, cfg[f"{prefix}_pos"], sizes.get(name, sizes["panel"]),
                      cfg[f"{prefix}_scale"], cfg["panel_hover_factor"])
            for name, _, _, prefix in PANELS
        ]

    def resize(self, canvas_w, canvas_h):
        # Eyes and panels keep their positions; buttons follow the center
        self.canvas_w = canvas_w
        self.canvas_h = canvas_h

    def button_rect(self, button):
        return button.rect(self.canvas_w, self.canvas_h, self.config["button_spacing"])

    def button_scale(self, button):
        if button.hovered:
            return button.scale + self.config["hover_scale_step"]
        return button.scale

    def update(self, mx, my):
        """Aim every eye at the cursor and refresh hover flags."""
        max_d = self.config["max_distance"]
        for eye in self.eyes:
            eye.look_at(mx, my, max_d)
        for button in self.buttons:
            button.hovered = point_in_rect(mx, my, self.button_rect(button))
        for panel in self.panels:
            panel.hovered = point_in_rect(mx, my, panel.rect)

    def click(self, mx, my):
        """URL of the button under (mx, my), or None."""
        for button in self.buttons:
            if point_in_rect(mx, my, self.button_rect(button)):
                return button.url
        return None


# ─── Sketch ─────────────────────────────────────────────────────
class GooglyEyesSketch:
    """Loads sprites, feeds mouse events to the field and draws it."""

    def __init__(self, canvas_w, canvas_h, assets_dir="assets", config=None, rng=None,
                 open_url=webbrowser.open_new_tab):
        self.sprites = {
            "eye": load_sprite(os.path.join(assets_dir, "googly-eye.png")),
            "eyeball": load_sprite(os.path.join(assets_dir, "googly-eyeball.png")),
        }
        for name, sprite, _, _ in BUTTONS:
            self.sprites[name] = load_sprite(os.path.join(assets_dir, sprite))
        for name, base, hover, _ in PANELS:
            self.sprites[name] = load_sprite(os.path.join(assets_dir, base))
            self.sprites[name + "_hover"] = load_sprite(os.path.join(assets_dir, hover))

        # Real sprite sizes drive hit-testing when they're available
        sizes = {}
        for key in ["eye"] + [b[0] for b in BUTTONS] + [p[0] for p in PANELS]:
            img = self.sprites[key]
            if img is not None:
                sizes[key] = (img.shape[1], img.shape[0])

        self.field = GooglyField(canvas_w, canvas_h, config, sizes, rng)
        self.open_url = open_url
        self.mouse = (0, 0)

    @property
    def canvas_size(self):
        return (self.field.canvas_w, self.field.canvas_h)

    def resize(self, canvas_w, canvas_h):
        self.field.resize(canvas_w, canvas_h)

    def on_mouse(self, event, x, y, flags, param):
        """cv2.setMouseCallback handler."""
        self.mouse = (x, y)
        if event == cv2.EVENT_LBUTTONDOWN:
            url = self.field.click(x, y)
            if url:
                print(f"Opening {url}")
                self.open_url(url)

    def step(self, frame=None):
        """One tick. `frame` is accepted so both sketches share a signature."""
        self.field.update(*self.mouse)
        return self.draw()

    # ═══════════════════════════════════════════════════════════
    # Drawing
    # ═══════════════════════════════════════════════════════════
    def draw(self):
        fld = self.field
        cfg = fld.config
        canvas = blank_canvas(fld.canvas_w, fld.canvas_h)

        eye_img, ball_img = self.sprites["eye"], self.sprites["eyeball"]
        scale = cfg["eye_scale"]
        eye_r = fld.eye_size[0] * scale / 2
        for eye in fld.eyes:
            if eye_img is not None:
                draw_sprite(canvas, eye_img, eye.static_x, eye.static_y, scale)
            else:
                draw_eye_white(canvas, eye.static_x, eye.static_y, eye_r)
            bx, by = eye.eyeball_pos
            if ball_img is not None:
                draw_sprite(canvas, ball_img, bx, by, scale)
            else:
                draw_pupil(canvas, bx, by, eye_r * 0.45)

        spacing = cfg["button_spacing"]
        for button in fld.buttons:
            cx, cy = button.center(fld.canvas_w, fld.canvas_h, spacing)
            s = fld.button_scale(button)
            img = self.sprites[button.name]
            if img is not None:
                draw_sprite(canvas, img, cx, cy, s)
            else:
                w, h = button.size[0] * s, button.size[1] * s
                draw_label_box(canvas, rect_from_center(cx, cy, w, h), button.name)

        for panel in fld.panels:
            img = self.sprites[panel.name]
            px, py = panel.pos
            if img is not None:
                draw_sprite(canvas, img, px, py, panel.scale)
            else:
                draw_label_box(canvas, panel.rect, panel.name.upper())

            if panel.hovered:
                hover = self.sprites[panel.name + "_hover"]
                if hover is not None:
                    draw_sprite(canvas, hover, px, py, panel.scale * panel.hover_factor)
                else:
                    w, h = panel.draw_size
                    big = rect_from_center(px, py, w * panel.hover_factor, h * panel.hover_factor)
                    draw_label_box(canvas, big, panel.name.upper(), fill=(255, 240, 200), scale=1.2)

        return canvas


def main():
    assets_dir = "assets"
    if '--assets' in sys.argv:
        assets_dir = sys.argv[sys.argv.index('--assets') + 1]
    rng = None
    if '--seed' in sys.argv:
        rng = np.random.default_rng(int(sys.argv[sys.argv.index('--seed') + 1]))

    cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
    cv2.resizeWindow(WINDOW_NAME, *DEFAULT_CANVAS)
    _, _, w, h = cv2.getWindowImageRect(WINDOW_NAME)
    if w <= 0 or h <= 0:
        w, h = DEFAULT_CANVAS

    sketch = GooglyEyesSketch(w, h, assets_dir, rng=rng)
    cv2.setMouseCallback(WINDOW_NAME, sketch.on_mouse)

    print("Googly Eyes started. Press 'q' or ESC to quit.")
    while True:
        _, _, w, h = cv2.getWindowImageRect(WINDOW_NAME)
        if w > 0 and h > 0 and (w, h) != sketch.canvas_size:
            sketch.resize(w, h)

        cv2.imshow(WINDOW_NAME, sketch.step())
        key = cv2.waitKey(1) & 0xFF
        if key == ord('q') or key == 27:
            print("Quitting...")
            break

    cv2.destroyAllWindows()
    cv2.waitKey(1)


if __name__ == "__main__":
    main()
