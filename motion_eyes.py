"""
Motion Eyes — a pair of eyeballs that follow whatever moves in front of the webcam.

Usage:
    python motion_eyes.py                  # Fullscreen-ish window, sprites from ./assets
    python motion_eyes.py --debug          # Overlay motion cells + raw target
    python motion_eyes.py --assets DIR     # Load eyesback.png / eyeballs.png / eyes.png from DIR

Controls:
  q / ESC  = Quit
  d        = Toggle debug overlay
"""
import os
import sys

import cv2

from gaze_controller import GazeController
from render import (blank_canvas, draw_eye_white, draw_pupil, draw_sprite,
                    load_sprite, sprite_cover_scale)

WINDOW_NAME = "Motion Eyes"
DEFAULT_CANVAS = (1280, 720)
SPRITE_FILES = {
    "back": "eyesback.png",
    "eyeballs": "eyeballs.png",
    "frame": "eyes.png",
}


def open_camera(indices=(0, 1), width=None, height=None):
    """
    Try each camera index in turn. Returns an opened VideoCapture, or None
    if nothing could be opened (the eyes then just idle and scan).
    """
    for idx in indices:
        print(f"Opening camera (index {idx})...")
        cap = cv2.VideoCapture(idx)
        if cap.isOpened():
            if width and height:
                cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
                cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
            return cap
        cap.release()
        print(f"Error: Could not open camera {idx}.")
    print("Warning: No camera found. Running without motion input.")
    return None


def window_size(name, fallback=DEFAULT_CANVAS):
    """Current drawable size of a window as (w, h)."""
    _, _, w, h = cv2.getWindowImageRect(name)
    if w <= 0 or h <= 0:
        return fallback
    return (w, h)


class CameraFeed:
    """Latest-frame reader: a failed grab hands back the last good frame."""

    def __init__(self, cap):
        self.cap = cap
        self.last_frame = None
        self.failures = 0

    def read(self):
        if self.cap is None:
            return None
        ok, frame = self.cap.read()
        if not ok or frame is None:
            self.failures += 1
            if self.failures == 1:
                print("Warning: Failed to grab frame, reusing last one.")
            return self.last_frame
        self.failures = 0
        self.last_frame = frame
        return frame

    def release(self):
        if self.cap is not None:
            self.cap.release()


class MotionEyesSketch:
    """Owns the gaze controller and draws the eyes for each tick."""

    def __init__(self, canvas_w, canvas_h, assets_dir="assets", config=None):
        self.controller = GazeController(canvas_w, canvas_h, config)
        self.sprites = {key: load_sprite(os.path.join(assets_dir, name))
                        for key, name in SPRITE_FILES.items()}
        self.debug = False
        self.last_state = None

    @property
    def canvas_size(self):
        return (self.controller.canvas_w, self.controller.canvas_h)

    def resize(self, canvas_w, canvas_h):
        if (canvas_w, canvas_h) != self.canvas_size:
            self.controller.resize(canvas_w, canvas_h)

    def step(self, frame):
        """Advance one tick with the latest camera frame and return the canvas."""
        state = self.controller.update(frame)
        self.last_state = state
        canvas = self.draw(state)
        if self.debug:
            self._draw_debug(canvas, frame)
        return canvas

    # ═══════════════════════════════════════════════════════════
    # Drawing
    # ═══════════════════════════════════════════════════════════
    def draw(self, state):
        w, h = self.canvas_size
        cx, cy = w / 2, h / 2
        canvas = blank_canvas(w, h)

        back, balls, overlay = (self.sprites["back"], self.sprites["eyeballs"],
                                self.sprites["frame"])
        # Geometry used when sprites are missing
        eye_r = min(w, h) * 0.18
        gap = eye_r * 1.25

        if back is not None:
            draw_sprite(canvas, back, cx, cy, sprite_cover_scale(canvas, back))
        else:
            canvas[:] = (180, 200, 225)
            draw_eye_white(canvas, cx - gap, cy, eye_r, outline=0)
            draw_eye_white(canvas, cx + gap, cy, eye_r, outline=0)

        if balls is not None:
            draw_sprite(canvas, balls, state.x, state.y, sprite_cover_scale(canvas, balls))
        else:
            # Eyeballs move as a pair, offset from the smoothed point
            dx, dy = state.x - cx, state.y - cy
            for ex in (cx - gap, cx + gap):
                draw_pupil(canvas, ex + dx, cy + dy, eye_r * 0.4)

        if overlay is not None:
            draw_sprite(canvas, overlay, cx, cy, sprite_cover_scale(canvas, overlay))
        else:
            for ex in (cx - gap, cx + gap):
                cv2.circle(canvas, (int(ex), int(cy)), int(eye_r), (0, 0, 0), 4, cv2.LINE_AA)

        return canvas

    def _draw_debug(self, canvas, frame):
        ctrl = self.controller
        grid = ctrl.last_grid
        w, h = self.canvas_size
        if grid is not None and frame is not None:
            fh, fw = frame.shape[:2]
            sx, sy = w / fw, h / fh
            step = ctrl.detector.step
            half = step / 2
            for gy, gx in zip(*grid.nonzero()):
                # Same mirroring as the target
                px = int(w - (gx * step + half) * sx)
                py = int((gy * step + half) * sy)
                cv2.circle(canvas, (px, py), 2, (0, 0, 255), -1)

        if ctrl.last_target is not None:
            tx, ty = ctrl.last_target
            cv2.drawMarker(canvas, (int(tx), int(ty)), (255, 0, 255), cv2.MARKER_CROSS, 16, 2)
        cx, cy = ctrl.center
        cv2.circle(canvas, (int(cx), int(cy)), int(ctrl.config["max_radius"]),
                   (200, 200, 200), 1, cv2.LINE_AA)

        state = self.last_state
        mode = ctrl.tracker.state.upper()
        info = (f"{mode} | idle: {ctrl.tracker.idle_frames} | blobs: {len(ctrl.last_blobs)}"
                f" | eyes: ({state.x:.0f}, {state.y:.0f})")
        cv2.putText(canvas, info, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 160, 0), 2, cv2.LINE_AA)


def main():
    debug = '--debug' in sys.argv
    assets_dir = "assets"
    if '--assets' in sys.argv:
        assets_dir = sys.argv[sys.argv.index('--assets') + 1]

    cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
    cv2.resizeWindow(WINDOW_NAME, *DEFAULT_CANVAS)
    canvas_w, canvas_h = window_size(WINDOW_NAME)

    feed = CameraFeed(open_camera(width=canvas_w, height=canvas_h))
    sketch = MotionEyesSketch(canvas_w, canvas_h, assets_dir)
    sketch.debug = debug

    print("Motion Eyes started.")
    print("  Press 'd' to toggle debug overlay")
    print("  Press 'q' or ESC to quit")

    while True:
        sketch.resize(*window_size(WINDOW_NAME, sketch.canvas_size))
        canvas = sketch.step(feed.read())
        cv2.imshow(WINDOW_NAME, canvas)

        key = cv2.waitKey(1) & 0xFF
        if key == ord('q') or key == 27:
            print("Quitting...")
            break
        elif key == ord('d'):
            sketch.debug = not sketch.debug
            print(f"Debug: {'ON' if sketch.debug else 'OFF'}")

    feed.release()
    cv2.destroyAllWindows()
    cv2.waitKey(1)


if __name__ == "__main__":
    main()
