"""
Googly Eyes — Main entry point.

Modes:
  - Motion mode (default): webcam-driven eyeballs follow the largest moving blob
  - Googly mode (press 't'): field of googly eyes following the mouse

Controls:
  q / ESC  = Quit
  t        = Toggle between Motion and Googly mode
  d        = Toggle debug overlay (Motion mode)
"""
import sys

import cv2

from googly_eyes import GooglyEyesSketch
from motion_eyes import (DEFAULT_CANVAS, CameraFeed, MotionEyesSketch, open_camera,
                         window_size)

WINDOW_NAME = "Googly Eyes"


class Launcher:
    """Switches one window between the two sketches."""

    def __init__(self, motion, googly):
        self.motion = motion
        self.googly = googly
        self.use_motion = True

    @property
    def sketch(self):
        return self.motion if self.use_motion else self.googly

    def toggle(self):
        self.use_motion = not self.use_motion
        if self.use_motion:
            # The stored frame is stale after time in googly mode
            self.motion.controller.detector.reset()
        return self.use_motion

    def on_mouse(self, event, x, y, flags, param):
        """Mouse events only reach the googly sketch while it is on screen."""
        if not self.use_motion:
            self.googly.on_mouse(event, x, y, flags, param)

    def step(self, frame, size):
        sketch = self.sketch
        if size != sketch.canvas_size:
            sketch.resize(*size)
        return sketch.step(frame)


def main():
    assets_dir = "assets"
    if '--assets' in sys.argv:
        assets_dir = sys.argv[sys.argv.index('--assets') + 1]

    cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
    cv2.resizeWindow(WINDOW_NAME, *DEFAULT_CANVAS)
    canvas_w, canvas_h = window_size(WINDOW_NAME)

    print("Loading sketches...")
    launcher = Launcher(MotionEyesSketch(canvas_w, canvas_h, assets_dir),
                        GooglyEyesSketch(canvas_w, canvas_h, assets_dir))
    cv2.setMouseCallback(WINDOW_NAME, launcher.on_mouse)

    feed = CameraFeed(open_camera(width=canvas_w, height=canvas_h))

    print("Googly Eyes Started.")
    print("  Press 't' to toggle Googly mode (mouse-following eyes)")
    print("  Press 'd' to toggle debug overlay")
    print("  Press 'q' or ESC to quit")

    while True:
        size = window_size(WINDOW_NAME, launcher.sketch.canvas_size)

        # Read in both modes so the capture queue doesn't back up
        frame = feed.read()
        cv2.imshow(WINDOW_NAME, launcher.step(frame, size))

        key = cv2.waitKey(1) & 0xFF
        if key == ord('q') or key == 27:
            print("Quitting...")
            break
        elif key == ord('t'):
            use_motion = launcher.toggle()
            print(f"Mode: {'MOTION' if use_motion else 'GOOGLY'}")
        elif key == ord('d'):
            launcher.motion.debug = not launcher.motion.debug
            print(f"Debug: {'ON' if launcher.motion.debug else 'OFF'}")

    feed.release()
    cv2.destroyAllWindows()
    cv2.waitKey(1)  # Extra pump for macOS cleanup
    print("Camera released.")


if __name__ == "__main__":
    main()
