"""
Motion Eyes Benchmark
Drives the gaze pipeline with a synthetic scene (noisy background + one
moving square) where the true motion position is known.

Three metrics:
  1. Lock Rate: % of moving frames where the largest blob's centroid lands
     within `tolerance` px of the square's true center
  2. Frame Time: mean per-frame pipeline time (ms)
  3. Scan Share: % of frames spent in idle scanning

Controls:
  q / ESC  = Quit
  [/]      = Adjust step (sampling stride)
  ,/.      = Adjust diff_threshold
  p        = Pause / resume the square (lets the eyes fall back to scanning)

Run: python benchmark.py [--headless] [--frames N]
"""
import sys
import time

import cv2
import numpy as np

from gaze_controller import DEFAULT_GAZE_CONFIG, GazeController


class SyntheticScene:
    """Gray background with sensor-like noise and a square orbiting the center."""

    def __init__(self, width=640, height=480, square=80, orbit=0.3, speed=0.08,
                 noise=4.0, seed=0):
        self.width = width
        self.height = height
        self.square = square
        self.orbit = orbit * min(width, height)
        self.speed = speed
        self.noise = noise
        self.rng = np.random.default_rng(seed)
        self.t = 0
        self.paused = False

    def square_center(self):
        a = self.t * self.speed
        return (self.width / 2 + np.cos(a) * self.orbit,
                self.height / 2 + np.sin(a) * self.orbit)

    def next_frame(self):
        """Returns (frame, true_center_in_frame_pixels)."""
        if not self.paused:
            self.t += 1
        frame = np.full((self.height, self.width, 3), 128, dtype=np.float32)
        if self.noise > 0:
            frame += self.rng.normal(0, self.noise, frame.shape)

        cx, cy = self.square_center()
        half = self.square // 2
        x1, y1 = int(cx) - half, int(cy) - half
        frame[max(0, y1):y1 + self.square, max(0, x1):x1 + self.square] = (30, 200, 240)
        return np.clip(frame, 0, 255).astype(np.uint8), (cx, cy)


class BenchmarkMetrics:
    def __init__(self, window=120, tolerance=80):
        self.window = window
        self.tolerance = tolerance
        self.lock_history = []
        self.time_history = []
        self.scan_history = []

    def update(self, blobs, true_center, elapsed, scanning, moving=True):
        self.time_history.append(elapsed * 1000.0)
        self.scan_history.append(scanning)

        if moving:
            locked = False
            if blobs:
                bx, by = max(blobs, key=lambda b: b.count).centroid
                locked = np.hypot(bx - true_center[0], by - true_center[1]) <= self.tolerance
            self.lock_history.append(locked)

        for hist in (self.time_history, self.scan_history, self.lock_history):
            if len(hist) > self.window:
                del hist[0]

    @property
    def lock_rate(self):
        return sum(self.lock_history) / len(self.lock_history) * 100.0 if self.lock_history else 0.0

    @property
    def frame_time(self):
        return float(np.mean(self.time_history)) if self.time_history else 0.0

    @property
    def scan_share(self):
        return sum(self.scan_history) / len(self.scan_history) * 100.0 if self.scan_history else 0.0


def set_diff_threshold(controller, config, value):
    """Apply a new diff_threshold everywhere the running pipeline reads it."""
    value = max(1, value)
    config["diff_threshold"] = value
    controller.config["diff_threshold"] = value
    controller.detector.config["diff_threshold"] = value
    return value


def draw_preview(frame, controller, state, metrics, config):
    """Scene on the left, mirrored gaze canvas on the right."""
    h, w = frame.shape[:2]
    view = frame.copy()
    for blob in controller.last_blobs:
        bx, by = blob.centroid
        cv2.circle(view, (int(bx), int(by)), 3, (0, 0, 255), -1)

    gaze = np.full((h, w, 3), 255, dtype=np.uint8)
    cx, cy = controller.center
    cv2.circle(gaze, (int(cx), int(cy)), int(config["max_radius"]), (200, 200, 200), 1, cv2.LINE_AA)
    color = (0, 160, 0) if state.motion_detected else (0, 140, 255) if state.scanning else (120, 120, 120)
    cv2.circle(gaze, (int(state.x), int(state.y)), 12, color, -1, cv2.LINE_AA)

    output = np.hstack([view, gaze])
    lr = metrics.lock_rate
    lr_color = (0, 255, 0) if lr > 80 else (0, 255, 255) if lr > 50 else (0, 0, 255)
    cv2.putText(output, f"Lock Rate: {lr:.1f}%", (10, 25),
                cv2.FONT_HERSHEY_SIMPLEX, 0.7, lr_color, 2)
    cv2.putText(output, f"Frame: {metrics.frame_time:.2f} ms  Scan: {metrics.scan_share:.0f}%",
                (10, 55), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 0, 0), 2)
    cv2.putText(output, f"step={config['step']}  threshold={config['diff_threshold']}",
                (10, h - 15), cv2.FONT_HERSHEY_SIMPLEX, 0.55, (60, 60, 60), 1)
    return output


def main():
    print("=== Motion Eyes Benchmark ===")
    headless = '--headless' in sys.argv
    max_frames = 600 if headless else None
    if '--frames' in sys.argv:
        max_frames = int(sys.argv[sys.argv.index('--frames') + 1])

    config = {**DEFAULT_GAZE_CONFIG}
    scene = SyntheticScene()
    controller = GazeController(scene.width, scene.height, config)
    metrics = BenchmarkMetrics(window=120)

    if not headless:
        print("Benchmark running. Press 'q' to quit.")
        print("[/] = step | ,/. = diff_threshold | p = pause square")

    n = 0
    while max_frames is None or n < max_frames:
        frame, true_center = scene.next_frame()

        t0 = time.perf_counter()
        state = controller.update(frame)
        elapsed = time.perf_counter() - t0
        metrics.update(controller.last_blobs, true_center, elapsed, state.scanning,
                       moving=not scene.paused)
        n += 1

        if headless:
            continue

        cv2.imshow('Motion Eyes Benchmark', draw_preview(frame, controller, state, metrics, config))

        # --- Keyboard Controls ---
        key = cv2.waitKey(1) & 0xFF
        if key == ord('q') or key == 27:
            break
        elif key in (ord('['), ord(']')):
            config["step"] = max(1, config["step"] + (1 if key == ord(']') else -1))
            controller = GazeController(scene.width, scene.height, config)
            print(f"step: {config['step']}")
        elif key in (ord(','), ord('.')):
            delta = 5 if key == ord('.') else -5
            set_diff_threshold(controller, config, config["diff_threshold"] + delta)
            print(f"diff_threshold: {config['diff_threshold']}")
        elif key == ord('p'):
            scene.paused = not scene.paused
            print(f"Square: {'PAUSED' if scene.paused else 'MOVING'}")

    # Final report
    print(f"\n{'='*40}")
    print(f"  BENCHMARK RESULTS ({n} frames)")
    print(f"{'='*40}")
    print(f"  Lock Rate:  {metrics.lock_rate:.1f}%")
    print(f"  Frame Time: {metrics.frame_time:.2f} ms")
    print(f"  Scan Share: {metrics.scan_share:.1f}%")
    print(f"{'='*40}")
    print(f"  Final Config:")
    print(f"    step:           {config['step']}")
    print(f"    diff_threshold: {config['diff_threshold']}")
    print(f"{'='*40}")

    if not headless:
        cv2.destroyAllWindows()
        cv2.waitKey(1)


if __name__ == "__main__":
    main()
