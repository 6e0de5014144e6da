"""
Motion-Tracked Gaze Controller
Turns a webcam stream into a smoothed point for a pair of eyeballs to look at.

Pipeline (one call to GazeController.update per frame):
  1. Frame differencing   (motion_detector.compute_motion_grid)
  2. Blob aggregation     (motion_detector.find_blobs)
  3. Target selection     largest blob → canvas point, mirrored, clamped
  4. Motion state         tracking / idle / scanning
  5. Smoothing            EMA toward the target (fast) or center/scan path (slow)
"""
from dataclasses import dataclass

import numpy as np

from geometry import clamp_to_radius, ema_pt
from motion_detector import DEFAULT_MOTION_CONFIG, MotionDetector

# ─── Configuration ──────────────────────────────────────────────
DEFAULT_GAZE_CONFIG = {
    **DEFAULT_MOTION_CONFIG,

    # Target selection
    "area_threshold": 1000,      # Min blob area (count * step²) to count as real motion
    "max_radius": 70,            # Max distance of the eyeballs from canvas center (px)

    # Smoothing (0.0 = frozen, 1.0 = raw)
    "alpha_fast": 0.05,          # While tracking motion
    "alpha_slow": 0.01,          # While idle / scanning

    # Idle scanning
    "idle_threshold": 60,        # Idle frames before scanning starts (~1s at 60fps)
    "scan_amplitude": 15,        # Max scan distance from center (px)
    "scan_speed": 0.005,         # Angular speed per frame
    "scan_ratio": 0.7,           # Vertical/horizontal frequency ratio
}


# ─── Data Classes ───────────────────────────────────────────────
@dataclass
class GazeState:
    """What the renderer needs each frame."""
    x: float
    y: float
    motion_detected: bool = False
    scanning: bool = False


# ═══════════════════════════════════════════════════════════
# Stage 3: Target Selection
# ═══════════════════════════════════════════════════════════
def select_target(blobs, canvas_size, frame_size, config):
    """
    Pick the largest blob and turn its centroid into a canvas point.

    canvas_size and frame_size are (width, height). Returns
    (target_x, target_y, significant); with no blobs the target is the
    canvas center and significant is False.
    """
    canvas_w, canvas_h = canvas_size
    cx, cy = canvas_w / 2, canvas_h / 2
    if not blobs:
        return (cx, cy, False)

    # max() keeps the first blob on ties, i.e. the first one found
    largest = max(blobs, key=lambda b: b.count)
    bx, by = largest.centroid

    frame_w, frame_h = frame_size
    bx *= canvas_w / frame_w
    by *= canvas_h / frame_h

    # Front camera is mirrored relative to the viewer
    bx = canvas_w - bx

    tx, ty = clamp_to_radius(bx, by, cx, cy, config["max_radius"])

    step = config["step"]
    significant = largest.count * step * step > config["area_threshold"]
    return (float(tx), float(ty), significant)


def scan_waypoint(t, center, config):
    """Lissajous-style idle path around `center` at frame `t`."""
    cx, cy = center
    w = config["scan_speed"]
    a = config["scan_amplitude"]
    return (cx + np.sin(t * w) * a,
            cy + np.cos(t * w * config["scan_ratio"]) * a)


# ═══════════════════════════════════════════════════════════
# Stage 4: Motion State
# ═══════════════════════════════════════════════════════════
class MotionStateTracker:
    """Tracking while motion is significant; idle otherwise, scanning after a while."""

    TRACKING = "tracking"
    IDLE = "idle"
    SCANNING = "scanning"

    def __init__(self, idle_threshold=60):
        self.idle_threshold = idle_threshold
        self.reset()

    def reset(self):
        self.motion_detected = False
        self.idle_frames = 0

    def update(self, significant):
        if significant:
            self.motion_detected = True
            self.idle_frames = 0
        else:
            self.motion_detected = False
            self.idle_frames += 1
        return self.state

    @property
    def scanning(self):
        return not self.motion_detected and self.idle_frames > self.idle_threshold

    @property
    def state(self):
        if self.motion_detected:
            return self.TRACKING
        return self.SCANNING if self.scanning else self.IDLE


# ═══════════════════════════════════════════════════════════
# Stage 5: Smoothing
# ═══════════════════════════════════════════════════════════
class Smoother:
    """EMA-smoothed 2D position."""

    def __init__(self, x=0.0, y=0.0):
        self.x = float(x)
        self.y = float(y)

    def reset(self, x, y):
        self.x = float(x)
        self.y = float(y)

    def step(self, target_x, target_y, alpha):
        self.x, self.y = ema_pt((self.x, self.y), (target_x, target_y), alpha)
        return (self.x, self.y)

    @property
    def pos(self):
        return (self.x, self.y)


# ─── Main Controller ────────────────────────────────────────────
class GazeController:
    """
    Session state for the motion eyes: previous frame, motion grid,
    idle counter and the smoothed eyeball position.
    """

    def __init__(self, canvas_w, canvas_h, config=None):
        self.config = {**DEFAULT_GAZE_CONFIG, **(config or {})}
        cfg = self.config
        for key in ("alpha_fast", "alpha_slow"):
            if not 0.0 <= cfg[key] <= 1.0:
                raise ValueError(f"{key} must be in [0, 1], got {cfg[key]}")
        if cfg["max_radius"] < 0:
            raise ValueError(f"max_radius must be >= 0, got {cfg['max_radius']}")

        self.detector = MotionDetector(cfg)
        # Area significance must use the same integer stride as the grid
        cfg["step"] = self.detector.step
        self.tracker = MotionStateTracker(cfg["idle_threshold"])
        self.smoother = Smoother()
        self.frame_count = 0
        self.last_blobs = []
        self.last_target = None
        self.resize(canvas_w, canvas_h)

    @property
    def center(self):
        return (self.canvas_w / 2, self.canvas_h / 2)

    @property
    def last_grid(self):
        return self.detector.grid

    def resize(self, canvas_w, canvas_h):
        """Start over for a new canvas size: no previous frame, eyes centered."""
        self.canvas_w = canvas_w
        self.canvas_h = canvas_h
        self.detector.reset()
        self.tracker.reset()
        self.smoother.reset(*self.center)
        self.last_blobs = []
        self.last_target = None

    def update(self, frame):
        """
        Run one frame through the pipeline and return the new GazeState.
        A None frame (no camera / failed grab) counts as no motion.
        """
        cfg = self.config
        self.frame_count += 1

        if frame is None:
            blobs = []
            frame_size = (self.canvas_w, self.canvas_h)
        else:
            blobs = self.detector.detect(frame)
            frame_size = (frame.shape[1], frame.shape[0])
        self.last_blobs = blobs

        tx, ty, significant = select_target(blobs, (self.canvas_w, self.canvas_h),
                                            frame_size, cfg)
        self.last_target = (tx, ty)

        state = self.tracker.update(significant)
        if state == MotionStateTracker.TRACKING:
            self.smoother.step(tx, ty, cfg["alpha_fast"])
        elif state == MotionStateTracker.SCANNING:
            sx, sy = scan_waypoint(self.frame_count, self.center, cfg)
            self.smoother.step(sx, sy, cfg["alpha_slow"])
        else:
            # Idle: drift back toward center until scanning kicks in
            self.smoother.step(*self.center, cfg["alpha_slow"])

        return GazeState(self.smoother.x, self.smoother.y,
                         motion_detected=self.tracker.motion_detected,
                         scanning=self.tracker.scanning)
