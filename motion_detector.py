"""
Motion Detector — frame differencing + blob aggregation.

Pipeline:
  1. Frame differencing on a coarse sampling grid (one pixel per cell)
  2. Blob aggregation (8-connected flood fill over the motion grid)

Pure NumPy, no OpenCV needed here. Frames are (H, W, C) arrays, C = 3 or 4.
"""
from collections import deque
from dataclasses import dataclass

import numpy as np

# ─── Configuration ──────────────────────────────────────────────
DEFAULT_MOTION_CONFIG = {
    "step": 8,                # Pixels between samples (smaller = more precise, slower)
    "diff_threshold": 45,     # Min RGB distance for a sample to count as motion
}


# ─── Data Classes ───────────────────────────────────────────────
@dataclass
class Blob:
    """One 8-connected group of motion cells, summarized in pixel space."""
    x_sum: float = 0.0
    y_sum: float = 0.0
    count: int = 0

    @property
    def centroid(self):
        return (self.x_sum / self.count, self.y_sum / self.count)


# ═══════════════════════════════════════════════════════════
# Stage 1: Frame Differencing
# ═══════════════════════════════════════════════════════════
def grid_shape(frame_h, frame_w, step):
    """(rows, cols) of the motion grid for a frame of the given size."""
    return (-(-frame_h // step), -(-frame_w // step))


def compute_motion_grid(current, previous, step, threshold):
    """
    Sample one pixel per cell (the cell's top-left pixel) and mark the cell
    when the RGB distance to the previous frame exceeds `threshold`.

    Returns a fresh boolean grid indexed [gy, gx]. If there is no previous
    frame, or it has a different shape, nothing is marked.
    """
    h, w = current.shape[:2]
    grid = np.zeros(grid_shape(h, w, step), dtype=bool)
    if previous is None or previous.shape != current.shape:
        return grid

    # Alpha is ignored; int32 so uint8 subtraction can't wrap
    cur = current[::step, ::step, :3].astype(np.int32)
    prev = previous[::step, ::step, :3].astype(np.int32)
    dist = np.sqrt(((cur - prev) ** 2).sum(axis=2))

    sampled = dist > threshold
    grid[:sampled.shape[0], :sampled.shape[1]] = sampled
    return grid


# ═══════════════════════════════════════════════════════════
# Stage 2: Blob Aggregation
# ═══════════════════════════════════════════════════════════
NEIGHBOURS = [(dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)]


def find_blobs(grid, step):
    """
    Group motion cells into 8-connected blobs with a breadth-first flood fill.

    Start cells are taken in row-major order, so the returned list is in
    discovery order. Each cell adds its pixel-space center
    (g * step + step / 2) to the blob sums.
    """
    rows, cols = grid.shape
    visited = np.zeros_like(grid, dtype=bool)
    half = step / 2
    blobs = []

    for gy, gx in np.argwhere(grid):
        if visited[gy, gx]:
            continue

        blob = Blob()
        queue = deque([(gx, gy)])
        visited[gy, gx] = True

        while queue:
            x, y = queue.popleft()
            blob.x_sum += x * step + half
            blob.y_sum += y * step + half
            blob.count += 1

            for dx, dy in NEIGHBOURS:
                nx, ny = x + dx, y + dy
                if 0 <= nx < cols and 0 <= ny < rows and grid[ny, nx] and not visited[ny, nx]:
                    visited[ny, nx] = True
                    queue.append((nx, ny))

        blobs.append(blob)

    return blobs


# ─── Stateful wrapper ───────────────────────────────────────────
class MotionDetector:
    """Holds the previous frame and runs stages 1 + 2 once per frame."""

    def __init__(self, config=None):
        self.config = {**DEFAULT_MOTION_CONFIG, **(config or {})}
        # Grid cells are whole pixels; 0.5 would truncate to a zero stride
        self.step = int(self.config["step"])
        if self.step < 1:
            raise ValueError(f"step must be >= 1, got {self.config['step']}")
        if self.config["diff_threshold"] < 0:
            raise ValueError(f"diff_threshold must be >= 0, got {self.config['diff_threshold']}")
        self.config["step"] = self.step
        self.prev_frame = None
        self.grid = None

    def reset(self):
        """Forget the previous frame (e.g. after a resize)."""
        self.prev_frame = None
        self.grid = None

    def detect(self, frame):
        """
        Difference `frame` against the previous one and return its blobs.
        The frame is copied into the previous-frame buffer afterwards.
        """
        self.grid = compute_motion_grid(frame, self.prev_frame, self.step,
                                        self.config["diff_threshold"])
        blobs = find_blobs(self.grid, self.step)
        self.prev_frame = frame.copy()
        return blobs
