import cv2
import numpy as np
import pytest

from motion_detector import (Blob, MotionDetector, compute_motion_grid, find_blobs,
                             grid_shape)

STEP = 8


def blank(h=120, w=160, c=3):
    return np.zeros((h, w, c), dtype=np.uint8)


def grid_from_cells(cells, shape=(15, 20)):
    grid = np.zeros(shape, dtype=bool)
    for gx, gy in cells:
        grid[gy, gx] = True
    return grid


# ─── Frame differencing ─────────────────────────────────────────
def test_grid_shape_160x120():
    assert grid_shape(120, 160, STEP) == (15, 20)


def test_grid_shape_rounds_up():
    assert grid_shape(121, 161, STEP) == (16, 21)
    grid = compute_motion_grid(blank(121, 161), blank(121, 161), STEP, 45)
    assert grid.shape == (16, 21)


def test_no_previous_frame_marks_nothing():
    grid = compute_motion_grid(blank() + 200, None, STEP, 45)
    assert grid.shape == (15, 20)
    assert not grid.any()


def test_shape_mismatch_marks_nothing():
    grid = compute_motion_grid(blank() + 200, blank(60, 80), STEP, 45)
    assert grid.shape == (15, 20)
    assert not grid.any()


def test_sampled_pixel_change_marks_its_cell():
    prev, cur = blank(), blank()
    cur[8, 16] = (255, 255, 255)       # top-left pixel of cell (gx=2, gy=1)
    grid = compute_motion_grid(cur, prev, STEP, 45)
    assert grid[1, 2]
    assert grid.sum() == 1


def test_change_between_samples_is_missed():
    prev, cur = blank(), blank()
    cur[9:16, 17:24] = 255             # inside cell (2, 1) but not its sampled pixel
    assert not compute_motion_grid(cur, prev, STEP, 45).any()


def test_threshold_is_strict_euclidean_distance():
    prev = blank()
    small = blank() + 20               # sqrt(3) * 20 ~ 34.6
    large = blank() + 30               # sqrt(3) * 30 ~ 52.0
    assert not compute_motion_grid(small, prev, STEP, 45).any()
    assert compute_motion_grid(large, prev, STEP, 45).all()


def test_no_uint8_wraparound():
    prev = blank() + 250
    cur = blank() + 240                # 240 - 250 must not wrap to 246
    assert not compute_motion_grid(cur, prev, STEP, 45).any()


def test_alpha_channel_is_ignored():
    prev, cur = blank(c=4), blank(c=4)
    cur[:, :, 3] = 255
    assert not compute_motion_grid(cur, prev, STEP, 45).any()


# ─── Blob aggregation ───────────────────────────────────────────
def test_empty_grid_has_no_blobs():
    assert find_blobs(np.zeros((15, 20), dtype=bool), STEP) == []


def test_isolated_cell_is_singleton_at_cell_center():
    blobs = find_blobs(grid_from_cells([(5, 3)]), STEP)
    assert len(blobs) == 1
    assert blobs[0].count == 1
    assert blobs[0].centroid == (5 * STEP + STEP / 2, 3 * STEP + STEP / 2)


def test_diagonal_neighbours_merge():
    blobs = find_blobs(grid_from_cells([(0, 0), (1, 1)]), STEP)
    assert len(blobs) == 1
    assert blobs[0].count == 2


def test_separated_cells_stay_apart():
    blobs = find_blobs(grid_from_cells([(0, 0), (2, 0)]), STEP)
    assert [b.count for b in blobs] == [1, 1]


def test_3x3_block_at_origin():
    cells = [(x, y) for y in range(3) for x in range(3)]
    blobs = find_blobs(grid_from_cells(cells), STEP)
    assert len(blobs) == 1
    assert blobs[0].count == 9
    assert blobs[0].centroid == pytest.approx((12.0, 12.0))


def test_blobs_come_out_in_row_major_discovery_order():
    # Blob starting lower but further left is found second
    cells = [(10, 0), (11, 0), (0, 5)]
    blobs = find_blobs(grid_from_cells(cells), STEP)
    assert [b.count for b in blobs] == [2, 1]
    assert blobs[0].centroid[1] < blobs[1].centroid[1]


def test_blob_with_concave_shape_is_one_blob():
    # U shape: the arms only join at the bottom row
    cells = [(0, 0), (0, 1), (0, 2), (1, 2), (2, 2), (2, 1), (2, 0)]
    blobs = find_blobs(grid_from_cells(cells), STEP)
    assert len(blobs) == 1
    assert blobs[0].count == 7


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_blobs_partition_marked_cells(seed):
    rng = np.random.default_rng(seed)
    grid = rng.random((15, 20)) < 0.3
    blobs = find_blobs(grid, STEP)

    assert sum(b.count for b in blobs) == int(grid.sum())
    n_labels, _ = cv2.connectedComponents(grid.astype(np.uint8), connectivity=8)
    assert len(blobs) == n_labels - 1


def test_blob_centroid():
    assert Blob(x_sum=30.0, y_sum=12.0, count=3).centroid == (10.0, 4.0)


# ─── MotionDetector ─────────────────────────────────────────────
def test_first_frame_has_no_motion():
    det = MotionDetector()
    assert det.detect(blank() + 255) == []
    assert det.grid.shape == (15, 20)


def test_detector_end_to_end_3x3_block():
    det = MotionDetector()
    det.detect(blank())
    cur = blank()
    cur[0:24, 0:24] = 255              # covers samples of cells (0..2, 0..2)
    blobs = det.detect(cur)
    assert len(blobs) == 1
    assert blobs[0].count == 9
    assert blobs[0].centroid == pytest.approx((12.0, 12.0))


def test_detector_keeps_its_own_copy_of_previous_frame():
    det = MotionDetector()
    frame = blank()
    det.detect(frame)
    frame[:] = 255                     # caller reuses its buffer
    assert len(det.detect(frame)) == 1


def test_detector_reset_forgets_previous_frame():
    det = MotionDetector()
    det.detect(blank())
    det.reset()
    assert det.prev_frame is None
    assert det.detect(blank() + 255) == []


def test_detector_survives_frame_size_change():
    det = MotionDetector()
    det.detect(blank())
    assert det.detect(blank(60, 80) + 255) == []
    assert det.grid.shape == (8, 10)


def test_invalid_step_rejected():
    with pytest.raises(ValueError):
        MotionDetector({"step": 0})


@pytest.mark.parametrize("step", [0.5, -3])
def test_step_below_one_pixel_rejected(step):
    with pytest.raises(ValueError):
        MotionDetector({"step": step})


def test_fractional_step_truncates_to_whole_pixels():
    det = MotionDetector({"step": 8.9})
    assert det.step == 8
    assert det.config["step"] == 8
    det.detect(blank())
    assert det.detect(blank() + 255)[0].count == 15 * 20
