import numpy as np
import pytest

from benchmark import BenchmarkMetrics, SyntheticScene, set_diff_threshold
from gaze_controller import DEFAULT_GAZE_CONFIG, GazeController
from motion_detector import Blob


def test_scene_frames():
    scene = SyntheticScene(width=320, height=240, square=40, noise=0)
    frame, (cx, cy) = scene.next_frame()
    assert frame.shape == (240, 320, 3)
    assert frame.dtype == np.uint8
    assert tuple(frame[int(cy), int(cx)]) == (30, 200, 240)
    assert tuple(frame[0, 0]) == (128, 128, 128)


def test_paused_scene_holds_still():
    scene = SyntheticScene(noise=0)
    scene.next_frame()
    scene.paused = True
    a, ca = scene.next_frame()
    b, cb = scene.next_frame()
    assert ca == cb
    assert (a == b).all()


def test_metrics_lock_rate_uses_largest_blob():
    m = BenchmarkMetrics(window=10, tolerance=10)
    near = Blob(x_sum=105.0 * 4, y_sum=100.0 * 4, count=4)
    far = Blob(x_sum=300.0, y_sum=300.0, count=1)
    m.update([near, far], (100, 100), 0.002, scanning=False)
    m.update([far], (100, 100), 0.004, scanning=True)
    m.update([], (100, 100), 0.003, scanning=True, moving=False)

    assert m.lock_rate == pytest.approx(50.0)
    assert m.frame_time == pytest.approx(3.0)
    assert m.scan_share == pytest.approx(200 / 3)


def test_metrics_window_is_bounded():
    m = BenchmarkMetrics(window=3)
    for _ in range(10):
        m.update([], (0, 0), 0.001, scanning=False)
    assert len(m.time_history) == 3
    assert len(m.lock_history) == 3


def test_diff_threshold_keys_keep_controller_in_sync():
    config = {**DEFAULT_GAZE_CONFIG}
    controller = GazeController(160, 120, config)

    set_diff_threshold(controller, config, 60)
    assert config["diff_threshold"] == 60
    assert controller.config["diff_threshold"] == 60
    assert controller.detector.config["diff_threshold"] == 60

    assert set_diff_threshold(controller, config, -10) == 1
    assert controller.config["diff_threshold"] == controller.detector.config["diff_threshold"] == 1


def test_raised_threshold_reaches_the_detector():
    config = {**DEFAULT_GAZE_CONFIG}
    controller = GazeController(160, 120, config)
    set_diff_threshold(controller, config, 300)

    controller.update(np.zeros((120, 160, 3), dtype=np.uint8))
    state = controller.update(np.full((120, 160, 3), 100, dtype=np.uint8))
    assert not state.motion_detected
    assert controller.last_blobs == []
