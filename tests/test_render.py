import cv2
import numpy as np

from render import blank_canvas, draw_sprite, load_sprite, sprite_cover_scale


def test_blank_canvas_shape_and_color():
    canvas = blank_canvas(30, 20, (1, 2, 3))
    assert canvas.shape == (20, 30, 3)
    assert (canvas == (1, 2, 3)).all()


def test_opaque_sprite_is_drawn_centered():
    canvas = blank_canvas(20, 20, (0, 0, 0))
    sprite = np.full((4, 6, 3), 200, dtype=np.uint8)
    draw_sprite(canvas, sprite, 10, 10)
    assert (canvas[8:12, 7:13] == 200).all()
    assert canvas[7, 10].sum() == 0
    assert canvas[10, 6].sum() == 0


def test_transparent_pixels_leave_canvas_alone():
    canvas = blank_canvas(10, 10, (50, 60, 70))
    sprite = np.zeros((4, 4, 4), dtype=np.uint8)
    sprite[:, :, :3] = 255
    sprite[:2, :, 3] = 255             # top half opaque, bottom half clear
    draw_sprite(canvas, sprite, 5, 5)
    assert (canvas[3:5, 3:7] == 255).all()
    assert (canvas[5:7, 3:7] == (50, 60, 70)).all()


def test_sprite_is_clipped_at_canvas_edges():
    canvas = blank_canvas(10, 10, (0, 0, 0))
    sprite = np.full((6, 6, 3), 255, dtype=np.uint8)
    draw_sprite(canvas, sprite, 0, 0)
    assert (canvas[0:3, 0:3] == 255).all()
    assert canvas[3:, :].sum() == 0

    # Entirely off-canvas is a no-op
    draw_sprite(canvas, sprite, -50, -50)


def test_sprite_scaling():
    canvas = blank_canvas(40, 40, (0, 0, 0))
    sprite = np.full((10, 10, 3), 255, dtype=np.uint8)
    draw_sprite(canvas, sprite, 20, 20, scale=2.0)
    assert (canvas[10:30, 10:30] == 255).all()
    assert canvas[9, 20].sum() == 0


def test_cover_scale_for_sprite():
    canvas = blank_canvas(200, 100)
    sprite = np.zeros((50, 50, 3), dtype=np.uint8)
    assert sprite_cover_scale(canvas, sprite) == 4.0


def test_load_missing_sprite_returns_none(tmp_path):
    assert load_sprite(str(tmp_path / "nope.png")) is None


def test_load_sprite_keeps_alpha(tmp_path):
    img = np.zeros((5, 7, 4), dtype=np.uint8)
    img[:, :, 3] = 128
    path = str(tmp_path / "sprite.png")
    cv2.imwrite(path, img)
    loaded = load_sprite(path)
    assert loaded.shape == (5, 7, 4)
    assert (loaded[:, :, 3] == 128).all()
