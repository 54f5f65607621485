"""
Viewer helpers that run without a display: the camera and config loading.
"""
import json
import logging

import pytest

from viewer import MAX_ZOOM, MIN_ZOOM, Camera, load_viewer_config
from watershed.loader import ConfigError


class TestCamera:

    def test_visible_cells_follow_zoom(self):
        camera = Camera(grid_size=64, zoom=2)
        assert camera.visible_cells(128, 128) == (64, 64)
        camera.zoom_in()
        camera.zoom_in()
        assert camera.visible_cells(128, 128) == (32, 32)

    def test_zoomed_out_view_covers_the_whole_window(self):
        camera = Camera(grid_size=16, zoom=4)
        camera.zoom_out()
        camera.zoom_out()
        cols, rows = camera.visible_cells(64, 48)
        assert cols * camera.zoom >= 64
        assert rows * camera.zoom >= 48
        assert cols > camera.grid_size

    def test_partial_cells_at_the_edge_are_drawn(self):
        camera = Camera(grid_size=64, zoom=3)
        assert camera.visible_cells(100, 10) == (34, 4)

    def test_zoom_is_clamped(self):
        camera = Camera(grid_size=16, zoom=100)
        assert camera.zoom == MAX_ZOOM
        for _ in range(MAX_ZOOM + 2):
            camera.zoom_out()
        assert camera.zoom == MIN_ZOOM

    def test_screen_to_grid_wraps_with_pan(self):
        camera = Camera(grid_size=16, zoom=2)
        camera.pan(-3, 5)
        assert (camera.x, camera.y) == (13, 5)
        assert camera.screen_to_grid(8, 0) == (1, 5)


class TestViewerConfig:

    def test_splits_parameters_and_display(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "simulation_parameters": {"grid_size": 32, "seed": 3},
            "display": {"zoom": 4, "fps": 30},
        }))
        params, display = load_viewer_config(str(path), logging.getLogger("test"))
        assert params.grid_size == 32
        assert params.seed == 3
        assert display == {"zoom": 4, "fps": 30}

    def test_missing_display_section_is_empty(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"simulation_parameters": {"grid_size": 16}}))
        _, display = load_viewer_config(str(path), logging.getLogger("test"))
        assert display == {}

    def test_invalid_parameters_raise_config_error(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"simulation_parameters": {"grid_size": 10}}))
        with pytest.raises(ConfigError):
            load_viewer_config(str(path), logging.getLogger("test"))

    def test_display_must_be_an_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"display": [1, 2]}))
        with pytest.raises(ConfigError):
            load_viewer_config(str(path), logging.getLogger("test"))
