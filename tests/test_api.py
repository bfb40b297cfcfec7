"""Tests for the texture API."""

import base64

import pytest
from fastapi.testclient import TestClient

from py_lagrange.api.main import app
from py_lagrange.core.geometry import offset_of


class TestTextureAPI:
    """Test the texture endpoints."""

    def setup_method(self):
        """Set up test client."""
        self.client = TestClient(app)

    def test_root_and_health(self):
        assert self.client.get("/").json()["status"] == "running"

        health = self.client.get("/health").json()
        assert health["status"] == "healthy"
        assert "biome" in health["slots"]

    def test_ramp_texture(self):
        response = self.client.post(
            "/textures/ramp",
            json={"width": 4, "steps": [{"factor": 0.0, "color": "#ff0000"}, {"factor": 1.0, "color": "#0000ff"}]},
        )
        assert response.status_code == 200

        data = response.json()
        assert (data["width"], data["height"]) == (4, 1)
        pixels = base64.b64decode(data["data"])
        assert len(pixels) == 16
        assert tuple(pixels[:4]) == (255, 0, 0, 255)

    def test_ramp_steps_are_sorted(self):
        response = self.client.post(
            "/textures/ramp",
            json={"width": 4, "steps": [{"factor": 1.0, "color": "#0000ff"}, {"factor": 0.0, "color": "#ff0000"}]},
        )
        pixels = base64.b64decode(response.json()["data"])
        assert tuple(pixels[:4]) == (255, 0, 0, 255)

    def test_biome_texture(self):
        response = self.client.post(
            "/textures/biomes",
            json={"size": 4, "regions": [{"color": "#00ff00"}]},
        )
        assert response.status_code == 200

        pixels = base64.b64decode(response.json()["data"])
        assert len(pixels) == 64

        # hard edge: the outer ring is transparent, the 2x2 interior opaque
        for y in range(4):
            for x in range(4):
                offset = offset_of(x, y, 4)
                alpha = 255 if x in (1, 2) and y in (1, 2) else 0
                assert tuple(pixels[offset:offset + 4]) == (0, 255, 0, alpha)

    def test_invalid_color(self):
        response = self.client.post(
            "/textures/biomes",
            json={"size": 4, "regions": [{"color": "green"}]},
        )
        assert response.status_code == 422

    def test_too_many_steps(self):
        steps = [{"factor": i / 20, "color": "#ffffff"} for i in range(21)]
        response = self.client.post("/textures/ramp", json={"width": 8, "steps": steps})
        assert response.status_code == 422

    def test_out_of_range_size(self):
        response = self.client.post("/textures/biomes", json={"size": 0, "regions": []})
        assert response.status_code == 422

    def test_slot_update_and_read(self):
        response = self.client.post(
            "/slots/clouds/ramp",
            json={"steps": [{"factor": 0.0, "color": "#ffffff"}, {"factor": 1.0, "color": "#ffffff"}]},
        )
        assert response.status_code == 200
        assert response.json()["applied"] is True

        slot = self.client.get("/slots/clouds").json()
        pixels = base64.b64decode(slot["data"])
        assert len(pixels) == slot["width"] * 4
        assert tuple(pixels[:4]) == (255, 255, 255, 255)

    def test_slot_biomes(self):
        response = self.client.post("/slots/biome/biomes", json={"regions": [{"color": "#0000ff"}]})
        assert response.status_code == 200
        assert response.json()["applied"] is True

    def test_slot_kind_mismatch(self):
        response = self.client.post("/slots/biome/ramp", json={"steps": []})
        assert response.status_code == 400

    def test_unknown_slot(self):
        assert self.client.get("/slots/atmosphere").status_code == 404
