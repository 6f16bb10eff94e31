"""
Camera adapters: start/stop lifecycle and surface binding
"""

import asyncio

import numpy as np
import pytest

from ocr_scanner.adapters.camera import cv2_camera
from ocr_scanner.adapters.camera.base import VideoSurface
from ocr_scanner.adapters.camera.cv2_camera import CV2Camera
from ocr_scanner.adapters.camera.mock_camera import MockCamera
from ocr_scanner.orchestrator.errors import DeviceAccessError


class FakeCapture:
    """Stands in for cv2.VideoCapture."""
    instances = []

    def __init__(self, index, opened=True):
        self.index = index
        self.opened = opened
        self.released = False
        self.reads = 0
        FakeCapture.instances.append(self)

    def isOpened(self):
        return self.opened and not self.released

    def read(self):
        self.reads += 1
        return True, np.full((480, 640, 3), self.reads % 255, dtype=np.uint8)

    def release(self):
        self.released = True


@pytest.fixture
def fake_cv2(monkeypatch):
    FakeCapture.instances = []
    monkeypatch.setattr(cv2_camera.cv2, "VideoCapture", FakeCapture)
    return FakeCapture


class TestVideoSurface:
    def test_unbound_surface_ignores_frames(self):
        surface = VideoSurface()
        surface.update(np.zeros((2, 2, 3), dtype=np.uint8))
        assert surface.frame is None
        assert (surface.width, surface.height) == (0, 0)

    def test_bound_surface_reports_size(self):
        surface = VideoSurface()
        surface.bind()
        surface.update(np.zeros((48, 64, 3), dtype=np.uint8))
        assert (surface.width, surface.height) == (64, 48)

    def test_unbind_drops_frame(self):
        surface = VideoSurface()
        surface.bind()
        surface.update(np.zeros((2, 2, 3), dtype=np.uint8))
        surface.unbind()
        assert surface.frame is None
        assert surface.bound == False


class TestCV2Camera:
    def test_open_failure_raises_and_leaves_surface_unbound(self, status, monkeypatch):
        monkeypatch.setattr(cv2_camera.cv2, "VideoCapture", lambda index: FakeCapture(index, opened=False))
        camera = CV2Camera(status, index=3)
        with pytest.raises(DeviceAccessError):
            asyncio.run(camera.start())
        assert camera.active == False
        assert camera.surface.frame is None
        assert FakeCapture.instances[-1].released
        assert any("failed to open device 3" in line for line in status.logs)

    def test_start_streams_and_stop_releases(self, status, fake_cv2):
        camera = CV2Camera(status, index=0)

        async def run():
            await camera.start()
            for _ in range(200):
                if camera.surface.frame is not None:
                    break
                await asyncio.sleep(0.01)
            seen = (camera.active, camera.surface.width, camera.surface.height)
            await camera.stop()
            return seen

        assert asyncio.run(run()) == (True, 640, 480)
        cap = fake_cv2.instances[0]
        assert cap.released
        assert camera.active == False
        assert camera.surface.frame is None

    def test_start_twice_opens_once(self, status, fake_cv2):
        camera = CV2Camera(status, index=0)

        async def run():
            await camera.start()
            await camera.start()
            await camera.stop()

        asyncio.run(run())
        assert len(fake_cv2.instances) == 1

    def test_stop_without_start(self, status, fake_cv2):
        camera = CV2Camera(status, index=0)
        asyncio.run(camera.stop())
        assert camera.active == False

    def test_index_from_env(self, status, monkeypatch):
        monkeypatch.setenv("CAMERA_INDEX", "2")
        assert CV2Camera(status)._index == 2


class TestMockCamera:
    def test_fail_start(self, status):
        camera = MockCamera(status, fail_start=True)
        with pytest.raises(DeviceAccessError):
            asyncio.run(camera.start())
        assert camera.active == False

    def test_serves_image_file(self, status, tmp_path):
        import cv2
        path = tmp_path / "page.png"
        cv2.imwrite(str(path), np.zeros((10, 20, 3), dtype=np.uint8))
        camera = MockCamera(status, image_path=str(path))
        asyncio.run(camera.start())
        assert (camera.surface.width, camera.surface.height) == (20, 10)

    def test_set_frame_replaces_zero_frame(self, status):
        camera = MockCamera(status, width=0, height=0)
        asyncio.run(camera.start())
        camera.set_frame(np.zeros((480, 640, 3), dtype=np.uint8))
        assert (camera.surface.width, camera.surface.height) == (640, 480)
