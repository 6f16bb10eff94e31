"""
Frame capture: snapshot + PNG encode of the camera surface
"""

import asyncio

import cv2
import numpy as np

from ocr_scanner.adapters.camera.mock_camera import MockCamera, synthetic_frame


def _started(camera):
    asyncio.run(camera.start())
    return camera


class TestCapture:
    def test_capture_matches_surface_size(self, camera, capturer):
        _started(camera)
        frame = capturer.capture(camera.surface)
        assert frame is not None
        assert (frame.width, frame.height) == (640, 480)
        assert frame.media_type == "image/png"

    def test_capture_is_png_and_lossless(self, status, capturer):
        src = synthetic_frame(64, 32, text="A")
        camera = _started(MockCamera(status, frame=src))
        frame = capturer.capture(camera.surface)
        assert frame.data[:8] == b"\x89PNG\r\n\x1a\n"
        decoded = cv2.imdecode(np.frombuffer(frame.data, dtype=np.uint8), cv2.IMREAD_COLOR)
        assert decoded.shape == (32, 64, 3)
        assert np.array_equal(decoded, src)

    def test_capture_twice_gives_same_artifact(self, camera, capturer):
        _started(camera)
        first = capturer.capture(camera.surface)
        second = capturer.capture(camera.surface)
        assert first == second

    def test_capture_does_not_touch_stream(self, status, capturer):
        src = synthetic_frame(40, 30)
        before = src.copy()
        camera = _started(MockCamera(status, frame=src))
        capturer.capture(camera.surface)
        assert np.array_equal(camera.surface.frame, before)
        assert camera.surface.frame is src


class TestUnavailable:
    def test_zero_by_zero_surface(self, status, capturer):
        camera = _started(MockCamera(status, width=0, height=0))
        assert camera.surface.bound
        assert capturer.capture(camera.surface) is None

    def test_zero_height_surface(self, status, capturer):
        camera = _started(MockCamera(status, width=640, height=0))
        assert capturer.capture(camera.surface) is None

    def test_zero_width_surface(self, status, capturer):
        camera = _started(MockCamera(status, width=0, height=480))
        assert capturer.capture(camera.surface) is None

    def test_camera_never_started(self, camera, capturer):
        assert capturer.capture(camera.surface) is None

    def test_camera_stopped(self, camera, capturer):
        _started(camera)
        asyncio.run(camera.stop())
        assert capturer.capture(camera.surface) is None

    def test_unavailable_is_logged(self, status, camera, capturer):
        capturer.capture(camera.surface)
        assert any("no frame available" in line for line in status.logs)


class TestPreview:
    def test_preview_is_jpeg(self, camera, capturer):
        _started(camera)
        jpg = capturer.encode_preview(camera.surface)
        assert jpg[:2] == b"\xff\xd8"

    def test_preview_unavailable(self, camera, capturer):
        assert capturer.encode_preview(camera.surface) is None
