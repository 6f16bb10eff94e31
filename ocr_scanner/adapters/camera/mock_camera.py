"""Mock camera: serves one fixed frame, for tests and machines without a webcam.

The frame comes from (in order) the `frame` argument, `image_path` /
MOCK_CAMERA_IMAGE, or a synthetic grey frame of `width` x `height`.
A 0-sized frame models a camera that is bound but not delivering yet.
"""
import os
from pathlib import Path

import cv2
import numpy as np

from ocr_scanner.adapters.camera.base import CameraAdapter
from ocr_scanner.orchestrator.errors import DeviceAccessError


def synthetic_frame(width: int, height: int, text: str = "HELLO") -> np.ndarray:
    frame = np.full((height, width, 3), 235, dtype=np.uint8)
    if width > 0 and height > 0:
        scale = max(width / 320.0, 0.5)
        cv2.putText(frame, text, (width // 8, height // 2), cv2.FONT_HERSHEY_SIMPLEX,
                    scale, (20, 20, 20), max(int(scale * 2), 1), cv2.LINE_AA)
    return frame


class MockCamera(CameraAdapter):
    def __init__(self, status_store, frame: np.ndarray | None = None,
                 image_path: str | None = None, width: int = 640, height: int = 480,
                 fail_start: bool = False):
        super().__init__(status_store)
        self.fail_start = fail_start
        self.start_calls = 0
        self.stop_calls = 0
        self._frame = frame if frame is not None else self._load(image_path, width, height)

    def _load(self, image_path, width, height) -> np.ndarray:
        path = image_path or os.getenv("MOCK_CAMERA_IMAGE")
        if path:
            img = cv2.imread(str(Path(path)))
            if img is not None:
                self.status.log(f"mock_camera: serving {Path(path).name}")
                return img
            self.status.log(f"mock_camera: could not read {path}, using synthetic frame")
        return synthetic_frame(width, height)

    def set_frame(self, frame: np.ndarray):
        """Swap the served frame (e.g. to simulate the camera warming up)."""
        self._frame = frame
        self.surface.update(frame)

    async def start(self) -> None:
        self.start_calls += 1
        if self.fail_start:
            self.status.log("mock_camera: permission denied")
            raise DeviceAccessError("mock camera refused access")
        self.surface.bind()
        self.surface.update(self._frame)
        self.status.log(f"mock_camera: streaming {self.surface.width}x{self.surface.height}")

    async def stop(self) -> None:
        self.stop_calls += 1
        if self.surface.bound:
            self.status.log("mock_camera: stopped")
        self.surface.unbind()
