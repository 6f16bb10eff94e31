"""
OpenCV webcam capture adapter.
CAMERA_INDEX env var (default 0) selects the webcam device.

A pump task keeps the surface fed with the newest frame while the camera is
started. Every blocking OpenCV call goes through asyncio.to_thread.
"""
import asyncio
import os
import cv2
from ocr_scanner.adapters.camera.base import CameraAdapter
from ocr_scanner.orchestrator.errors import DeviceAccessError

# pause after a failed read before trying again
_READ_RETRY_S = 0.1


class CV2Camera(CameraAdapter):
    def __init__(self, status_store, index: int | None = None):
        super().__init__(status_store)
        self._index = index if index is not None else int(os.getenv("CAMERA_INDEX", "0"))
        self._cap = None
        self._pump: asyncio.Task | None = None

    async def start(self) -> None:
        if self._cap is not None and self._cap.isOpened():
            return
        cap = await asyncio.to_thread(cv2.VideoCapture, self._index)
        if not cap.isOpened():
            cap.release()
            self.status.log(f"cv2_camera: failed to open device {self._index}")
            raise DeviceAccessError(f"camera device {self._index} could not be opened")
        self._cap = cap
        self.surface.bind()
        self._pump = asyncio.create_task(self._read_loop())
        self.status.log(f"cv2_camera: streaming from device {self._index}")

    async def _read_loop(self):
        failures = 0
        while True:
            ret, frame = await asyncio.to_thread(self._cap.read)
            if not ret or frame is None:
                failures += 1
                if failures == 1:
                    self.status.log("cv2_camera: frame capture failed")
                await asyncio.sleep(_READ_RETRY_S)
                continue
            failures = 0
            self.surface.update(frame)

    async def stop(self) -> None:
        if self._pump is not None:
            self._pump.cancel()
            try:
                await self._pump
            except asyncio.CancelledError:
                pass
            self._pump = None
        self.surface.unbind()
        if self._cap is not None:
            await asyncio.to_thread(self._cap.release)
            self._cap = None
            self.status.log(f"cv2_camera: released device {self._index}")
