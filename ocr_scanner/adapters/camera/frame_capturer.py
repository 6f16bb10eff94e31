"""
Freeze the current surface frame into an encoded still image.

capture() never raises for a missing frame: a camera that is still warming
up is a normal condition and shows up as None.
"""
import cv2
import numpy as np
from ocr_scanner.adapters.camera.base import VideoSurface
from ocr_scanner.orchestrator.contracts import CapturedFrame

PREVIEW_JPEG_QUALITY = 85


class FrameCapturer:
    def __init__(self, status_store):
        self.status = status_store

    def _snapshot(self, surface: VideoSurface) -> np.ndarray | None:
        frame = surface.frame
        if not surface.bound or frame is None:
            return None
        h, w = frame.shape[:2]
        if w == 0 or h == 0:
            return None
        # Off-screen buffer of the surface's intrinsic size; the live frame
        # may be replaced by the pump while we encode.
        buf = np.empty((h, w) + frame.shape[2:], dtype=frame.dtype)
        np.copyto(buf, frame)
        return buf

    def capture(self, surface: VideoSurface) -> CapturedFrame | None:
        buf = self._snapshot(surface)
        if buf is None:
            self.status.log("capture: no frame available yet")
            return None
        ok, encoded = cv2.imencode(".png", buf)
        if not ok:
            self.status.log("capture: png encode failed")
            return None
        h, w = buf.shape[:2]
        self.status.log(f"capture: {w}x{h} png ({len(encoded)} bytes)")
        return CapturedFrame(data=encoded.tobytes(), width=w, height=h)

    def encode_preview(self, surface: VideoSurface) -> bytes | None:
        """JPEG of the current frame for the live preview; no logging, called per frame."""
        buf = self._snapshot(surface)
        if buf is None:
            return None
        ok, encoded = cv2.imencode(".jpg", buf, [cv2.IMWRITE_JPEG_QUALITY, PREVIEW_JPEG_QUALITY])
        if not ok:
            return None
        return encoded.tobytes()
