from abc import ABC, abstractmethod

import numpy as np


class VideoSurface:
    """Display-side binding of a camera stream: the latest frame and its size.

    Only the owning camera adapter writes to it; everything else reads.
    """

    def __init__(self):
        self._frame: np.ndarray | None = None
        self.bound = False

    def bind(self):
        self.bound = True

    def unbind(self):
        self.bound = False
        self._frame = None

    def update(self, frame: np.ndarray):
        if self.bound:
            self._frame = frame

    @property
    def frame(self) -> np.ndarray | None:
        return self._frame

    @property
    def width(self) -> int:
        return 0 if self._frame is None else int(self._frame.shape[1])

    @property
    def height(self) -> int:
        return 0 if self._frame is None else int(self._frame.shape[0])


class CameraAdapter(ABC):
    def __init__(self, status_store):
        self.status = status_store
        self.surface = VideoSurface()

    @property
    def active(self) -> bool:
        return self.surface.bound

    @abstractmethod
    async def start(self) -> None:
        """Open the device and bind it to the surface. Raises DeviceAccessError."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Release the device and unbind the surface. Safe to call twice."""
        ...
