import pytest

from ocr_scanner.services.status_store import StatusStore
from ocr_scanner.adapters.camera.mock_camera import MockCamera
from ocr_scanner.adapters.camera.frame_capturer import FrameCapturer
from ocr_scanner.adapters.ocr.mock_worker import MockWorkerFactory


@pytest.fixture
def status():
    return StatusStore()


@pytest.fixture
def camera(status):
    return MockCamera(status, width=640, height=480)


@pytest.fixture
def capturer(status):
    return FrameCapturer(status)


@pytest.fixture
def factory(status):
    return MockWorkerFactory(status, text="HELLO")
