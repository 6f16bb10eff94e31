ERR_BUSY = "BUSY"
ERR_CAPTURE_UNAVAILABLE = "CAPTURE_UNAVAILABLE"
ERR_WORKER_INIT = "WORKER_INIT_FAILED"
ERR_RECOGNITION = "RECOGNITION_FAILED"
ERR_DEVICE_ACCESS = "DEVICE_ACCESS"
ERR_CANCELLED = "CANCELLED"
ERR_UNKNOWN = "UNKNOWN"

ALERT_CAPTURE_FAILED = "Failed to capture image. Please try again."
ALERT_OCR_FAILED = "An error occurred during OCR processing."


class ScanError(Exception):
    """Base for failures caught at the scan boundary.

    `code` goes back to the caller, `alert` is what the user is shown.
    The exception message itself is operator detail and only gets logged.
    """
    code = ERR_UNKNOWN
    alert = ALERT_OCR_FAILED


class DeviceAccessError(ScanError):
    code = ERR_DEVICE_ACCESS
    alert = "Could not access the camera."


class CaptureUnavailable(ScanError):
    code = ERR_CAPTURE_UNAVAILABLE
    alert = ALERT_CAPTURE_FAILED


class WorkerInitializationError(ScanError):
    code = ERR_WORKER_INIT


class RecognitionError(ScanError):
    code = ERR_RECOGNITION
