"""Vendor error codes reported inside Anomaly Detector failure messages."""

from enum import Enum


class VendorErrorCode(Enum):
    """Known Anomaly Detector error tokens.

    The service reports these only as text inside the response body, so
    detection is a substring match over the diagnostic message. No
    structured error field is assumed.
    """

    TRAIN_FAILED = "TrainFailed"
    MODEL_NOT_EXIST = "ModelNotExist"
    INVALID_TIMESTAMP_FORMAT = "InvalidTimestampFormat"
    NOT_ENOUGH_DATA = "Not enough data."

    @classmethod
    def from_message(cls, message: str | None) -> "VendorErrorCode | None":
        """Return the first known code contained in ``message``."""
        if not message:
            return None
        for code in cls:
            if code.value in message:
                return code
        return None

    def matches(self, error: BaseException | str) -> bool:
        """Check whether an error (or its message) carries this code."""
        return self.value in str(error)
