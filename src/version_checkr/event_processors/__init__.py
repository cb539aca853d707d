from version_checkr.event_processors.base import ProcessingResult, ProcessingState
from version_checkr.event_processors.version_check import VersionCheckProcessor

__all__ = [
    "ProcessingResult",
    "ProcessingState",
    "VersionCheckProcessor",
]
