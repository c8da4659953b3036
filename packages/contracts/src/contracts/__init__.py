from .error_report_v1 import ClientErrorV1, ErrorReportV1, GeoPointV1
from .mapped_stack_v1 import FrameSeparatorV1, MappedFrameV1, validate_mapped_stack

__all__ = [
    "ClientErrorV1",
    "ErrorReportV1",
    "GeoPointV1",
    "FrameSeparatorV1",
    "MappedFrameV1",
    "validate_mapped_stack",
]
