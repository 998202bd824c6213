from .patient import INT64_MAX, INT64_MIN, PatientPayload, PatientResponse, PrescriptionPayload

__all__ = [
    "INT64_MAX",
    "INT64_MIN",
    "PatientPayload",
    "PatientResponse",
    "PrescriptionPayload",
]
