"""Trip completion checks and flight offer synthesis."""

from .completion import field_present, is_complete, missing_fields
from .flight_options import candidate_carriers, synthesize_flights

__all__ = [
    "candidate_carriers",
    "field_present",
    "is_complete",
    "missing_fields",
    "synthesize_flights",
]
