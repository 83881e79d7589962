"""Visualization mode selector."""

from enum import Enum


class VisualMode(str, Enum):
    SACRED = "sacred"
    COSMIC = "cosmic"
    FLOW = "flow"
    PULSE = "pulse"
    TRIPPY = "trippy"
    OCEAN = "ocean"
    NEURAL = "neural"
    GALAXY = "galaxy"

    @classmethod
    def parse(cls, value: "VisualMode | str") -> "VisualMode":
        """Accept a VisualMode or its name; raise ValueError otherwise."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown visual mode {value!r} (choose from: {choices})") from None
