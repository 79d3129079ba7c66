from dataclasses import dataclass


@dataclass(frozen=True)
class Tag:
    """Free-form label compared by portal tag filters and beam portal lookup."""

    name: str
