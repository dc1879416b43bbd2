from dataclasses import dataclass


@dataclass(frozen=True)
class WorkFingerprint:
    """Normalized identity of a musical work, used as a lookup key."""

    normalized_title: str
    normalized_composer: str
    hash: str
