from pathlib import Path

from score_intake.exceptions import InvalidStorageKeyError


def resolve_key(root: Path, key: str) -> Path:
    """Resolve a storage key under root, refusing keys that escape it."""
    if not key or Path(key).is_absolute():
        raise InvalidStorageKeyError(f"Invalid storage key '{key}'")
    base = root.resolve()
    path = (base / key).resolve()
    if not path.is_relative_to(base):
        raise InvalidStorageKeyError(f"Storage key '{key}' escapes the storage root")
    return path
