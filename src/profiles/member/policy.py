"""Protected-field policy for generic member updates.

The policy is data, not code: a versioned TOML document listing the
member fields that ``UpdateMemberField`` must refuse to write. The bundled
document can be swapped with the ``PROFILES_FIELD_POLICY`` environment
variable.
"""

import os
import tomllib
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_POLICY_PATH = Path(__file__).with_name("protected_fields.toml")

EXACT = "exact"
PREFIX = "prefix"


@dataclass(frozen=True)
class ProtectedFieldPolicy:
    version: int
    fields: frozenset
    match: str = EXACT

    def __post_init__(self):
        if self.match not in (EXACT, PREFIX):
            raise ValueError(f"Unknown match mode '{self.match}', expected '{EXACT}' or '{PREFIX}'")

    def protects(self, key: str) -> bool:
        if self.match == EXACT:
            return key in self.fields
        # A parent write would replace protected children wholesale.
        return any(key == entry or key.startswith(f"{entry}.") or entry.startswith(f"{key}.") for entry in self.fields)

    @classmethod
    def from_mapping(cls, data: dict) -> "ProtectedFieldPolicy":
        return cls(
            version=int(data["version"]),
            fields=frozenset(data.get("fields", [])),
            match=data.get("match", EXACT),
        )


def load_policy(path=None) -> ProtectedFieldPolicy:
    with open(path or DEFAULT_POLICY_PATH, "rb") as fp:
        return ProtectedFieldPolicy.from_mapping(tomllib.load(fp))


@lru_cache(maxsize=1)
def current_policy() -> ProtectedFieldPolicy:
    """The policy in force for this process."""
    return load_policy(os.getenv("PROFILES_FIELD_POLICY") or None)
