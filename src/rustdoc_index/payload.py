"""
Index payloads: the mapping a generated rustdoc index file hands to its sink.

A payload maps a category key to an ordered list of opaque values:

    sidebar-items.js   {"fn": [["load", "Create a new image from a Reader"], ...], ...}
    trait.FromStr.js   {"num_bigint": ["impl <a ...>FromStr</a> for <a ...>BigUint</a>", ...], ...}

Payloads are built once at load time and never mutated afterwards.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Literal, Union

from rustdoc_index.shared import validate_payload_mapping


PayloadKind = Literal["sidebar", "implementors"]
PAYLOAD_KINDS: tuple[str, ...] = ("sidebar", "implementors")

# A bare string (impl HTML, item name) or a (name, description) pair
IndexValue = Union[str, tuple[str, ...]]


class PayloadError(ValueError):
    """Raised when a payload mapping is malformed."""


@dataclass(frozen=True)
class IndexEntry:
    """One key of a payload and its values, in generator order."""
    key: str
    values: tuple[IndexValue, ...] = ()

    def to_list(self) -> list:
        return [list(v) if isinstance(v, tuple) else v for v in self.values]


@dataclass(frozen=True, eq=False)
class IndexPayload:
    """
    Immutable key -> values mapping produced by a single generated file.

    Equality is structural: kind, subject and the key -> values mapping must
    match; key order and the source location are ignored.
    """
    kind: PayloadKind
    entries: tuple[IndexEntry, ...] = ()
    subject: str = ""  # Module path (sidebar) or trait path (implementors)
    source: str = ""  # File path or URL the payload was read from
    _by_key: dict = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if self.kind not in PAYLOAD_KINDS:
            raise PayloadError(
                f"Unknown payload kind: '{self.kind}'. Expected one of {', '.join(PAYLOAD_KINDS)}"
            )
        by_key = {}
        for entry in self.entries:
            if entry.key in by_key:
                raise PayloadError(f"Duplicate key in payload: '{entry.key}'")
            by_key[entry.key] = entry
        object.__setattr__(self, "_by_key", by_key)

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, list] | Iterable[tuple[str, list]],
        kind: PayloadKind,
        subject: str = "",
        source: str = "",
    ) -> "IndexPayload":
        """
        Build a payload from a plain mapping (as decoded from JSON).

        Accepts a dict or an iterable of (key, values) pairs; the latter is
        checked for duplicate keys. The mapping is validated against the
        payload schema before conversion.
        """
        if isinstance(mapping, Mapping):
            pairs = list(mapping.items())
        else:
            pairs = [tuple(pair) for pair in mapping]

        seen: set[str] = set()
        for key, _ in pairs:
            if key in seen:
                raise PayloadError(f"Duplicate key in payload: '{key}'")
            seen.add(key)

        errors = validate_payload_mapping(dict(pairs))
        if errors:
            location = f" ({source})" if source else ""
            raise PayloadError(f"Invalid payload{location}: " + "; ".join(errors))

        entries = tuple(
            IndexEntry(
                key=key,
                values=tuple(tuple(v) if isinstance(v, list) else v for v in values),
            )
            for key, values in pairs
        )
        return cls(kind=kind, entries=entries, subject=subject, source=source)

    def to_mapping(self) -> dict[str, list]:
        """Convert back to a plain JSON-compatible mapping."""
        return {entry.key: entry.to_list() for entry in self.entries}

    def keys(self) -> list[str]:
        return [entry.key for entry in self.entries]

    def get(self, key: str, default=None) -> tuple[IndexValue, ...] | None:
        entry = self._by_key.get(key)
        return entry.values if entry is not None else default

    def total_values(self) -> int:
        """Number of values across all keys."""
        return sum(len(entry.values) for entry in self.entries)

    def __getitem__(self, key: str) -> tuple[IndexValue, ...]:
        return self._by_key[key].values

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IndexPayload):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.subject == other.subject
            and {k: e.values for k, e in self._by_key.items()}
            == {k: e.values for k, e in other._by_key.items()}
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.subject, frozenset(
            (entry.key, entry.values) for entry in self.entries
        )))
