"""
DocIndex: the consumer side of the registration sinks.

In a browser the sidebar and implementor payloads end up in the rustdoc UI
controller. DocIndex plays that role here: it installs itself on a pair of
sinks, keeps every payload it receives, and answers the questions the UI
answers (what is in this module, who implements this trait).
"""

from datetime import datetime, timezone
from pathlib import Path

from rustdoc_index.implementors import ImplementorRecord, implementors_of
from rustdoc_index.loader import iter_index_files, load_index_file
from rustdoc_index.payload import IndexPayload
from rustdoc_index.registry import DeferredRegistrationSink, new_sinks
from rustdoc_index.sidebar import SidebarItem, kind_sort_key, sidebar_items


SCHEMA_VERSION = "1.0"


class DocIndex:
    """Accumulates sidebar and implementor payloads and queries them."""

    def __init__(self):
        self.sidebars: dict[str, IndexPayload] = {}
        self.implementors: dict[str, IndexPayload] = {}
        self._records: dict[str, list[ImplementorRecord]] = {}

    # -------------------------------------------------------------------------
    # Consumer hooks
    # -------------------------------------------------------------------------

    def consume_sidebar(self, payload: IndexPayload) -> None:
        self.sidebars[payload.subject] = payload

    def consume_implementors(self, payload: IndexPayload) -> None:
        self.implementors[payload.subject] = payload
        self._records.pop(payload.subject, None)

    def consume(self, payload: IndexPayload) -> None:
        """Route a payload of either kind."""
        if payload.kind == "sidebar":
            self.consume_sidebar(payload)
        else:
            self.consume_implementors(payload)

    def attach(
        self,
        sidebar_sink: DeferredRegistrationSink,
        implementors_sink: DeferredRegistrationSink,
        replay: bool = True,
    ) -> None:
        """Install this index as the consumer of both sinks."""
        sidebar_sink.install(self.consume_sidebar, replay=replay)
        implementors_sink.install(self.consume_implementors, replay=replay)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def modules(self) -> list[str]:
        return sorted(self.sidebars)

    def traits(self) -> list[str]:
        return sorted(self.implementors)

    def crates(self) -> list[str]:
        """Crates seen as a sidebar root or as an implementor."""
        crates = {module.split("::")[0] for module in self.sidebars if module}
        for payload in self.implementors.values():
            crates.update(payload.keys())
        return sorted(crates)

    def items(self, kind: str | None = None) -> list[SidebarItem]:
        items = []
        for module in self.modules():
            for item in sidebar_items(self.sidebars[module]):
                if kind is None or item.kind == kind:
                    items.append(item)
        return items

    def find_items(self, query: str, kind: str | None = None) -> list[SidebarItem]:
        """
        Case-insensitive search over item names, then descriptions.

        Exact name matches come first, then name substrings, then
        description matches.
        """
        needle = query.lower()
        ranked = []
        for item in self.items(kind):
            name = item.name.lower()
            if name == needle:
                rank = 0
            elif needle in name:
                rank = 1
            elif needle in item.description.lower():
                rank = 2
            else:
                continue
            ranked.append((rank, kind_sort_key(item.kind), item.path, item))
        ranked.sort(key=lambda r: r[:3])
        return [r[3] for r in ranked]

    def records_for(self, trait_path: str) -> list[ImplementorRecord]:
        if trait_path not in self._records:
            self._records[trait_path] = implementors_of(self.implementors[trait_path])
        return self._records[trait_path]

    def resolve_trait(self, trait: str) -> list[str]:
        """Trait paths matching a full path or a bare trait name."""
        if trait in self.implementors:
            return [trait]
        return [
            path for path in self.traits()
            if path.rpartition("::")[2] == trait
        ]

    def implementors_of(self, trait: str) -> list[ImplementorRecord]:
        records = []
        for trait_path in self.resolve_trait(trait):
            records.extend(self.records_for(trait_path))
        return records

    def traits_implemented_by(self, type_name: str) -> list[ImplementorRecord]:
        """
        Impls whose implementing type matches a full path
        ("num_bigint::BigUint") or a bare name ("BigUint").
        """
        matches = []
        for trait_path in self.traits():
            for record in self.records_for(trait_path):
                if type_name == record.self_path:
                    matches.append(record)
                elif "::" not in type_name and record.self_path.rpartition("::")[2] == type_name:
                    matches.append(record)
        return matches

    def summary(self) -> dict[str, int]:
        return {
            "modules": len(self.sidebars),
            "items": sum(p.total_values() for p in self.sidebars.values()),
            "traits": len(self.implementors),
            "crates": len(self.crates()),
            "implementors": sum(p.total_values() for p in self.implementors.values()),
        }

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self, doc_root: str = "") -> dict:
        data = {
            "schema_version": SCHEMA_VERSION,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "summary": self.summary(),
            "modules": {
                module: {"source": p.source, "entries": p.to_mapping()}
                for module, p in sorted(self.sidebars.items())
            },
            "traits": {
                trait: {"source": p.source, "entries": p.to_mapping()}
                for trait, p in sorted(self.implementors.items())
            },
        }
        if doc_root:
            data["doc_root"] = doc_root
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "DocIndex":
        index = cls()
        for module, entry in data.get("modules", {}).items():
            index.consume_sidebar(IndexPayload.from_mapping(
                entry["entries"], kind="sidebar", subject=module, source=entry.get("source", ""),
            ))
        for trait, entry in data.get("traits", {}).items():
            index.consume_implementors(IndexPayload.from_mapping(
                entry["entries"], kind="implementors", subject=trait, source=entry.get("source", ""),
            ))
        return index


def load_doc_tree(doc_root: Path) -> DocIndex:
    """
    Build a DocIndex from a rustdoc output directory.

    Uses private sinks with the consumer installed before any file is
    loaded, so no payload waits in (or is dropped from) a pending slot.
    """
    doc_root = Path(doc_root)
    index = DocIndex()
    sinks = new_sinks()
    index.attach(sinks["sidebar"], sinks["implementors"])

    for path in iter_index_files(doc_root):
        load_index_file(path, doc_root=doc_root, sinks=sinks)
    return index
