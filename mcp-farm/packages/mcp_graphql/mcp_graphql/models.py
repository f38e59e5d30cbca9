# mcp-farm/packages/mcp_graphql/mcp_graphql/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# ---------------------------------
# Introspection data classes
# ---------------------------------

NON_NULL = "NON_NULL"
LIST = "LIST"


@dataclass(frozen=True)
class TypeRef:
    kind: str
    name: Optional[str] = None
    of_type: Optional["TypeRef"] = None

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> Optional["TypeRef"]:
        if not d:
            return None
        return cls(kind=d.get("kind") or "", name=d.get("name"), of_type=cls.from_dict(d.get("ofType")))

    @classmethod
    def named(cls, name: str, kind: str = "SCALAR") -> "TypeRef":
        return cls(kind=kind, name=name)

    @classmethod
    def non_null(cls, inner: "TypeRef") -> "TypeRef":
        return cls(kind=NON_NULL, of_type=inner)

    @classmethod
    def list_of(cls, inner: "TypeRef") -> "TypeRef":
        return cls(kind=LIST, of_type=inner)


@dataclass(frozen=True)
class ArgumentDescriptor:
    name: str
    type: Optional[TypeRef] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ArgumentDescriptor":
        return cls(name=d.get("name") or "", type=TypeRef.from_dict(d.get("type")), description=d.get("description"))


@dataclass(frozen=True)
class OperationDescriptor:
    name: str
    description: Optional[str] = None
    args: List[ArgumentDescriptor] = field(default_factory=list)
    type: Optional[TypeRef] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "OperationDescriptor":
        return cls(
            name=d.get("name") or "",
            description=d.get("description"),
            args=[ArgumentDescriptor.from_dict(a) for a in (d.get("args") or [])],
            type=TypeRef.from_dict(d.get("type")),
        )


@dataclass(frozen=True)
class IntrospectionSchema:
    queries: List[OperationDescriptor] = field(default_factory=list)
    mutations: List[OperationDescriptor] = field(default_factory=list)
    types: List[Dict[str, Any]] = field(default_factory=list)  # raw __schema.types entries

    @classmethod
    def from_dict(cls, schema: Dict[str, Any]) -> "IntrospectionSchema":
        """Build from the `__schema` object of an introspection result."""
        def _fields(root: Optional[Dict[str, Any]]) -> List[OperationDescriptor]:
            if not root:
                return []
            return [OperationDescriptor.from_dict(f) for f in (root.get("fields") or [])]

        return cls(
            queries=_fields(schema.get("queryType")),
            mutations=_fields(schema.get("mutationType")),
            types=list(schema.get("types") or []),
        )

    def operations(self, kind: str) -> List[OperationDescriptor]:
        return self.queries if kind == "query" else self.mutations

    def find_type(self, name: str) -> Optional[Dict[str, Any]]:
        for t in self.types:
            if t.get("name") == name:
                return t
        return None


@dataclass(frozen=True)
class GeneratedExample:
    query_text: str = ""
    variables: Dict[str, Any] = field(default_factory=dict)

    @property
    def empty(self) -> bool:
        return not self.query_text


def locate_schema(data: Any) -> Optional[Dict[str, Any]]:
    """
    Find the `__schema` object in an introspection response: either directly,
    or nested one level below any key (some gateways wrap results).
    """
    if not isinstance(data, dict):
        return None
    if isinstance(data.get("__schema"), dict):
        return data["__schema"]
    for value in data.values():
        if isinstance(value, dict) and isinstance(value.get("__schema"), dict):
            return value["__schema"]
    return None
