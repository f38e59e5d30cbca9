"""
Schema-driven operation resolver and example generator.

Public API
----------
    - render_type(type_ref) -> "[Int!]!"-style GraphQL type reference
    - unwrap_type(type_ref) -> (terminal type name, is_list)
    - placeholder_value(type_ref) -> example variable value
    - resolve_operation(schema, kind, name) -> OperationDescriptor | None
    - generate_example(operation, kind) -> GeneratedExample
    - filter_operations(operations, search, limit) -> [OperationDescriptor]

Everything here is pure; the caller supplies the already-fetched schema.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .models import (
    LIST,
    NON_NULL,
    GeneratedExample,
    IntrospectionSchema,
    OperationDescriptor,
    TypeRef,
)

OPERATION_KINDS = ("query", "mutation")
DEFAULT_TYPE = "String"

# Terminal scalar -> example value
_SCALAR_PLACEHOLDERS: Dict[str, Any] = {
    "Int": 1,
    "Float": 1.0,
    "Boolean": True,
    "ID": "ID1",
}

# Fixed selection set; real return-type fields are left to the caller.
_PLACEHOLDER_SELECTION = ("id", "name")


# ---------------------------------
# Type references
# ---------------------------------

def render_type(type_ref: Optional[TypeRef]) -> str:
    if type_ref is None:
        return DEFAULT_TYPE
    if type_ref.kind == NON_NULL:
        return f"{render_type(type_ref.of_type)}!"
    if type_ref.kind == LIST:
        return f"[{render_type(type_ref.of_type)}]"
    if type_ref.name:
        return type_ref.name
    if type_ref.of_type is not None:
        return render_type(type_ref.of_type)
    return DEFAULT_TYPE


def unwrap_type(type_ref: Optional[TypeRef]) -> Tuple[str, bool]:
    is_list = False
    current = type_ref
    while current is not None:
        if current.kind == LIST:
            is_list = True
        elif current.kind != NON_NULL and current.name:
            return current.name, is_list
        current = current.of_type
    return DEFAULT_TYPE, is_list


def placeholder_value(type_ref: Optional[TypeRef]) -> Any:
    name, is_list = unwrap_type(type_ref)
    if name in _SCALAR_PLACEHOLDERS:
        value: Any = _SCALAR_PLACEHOLDERS[name]
    elif name.endswith("Input"):
        value = {}
    else:
        value = f"{name}1"
    return [value] if is_list else value


# ---------------------------------
# Resolution
# ---------------------------------

def resolve_operation(schema: IntrospectionSchema, kind: str, requested: str) -> Optional[OperationDescriptor]:
    """
    Exact (case-insensitive) name match wins. Otherwise the shortest name that
    contains `requested` is returned. The shortest-name rule is a heuristic kept
    for compatibility; among equal lengths declaration order decides.
    """
    candidates = schema.operations(kind)
    wanted = (requested or "").lower()
    for op in candidates:
        if op.name.lower() == wanted:
            return op
    matches = [op for op in candidates if wanted in op.name.lower()]
    if not matches:
        return None
    # sorted() is stable, so equal lengths keep schema order
    return sorted(matches, key=lambda op: len(op.name))[0]


def filter_operations(operations: List[OperationDescriptor], search: Optional[str] = None,
                      limit: Optional[int] = 50) -> List[OperationDescriptor]:
    out = operations
    if search:
        s = search.lower()
        out = [op for op in operations
               if s in op.name.lower() or (op.description and s in op.description.lower())]
    if limit is not None and limit > 0:
        out = out[:limit]
    return list(out)


# ---------------------------------
# Example generation
# ---------------------------------

def _capitalize(name: str) -> str:
    return name[:1].upper() + name[1:]


def generate_example(operation: OperationDescriptor, kind: str = "query") -> GeneratedExample:
    if not operation.name:
        return GeneratedExample()

    header = f"{kind} {_capitalize(operation.name)}"
    invocation = operation.name
    variables: Dict[str, Any] = {}
    if operation.args:
        decls = ", ".join(f"${a.name}: {render_type(a.type)}" for a in operation.args)
        call_args = ", ".join(f"{a.name}: ${a.name}" for a in operation.args)
        header = f"{header}({decls})"
        invocation = f"{invocation}({call_args})"
        variables = {a.name: placeholder_value(a.type) for a in operation.args}

    selection = "\n".join(f"    {f}" for f in _PLACEHOLDER_SELECTION)
    text = f"{header} {{\n  {invocation} {{\n{selection}\n  }}\n}}"
    return GeneratedExample(query_text=text, variables=variables)
