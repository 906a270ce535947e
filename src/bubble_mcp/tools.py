"""
Static tool catalog.

Seven tools, in listing order:
- bubble_get_schema: application schema (data types and workflows)
- bubble_list: list records of a data type
- bubble_get: get one record by ID
- bubble_create: create a record (write)
- bubble_update: update a record (write)
- bubble_delete: delete a record (write)
- bubble_workflow: run a backend workflow (write)
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


TOOL_PREFIX = "bubble_"


class ToolKind(enum.Enum):
    """Closed set of tools, each with its required arguments and write flag."""

    GET_SCHEMA = ("get_schema", (), False)
    LIST = ("list", ("dataType",), False)
    GET = ("get", ("dataType", "id"), False)
    CREATE = ("create", ("dataType", "data"), True)
    UPDATE = ("update", ("dataType", "id", "data"), True)
    DELETE = ("delete", ("dataType", "id"), True)
    WORKFLOW = ("workflow", ("workflowName",), True)

    def __init__(self, short_name: str, required: Tuple[str, ...], mutating: bool):
        self.short_name = short_name
        self.required = required
        self.mutating = mutating

    @property
    def tool_name(self) -> str:
        return f"{TOOL_PREFIX}{self.short_name}"

    @property
    def needs_arguments(self) -> bool:
        return self is not ToolKind.GET_SCHEMA

    @classmethod
    def from_tool_name(cls, name: str) -> Optional["ToolKind"]:
        for kind in cls:
            if kind.tool_name == name:
                return kind
        return None


MUTATING_TOOLS = frozenset(kind.tool_name for kind in ToolKind if kind.mutating)


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    input_schema: Dict[str, Any]
    annotations: Dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """MCP tools/list shape."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def _object_schema(properties: Dict[str, Any], required: Tuple[str, ...]) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    return schema


def _annotations(kind: ToolKind) -> Dict[str, bool]:
    return {
        "readOnlyHint": not kind.mutating,
        "destructiveHint": kind is ToolKind.DELETE,
        "openWorldHint": True,  # every tool calls the external Bubble API
    }


_TOOL_SPECS = {
    ToolKind.GET_SCHEMA: (
        "Get the schema of the Bubble application including data types and workflows",
        {},
    ),
    ToolKind.LIST: (
        "List records of a specific data type",
        {
            "dataType": {
                "type": "string",
                "description": "The data type to list (e.g., 'user', 'order', 'custom.organization')",
            },
            "limit": {
                "type": "number",
                "description": "Maximum number of records to return",
                "default": 100,
            },
            "cursor": {"type": "number", "description": "Cursor for pagination"},
        },
    ),
    ToolKind.GET: (
        "Get a specific record by ID",
        {
            "dataType": {"type": "string", "description": "The data type of the record"},
            "id": {"type": "string", "description": "The unique ID of the record"},
        },
    ),
    ToolKind.CREATE: (
        "Create a new record",
        {
            "dataType": {"type": "string", "description": "The data type to create"},
            "data": {"type": "object", "description": "The data for the new record"},
        },
    ),
    ToolKind.UPDATE: (
        "Update an existing record",
        {
            "dataType": {"type": "string", "description": "The data type of the record"},
            "id": {"type": "string", "description": "The unique ID of the record to update"},
            "data": {"type": "object", "description": "The updated data"},
        },
    ),
    ToolKind.DELETE: (
        "Delete a record",
        {
            "dataType": {"type": "string", "description": "The data type of the record"},
            "id": {"type": "string", "description": "The unique ID of the record to delete"},
        },
    ),
    ToolKind.WORKFLOW: (
        "Execute a workflow",
        {
            "workflowName": {"type": "string", "description": "The name of the workflow to execute"},
            "data": {
                "type": "object",
                "description": "The data to pass to the workflow",
                "default": {},
            },
        },
    ),
}


TOOLS: Tuple[ToolDescriptor, ...] = tuple(
    ToolDescriptor(
        name=kind.tool_name,
        description=_TOOL_SPECS[kind][0],
        input_schema=_object_schema(_TOOL_SPECS[kind][1], kind.required),
        annotations=_annotations(kind),
    )
    for kind in ToolKind
)


_DESCRIPTORS: Dict[ToolKind, ToolDescriptor] = dict(zip(ToolKind, TOOLS))


def get_descriptor(kind: ToolKind) -> ToolDescriptor:
    return _DESCRIPTORS[kind]
