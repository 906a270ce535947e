"""
Tool dispatcher: the single entry point for tool invocations.

Every invocation runs through the same steps:
1. resolve the tool name against the catalog
2. block mutating tools when the server is read-only
3. write one audit line
4. check that arguments and their required fields are present
5. call exactly one BubbleService method
6. wrap the outcome in a ResultEnvelope

call_tool() never raises. Rejected calls never reach the network.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .config import ServerMode
from .errors import (
    ArgumentsMissingError,
    BubbleMCPError,
    ModeBlockedError,
    UnknownToolError,
)
from .service import BubbleService
from .tools import TOOLS, ToolDescriptor, ToolKind


logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("bubble_mcp.audit")

# Fields written to the audit line for each tool. Record payloads ("data")
# are left out.
_AUDIT_FIELDS: Dict[ToolKind, Tuple[str, ...]] = {
    ToolKind.GET_SCHEMA: (),
    ToolKind.LIST: ("dataType", "limit", "cursor"),
    ToolKind.GET: ("dataType", "id"),
    ToolKind.CREATE: ("dataType",),
    ToolKind.UPDATE: ("dataType", "id"),
    ToolKind.DELETE: ("dataType", "id"),
    ToolKind.WORKFLOW: ("workflowName",),
}


@dataclass(frozen=True)
class ResultEnvelope:
    """Uniform result for every invocation: one text block plus an error flag."""

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, result: Any) -> "ResultEnvelope":
        return cls(text=json.dumps(result, indent=2, ensure_ascii=False, default=str))

    @classmethod
    def error(cls, message: str) -> "ResultEnvelope":
        return cls(text=f"Error: {message}", is_error=True)

    @property
    def content(self) -> List[Dict[str, str]]:
        return [{"type": "text", "text": self.text}]

    def to_dict(self) -> Dict[str, Any]:
        return {"content": self.content, "isError": self.is_error}


def format_params(params: Mapping[str, Any]) -> str:
    """Render arguments as k=v pairs; structures and booleans become compact JSON."""
    parts = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (dict, list, bool)):
            value = json.dumps(value, separators=(",", ":"), default=str)
        parts.append(f"{key}={value}")
    return " ".join(parts)


def log_action(tool: str, params: Mapping[str, Any], blocked: bool = False) -> None:
    rendered = format_params(params)
    if blocked:
        audit_logger.info("[AUDIT] tool=%s BLOCKED (read-only mode) %s", tool, rendered)
    else:
        audit_logger.info("[AUDIT] tool=%s %s", tool, rendered)


class ToolDispatcher:
    """Routes tool invocations to BubbleService behind the mode guard.

    Args:
        service: Upstream proxy
        mode: Server mode, fixed for the lifetime of the dispatcher
    """

    def __init__(self, service: BubbleService, mode: ServerMode = ServerMode.READ_ONLY):
        self.service = service
        self.mode = mode
        self._handlers: Dict[ToolKind, Callable[[Dict[str, Any]], Any]] = {
            ToolKind.GET_SCHEMA: self._get_schema,
            ToolKind.LIST: self._list,
            ToolKind.GET: self._get,
            ToolKind.CREATE: self._create,
            ToolKind.UPDATE: self._update,
            ToolKind.DELETE: self._delete,
            ToolKind.WORKFLOW: self._workflow,
        }

    def list_tools(self) -> List[ToolDescriptor]:
        return list(TOOLS)

    def is_blocked(self, tool_name: str) -> bool:
        """True when tool_name is a write tool and the server is read-only."""
        kind = ToolKind.from_tool_name(tool_name)
        return kind is not None and kind.mutating and not self.mode.allows_writes

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ResultEnvelope:
        """Run one tool invocation and wrap the outcome.

        Args:
            name: Tool name as listed in the catalog (e.g. "bubble_list")
            arguments: Tool arguments; may be None

        Returns:
            ResultEnvelope with pretty-printed JSON on success, or the error text
        """
        try:
            if self.is_blocked(name):
                log_action(name, arguments or {}, blocked=True)
                raise ModeBlockedError(name)

            kind = ToolKind.from_tool_name(name)
            if kind is None:
                log_action(name, arguments or {})
                raise UnknownToolError(name)

            fields = _AUDIT_FIELDS[kind]
            log_action(name, {key: (arguments or {}).get(key) for key in fields})

            self._validate(kind, arguments)
            result = await self._handlers[kind](arguments or {})
        except BubbleMCPError as e:
            return ResultEnvelope.error(e.message)
        except Exception as e:
            logger.exception("Unexpected failure in %s", name)
            return ResultEnvelope.error(str(e) or type(e).__name__)

        return ResultEnvelope.success(result)

    # ------------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------------

    @staticmethod
    def _validate(kind: ToolKind, arguments: Optional[Dict[str, Any]]) -> None:
        if not kind.needs_arguments:
            return
        if arguments is None:
            raise ArgumentsMissingError(kind.tool_name)
        missing = [key for key in kind.required if arguments.get(key) is None]
        if missing:
            raise ArgumentsMissingError(kind.tool_name, missing)

    # ------------------------------------------------------------------------
    # Handlers (documented fields only)
    # ------------------------------------------------------------------------

    async def _get_schema(self, args: Dict[str, Any]) -> Any:
        return await self.service.get_schema()

    async def _list(self, args: Dict[str, Any]) -> Any:
        return await self.service.list(
            args["dataType"],
            limit=args.get("limit"),
            cursor=args.get("cursor"),
        )

    async def _get(self, args: Dict[str, Any]) -> Any:
        return await self.service.get(args["dataType"], args["id"])

    async def _create(self, args: Dict[str, Any]) -> Any:
        return await self.service.create(args["dataType"], args["data"])

    async def _update(self, args: Dict[str, Any]) -> Any:
        return await self.service.update(args["dataType"], args["id"], args["data"])

    async def _delete(self, args: Dict[str, Any]) -> Any:
        return await self.service.delete(args["dataType"], args["id"])

    async def _workflow(self, args: Dict[str, Any]) -> Any:
        return await self.service.execute_workflow(args["workflowName"], args.get("data") or {})
