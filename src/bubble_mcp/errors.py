"""
Error taxonomy for tool invocations.

Every kind is caught at the dispatcher boundary and turned into an error
envelope; none of them reaches the MCP client as a raised exception.
"""

from typing import Iterable, Optional


MODE_ENV_VAR = "MCP_MODE"


class BubbleMCPError(Exception):
    """Base class for failures surfaced as error envelopes."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ModeBlockedError(BubbleMCPError):
    """A mutating tool was called while the server is read-only."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(
            f"{tool_name} is disabled in read-only mode. "
            f"Set {MODE_ENV_VAR}=read-write to enable write operations."
        )


class ArgumentsMissingError(BubbleMCPError):
    """Arguments, or required fields within them, were not supplied."""

    def __init__(self, tool_name: str, missing: Iterable[str] = ()):
        self.tool_name = tool_name
        self.missing = tuple(missing)
        if self.missing:
            message = (
                f"Missing required arguments for {tool_name}: "
                f"{', '.join(self.missing)}"
            )
        else:
            message = f"Arguments are missing for {tool_name}"
        super().__init__(message)


class UnknownToolError(BubbleMCPError):
    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"Unknown tool: {tool_name}")


class UpstreamError(BubbleMCPError):
    """The Bubble API call failed (network, timeout or non-2xx status)."""

    def __init__(
        self,
        operation: str,
        target: str,
        detail: str,
        status_code: Optional[int] = None,
    ):
        self.operation = operation
        self.target = target
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"Failed to {operation} {target}: {detail}")
