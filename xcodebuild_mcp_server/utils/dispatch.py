#!/usr/bin/env python3
"""Parameter validation, session-default merging and operation dispatch"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Sequence, Tuple

from xcodebuild_mcp_server.exceptions import ValidationError, XcodeBuildMCPError
from xcodebuild_mcp_server.models import ToolResponse, ValidationRequirement
from xcodebuild_mcp_server.session import DEFAULT_SESSION_ID, SessionStore
from xcodebuild_mcp_server.utils.executor import CommandExecutor
from xcodebuild_mcp_server.utils.log import log

# Dict-valued parameters whose explicit value is merged key by key over the default
MERGEABLE_FIELDS = ("test_runner_env",)


@dataclass(frozen=True)
class Operation:
    """
    A named operation: how to validate its parameters and what to run.

    `parse` turns the merged, validated parameters into the typed record the
    body receives. When omitted the body gets the parameter dict.

    `fields` names the parameters the operation accepts, each mapped to the
    values it allows (None = any value). Session defaults outside it are not
    inherited. None accepts every session default.
    """
    name: str
    label: str
    action: str
    body: Callable[[Any, CommandExecutor], Awaitable[ToolResponse]]
    requirements: Tuple[ValidationRequirement, ...] = ()
    defaults: Mapping[str, Any] = field(default_factory=dict)
    parse: Optional[Callable[[Dict[str, Any]], Any]] = None
    fields: Optional[Mapping[str, Optional[Tuple[Any, ...]]]] = None

    def accepts_default(self, name: str, value: Any) -> bool:
        """Whether a session default applies to this operation"""
        if self.fields is None:
            return True
        if name not in self.fields:
            return False
        choices = self.fields[name]
        return choices is None or value in choices

    def label_for(self, params: Mapping[str, Any]) -> str:
        """Label with any {platform} placeholder filled in, e.g. "watchOS Simulator Build" """
        if "{platform}" not in self.label:
            return self.label
        return self.label.replace("{platform}", str(params.get("platform") or "").strip()).strip()


def is_present(value: Any) -> bool:
    """None and empty strings count as not provided"""
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


def merge_session_defaults(explicit: Mapping[str, Any],
                           defaults: Mapping[str, Any],
                           requirements: Sequence[ValidationRequirement] = ()) -> Dict[str, Any]:
    """
    Overlay explicitly provided parameters on session defaults.

    Explicit values win. Within an exactly-one-of group, an explicit value for
    any member drops the defaults for the other members; if only defaults
    supply the group, the first declared member is kept.

    Args:
        explicit: Parameters supplied by the caller (None = not provided)
        defaults: The session's default parameters
        requirements: Requirement groups of the operation

    Returns:
        Merged parameters, containing only present values
    """
    provided = {name: value for name, value in explicit.items() if is_present(value)}
    inherited = {name: value for name, value in defaults.items() if is_present(value)}

    for requirement in requirements:
        if requirement.kind != ValidationRequirement.ONE_OF:
            continue
        explicit_members = [name for name in requirement.fields if name in provided]
        if explicit_members:
            for name in requirement.fields:
                inherited.pop(name, None)
            continue
        default_members = [name for name in requirement.fields if name in inherited]
        for name in default_members[1:]:
            inherited.pop(name, None)

    merged = dict(inherited)
    for name, value in provided.items():
        if name in MERGEABLE_FIELDS and isinstance(value, dict) and isinstance(merged.get(name), dict):
            combined = dict(merged[name])
            combined.update(value)
            merged[name] = combined
        else:
            merged[name] = value
    return merged


def check_requirements(params: Mapping[str, Any],
                       requirements: Sequence[ValidationRequirement]) -> Optional[str]:
    """
    Check requirement groups against merged parameters.

    All all-of groups are checked before any one-of group.

    Returns:
        The first validation failure message, or None if all requirements hold
    """
    for requirement in requirements:
        if requirement.kind != ValidationRequirement.ALL_OF:
            continue
        for name in requirement.fields:
            if not is_present(params.get(name)):
                return f"Required parameter '{name}' is missing. Please provide a value for this parameter."

    for requirement in requirements:
        if requirement.kind != ValidationRequirement.ONE_OF:
            continue
        present = [name for name in requirement.fields if is_present(params.get(name))]
        if not present:
            return f"Either {' or '.join(requirement.fields)} is required."
        if len(present) > 1:
            return f"{' and '.join(present)} are mutually exclusive. Provide only one."

    return None


async def dispatch(operation: Operation,
                   arguments: Mapping[str, Any],
                   executor: CommandExecutor,
                   session_store: Optional[SessionStore] = None,
                   session_id: str = DEFAULT_SESSION_ID) -> ToolResponse:
    """
    Validate parameters and run an operation.

    Args:
        operation: The operation to run
        arguments: Parameters supplied by the caller
        executor: Process execution boundary passed on to the operation body
        session_store: Source of session defaults; None disables defaults
        session_id: Which session's defaults to use

    Returns:
        The operation's ToolResponse. Validation failures are returned before
        anything is executed; exceptions from the body become error responses.
    """
    defaults = {}
    if session_store is not None:
        for name, value in session_store.get(session_id).items():
            if operation.accepts_default(name, value):
                defaults[name] = value
            else:
                log("debug", f"{operation.name}: session default {name}={value!r} does not apply")
    params = merge_session_defaults(arguments, defaults, operation.requirements)

    message = check_requirements(params, operation.requirements)
    if message:
        log("warning", f"{operation.name}: {message}")
        response = ToolResponse.text(message, is_error=True)
        if session_store is not None:
            response.content.append({
                "type": "text",
                "text": "Tip: values used on every call can be stored once with session_set_defaults.",
            })
        return response

    for name, value in operation.defaults.items():
        params.setdefault(name, value)

    try:
        record = operation.parse(params) if operation.parse else params
    except ValidationError as e:
        log("warning", f"{operation.name}: {e.message}")
        return ToolResponse.text(e.message, is_error=True)

    try:
        return await operation.body(record, executor)
    except XcodeBuildMCPError as e:
        error_message = e.message
    except Exception as e:
        error_message = str(e)

    label = operation.label_for(params)
    log("error", f"Error during {label} {operation.action}: {error_message}")
    return ToolResponse.text(f"Error during {label} {operation.action}: {error_message}", is_error=True)
