"""
Drag-and-drop action lists.

Timeline moments and object events both store a versioned list of actions.
Each action's code-bearing parts are registered with the code registry while
reading; compiling them is deferred to the identity resolver.
"""

from typing import List

from ..errors import CorruptBlock
from ..io.cursor import Cursor
from ..runtime.code_registry import CodeRegistry
from .enums import ActionKind, ExecutionType, EXPRESSION_ARGUMENTS
from .structures import CodeAction

# Smallest possible stored action, used to sanity check action counts
MIN_ACTION_SIZE = 4 * 16


def read_action(cursor: Cursor, registry: CodeRegistry, encoding: str = 'cp1252') -> CodeAction:
    """
    Read one action and register its code.

    Args:
        cursor: Cursor positioned at the action's version word
        registry: Receives the action's code
        encoding: Code page used for the function name

    Returns:
        The decoded action
    """
    action = CodeAction()
    cursor.skip(4)  # Data version, 440
    action.library_id = cursor.read_uint32()
    action.action_id = cursor.read_uint32()
    action.kind = cursor.read_uint32()
    action.can_be_relative = cursor.read_bool()
    action.is_condition = cursor.read_bool()
    action.applies_to_something = cursor.read_bool()
    action.execution_type = cursor.read_uint32()
    action.function_name = cursor.read_text(encoding)
    action.function_code = cursor.read_string()
    action.param_count = cursor.read_uint32()

    type_count = cursor.check_count(cursor.read_uint32())
    action.param_types = cursor.read_uint32_array(type_count)
    if action.param_count > type_count:
        raise CorruptBlock(
            f"Action {action.library_id}/{action.action_id} has {action.param_count} "
            f"parameters but only {type_count} parameter types"
        )

    action.applies_to = cursor.read_int32()
    action.is_relative = cursor.read_bool()

    arg_count = cursor.check_count(cursor.read_uint32())
    action.arguments = [cursor.read_string() for _ in range(arg_count)]
    if action.param_count > arg_count:
        raise CorruptBlock(
            f"Action {action.library_id}/{action.action_id} has {action.param_count} "
            f"parameters but only {arg_count} arguments"
        )

    action.invert_condition = cursor.read_bool()

    _register_action_code(action, registry)
    return action


def _register_action_code(action: CodeAction, registry: CodeRegistry) -> None:
    """Register every piece of code an action carries."""
    if action.kind == ActionKind.CODE:
        if not action.arguments:
            raise CorruptBlock("Code action without a code argument")
        action.code_handles.append(registry.register(action.arguments[0]))
        return

    if action.kind == ActionKind.NORMAL and action.execution_type == ExecutionType.CODE:
        action.code_handles.append(registry.register(action.function_code))

    if action.kind in (ActionKind.NORMAL, ActionKind.VARIABLE, ActionKind.REPEAT):
        for i in range(action.param_count):
            if action.param_types[i] in EXPRESSION_ARGUMENTS:
                action.code_handles.append(registry.register_expression(action.arguments[i]))


def read_action_list(cursor: Cursor, registry: CodeRegistry, encoding: str = 'cp1252') -> List[CodeAction]:
    """Read a versioned, counted list of actions."""
    cursor.skip(4)  # Data version, 400
    count = cursor.check_count(cursor.read_uint32(), MIN_ACTION_SIZE)
    return [read_action(cursor, registry, encoding) for _ in range(count)]
