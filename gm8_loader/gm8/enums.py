"""
GameMaker 8 enumerations.
"""

from enum import IntEnum


class Revision(IntEnum):
    """Recognized container revisions."""
    GM80 = 800
    GM81 = 810


class EventType(IntEnum):
    """Object event categories, in stored order."""
    CREATE = 0
    DESTROY = 1
    ALARM = 2
    STEP = 3
    COLLISION = 4
    KEYBOARD = 5
    MOUSE = 6
    OTHER = 7
    DRAW = 8
    KEY_PRESS = 9
    KEY_RELEASE = 10
    TRIGGER = 11


EVENT_TYPE_COUNT = len(EventType)


class ActionKind(IntEnum):
    """Drag-and-drop action kinds."""
    NORMAL = 0
    BEGIN_GROUP = 1
    END_GROUP = 2
    ELSE = 3
    EXIT = 4
    REPEAT = 5
    VARIABLE = 6
    CODE = 7
    PLACEHOLDER = 8
    SEPARATOR = 9
    LABEL = 10


class ExecutionType(IntEnum):
    """How a normal action is executed."""
    NONE = 0
    FUNCTION = 1
    CODE = 2


class ArgumentType(IntEnum):
    """Action argument kinds; only the first three carry code."""
    EXPRESSION = 0
    STRING = 1
    BOTH = 2
    BOOLEAN = 3
    MENU = 4
    SPRITE = 5
    SOUND = 6
    BACKGROUND = 7
    PATH = 8
    SCRIPT = 9
    OBJECT = 10
    ROOM = 11
    FONT = 12
    COLOR = 13
    TIMELINE = 14
    FONT_STRING = 15


# Argument kinds whose text is evaluated as an expression
EXPRESSION_ARGUMENTS = frozenset({ArgumentType.EXPRESSION, ArgumentType.BOTH})
