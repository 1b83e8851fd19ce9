"""
String utility functions.
"""

# Characters Windows does not allow in file names
_RESERVED_CHARS = set('<>:"/\\|?*')


def to_camel_case(snake_str: str) -> str:
    """
    Convert snake_case to camelCase.

    Args:
        snake_str: String in snake_case

    Returns:
        String in camelCase
    """
    components = snake_str.split('_')
    return components[0] + ''.join(x.title() for x in components[1:])


def to_snake_case(camel_str: str) -> str:
    """
    Convert camelCase or PascalCase to snake_case.

    Args:
        camel_str: String in camelCase or PascalCase

    Returns:
        String in snake_case
    """
    result = []
    for i, char in enumerate(camel_str):
        if char.isupper() and i > 0:
            result.append('_')
        result.append(char.lower())
    return ''.join(result)


def safe_filename(name: str, fallback: str = "unnamed") -> str:
    """
    Make an asset name usable as a file name.

    Reserved and control characters become underscores; leading and trailing
    dots and spaces are dropped. Only the last path component of ``name`` is
    kept, so stored paths cannot escape the output directory.

    Args:
        name: Asset or file name as stored in the game
        fallback: Used when nothing printable is left

    Returns:
        A file name without directory parts
    """
    name = name.replace('\\', '/').rsplit('/', 1)[-1]
    result = []
    for char in name:
        if char in _RESERVED_CHARS or ord(char) < 32:
            result.append('_')
        else:
            result.append(char)
    cleaned = ''.join(result).strip(' .')
    return cleaned or fallback
