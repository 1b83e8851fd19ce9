"""
Game settings block.

The settings block is the first compressed block after the revision marker.
It holds 23 fixed words, the loading bar and custom load image options (each
possibly followed by nested compressed images), and the error handling
options.
"""

from dataclasses import dataclass
from typing import Optional

from ..io.cursor import Cursor
from ..io.inflate import BlockInflator
from .enums import Revision


@dataclass
class GameSettings:
    """Decoded global game settings."""
    fullscreen: bool = False
    interpolate: bool = False
    draw_border: bool = True
    display_cursor: bool = True
    scaling: int = 0
    allow_window_resize: bool = False
    on_top: bool = False
    colour_outside_room: int = 0
    set_resolution: bool = False
    colour_depth: int = 0
    resolution: int = 0
    frequency: int = 0
    show_buttons: bool = True
    vsync: bool = False
    disable_screensaver: bool = False
    let_f4: bool = False
    let_f1: bool = False
    let_esc: bool = False
    let_f5: bool = False
    let_f9: bool = False
    treat_close_as_esc: bool = False
    priority: int = 0
    freeze: bool = False

    loading_bar: int = 0
    loading_bar_back: Optional[bytes] = None
    loading_bar_front: Optional[bytes] = None
    custom_load_image: Optional[bytes] = None

    transparent: bool = False
    translucency: int = 0
    scale_progress_bar: bool = False
    error_display: bool = False
    error_log: bool = False
    error_abort: bool = False
    treat_uninitialized_as_zero: bool = False
    error_on_uninitialized_args: bool = True


def read_settings(cursor: Cursor, inflater: BlockInflator, revision: Revision) -> GameSettings:
    """
    Read an inflated settings block.

    Args:
        cursor: Cursor over the inflated settings data
        inflater: Inflater used for the nested image blocks
        revision: Container revision, which decides how the last word is split

    Returns:
        The decoded settings
    """
    s = GameSettings()
    s.fullscreen = cursor.read_bool()
    s.interpolate = cursor.read_bool()
    s.draw_border = not cursor.read_bool()
    s.display_cursor = cursor.read_bool()
    s.scaling = cursor.read_int32()
    s.allow_window_resize = cursor.read_bool()
    s.on_top = cursor.read_bool()
    s.colour_outside_room = cursor.read_uint32()
    s.set_resolution = cursor.read_bool()
    s.colour_depth = cursor.read_uint32()
    s.resolution = cursor.read_uint32()
    s.frequency = cursor.read_uint32()
    s.show_buttons = not cursor.read_bool()
    s.vsync = cursor.read_bool()
    s.disable_screensaver = cursor.read_bool()
    s.let_f4 = cursor.read_bool()
    s.let_f1 = cursor.read_bool()
    s.let_esc = cursor.read_bool()
    s.let_f5 = cursor.read_bool()
    s.let_f9 = cursor.read_bool()
    s.treat_close_as_esc = cursor.read_bool()
    s.priority = cursor.read_uint32()
    s.freeze = cursor.read_bool()

    s.loading_bar = cursor.read_uint32()
    if s.loading_bar:
        if cursor.read_bool():
            s.loading_bar_back = bytes(inflater.inflate(cursor))
        if cursor.read_bool():
            s.loading_bar_front = bytes(inflater.inflate(cursor))

    if cursor.read_bool():
        # Stored as a BMP file
        s.custom_load_image = bytes(inflater.inflate(cursor))

    s.transparent = cursor.read_bool()
    s.translucency = cursor.read_uint32()
    s.scale_progress_bar = cursor.read_bool()
    s.error_display = cursor.read_bool()
    s.error_log = cursor.read_bool()
    s.error_abort = cursor.read_bool()

    uninitialized = cursor.read_uint32()
    if revision == Revision.GM81:
        s.treat_uninitialized_as_zero = bool(uninitialized & 1)
        s.error_on_uninitialized_args = bool(uninitialized & 2)
    else:
        s.treat_uninitialized_as_zero = bool(uninitialized)
        s.error_on_uninitialized_args = True

    return s
