"""
GameMaker 8 asset record definitions.

These dataclasses are the decoded form of every asset kind stored in a
GameMaker 8 executable. Fixed-layout records tag their stored fields with the
helpers from ``io.record_fields`` so they can be read with
``Cursor.read_class``; the remaining records are filled in field by field by
the deserializer.

Code-bearing fields keep their raw bytes next to the opaque handle returned
by the code registry.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..io.record_fields import u32_field, i32_field, bool_field, ref_field, f64_field
from .enums import EVENT_TYPE_COUNT

# Number of argument type slots stored for every extension function
EXTENSION_ARG_SLOTS = 17

# Glyph map entries stored for every font (6 words for each of 256 glyphs)
FONT_GLYPH_WORDS = 0x600


# ============================================================
# Shared
# ============================================================

@dataclass
class CodeAction:
    """One drag-and-drop action of an event or timeline moment."""
    library_id: int = 0
    action_id: int = 0
    kind: int = 0
    can_be_relative: bool = False
    is_condition: bool = False
    applies_to_something: bool = False
    execution_type: int = 0
    function_name: str = ""
    function_code: bytes = b""
    param_count: int = 0
    param_types: List[int] = field(default_factory=list)
    applies_to: int = -1
    is_relative: bool = False
    arguments: List[bytes] = field(default_factory=list)
    invert_condition: bool = False
    # Handles of every piece of code this action registered
    code_handles: List[Any] = field(default_factory=list)


# ============================================================
# Sprites
# ============================================================

@dataclass
class CollisionMap:
    """Per-pixel collision mask with its bounding box."""
    width: int = u32_field()
    height: int = u32_field()
    left: int = u32_field()
    right: int = u32_field()
    bottom: int = u32_field()
    top: int = u32_field()
    mask: List[bool] = field(default_factory=list)

    def collides(self, x: int, y: int) -> bool:
        """Check one cell of the mask; cells outside the map never collide."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False
        return self.mask[y * self.width + x]


@dataclass
class SpriteFrame:
    """One animation frame, registered with the image store."""
    width: int = 0
    height: int = 0
    image: Any = None


@dataclass
class Sprite:
    name: str = ""
    origin_x: int = 0
    origin_y: int = 0
    width: int = 1
    height: int = 1
    frames: List[SpriteFrame] = field(default_factory=list)
    separate_collision: bool = False
    collision_maps: List[CollisionMap] = field(default_factory=list)

    def collision_map(self, frame: int) -> Optional[CollisionMap]:
        """Collision map that applies to a frame, if the sprite has any."""
        if not self.collision_maps:
            return None
        if self.separate_collision:
            return self.collision_maps[frame % len(self.collision_maps)]
        return self.collision_maps[0]


# ============================================================
# Sounds, backgrounds, paths, scripts, fonts
# ============================================================

@dataclass
class Sound:
    name: str = ""
    kind: int = 0
    file_type: str = ""
    file_name: str = ""
    data: Optional[bytes] = None
    effects: int = 0
    volume: float = 0.0
    pan: float = 0.0
    preload: bool = False


@dataclass
class Background:
    name: str = ""
    width: int = 0
    height: int = 0
    image: Any = None


@dataclass
class PathPoint:
    x: float = f64_field()
    y: float = f64_field()
    speed: float = f64_field()


@dataclass
class Path:
    name: str = ""
    kind: int = 0
    closed: bool = False
    precision: int = 0
    points: List[PathPoint] = field(default_factory=list)


@dataclass
class Script:
    name: str = ""
    source: bytes = b""
    code: Any = None


@dataclass
class Font:
    name: str = ""
    font_name: str = ""
    size: int = 0
    bold: bool = False
    italic: bool = False
    range_begin: int = 0
    range_end: int = 0
    # Only stored separately by GM8.1, packed into range_begin
    charset: int = 0
    aa_level: int = 0
    glyph_map: List[int] = field(default_factory=list)
    image_width: int = 0
    image_height: int = 0
    image: Any = None


# ============================================================
# Timelines and objects
# ============================================================

@dataclass
class Timeline:
    name: str = ""
    moments: Dict[int, List[CodeAction]] = field(default_factory=dict)


def _empty_event_table() -> List[Dict[int, List[CodeAction]]]:
    return [{} for _ in range(EVENT_TYPE_COUNT)]


@dataclass
class Object:
    name: str = ""
    sprite_index: Optional[int] = None
    solid: bool = False
    visible: bool = True
    depth: int = 0
    persistent: bool = False
    parent_index: Optional[int] = None
    mask_index: Optional[int] = None
    # events[event_type][sub_index] -> actions
    events: List[Dict[int, List[CodeAction]]] = field(default_factory=_empty_event_table)

    # Derived by the identity resolver
    identities: Tuple[int, ...] = ()
    children: List[int] = field(default_factory=list)
    inherited_events: List[Dict[int, List[CodeAction]]] = field(default_factory=_empty_event_table)


# ============================================================
# Rooms
# ============================================================

@dataclass
class RoomBackground:
    visible: bool = bool_field()
    foreground: bool = bool_field()
    background_index: Optional[int] = ref_field()
    x: int = i32_field()
    y: int = i32_field()
    tile_horizontal: bool = bool_field()
    tile_vertical: bool = bool_field()
    h_speed: int = i32_field()
    v_speed: int = i32_field()
    stretch: bool = bool_field()


@dataclass
class RoomView:
    visible: bool = bool_field()
    view_x: int = i32_field()
    view_y: int = i32_field()
    view_w: int = u32_field()
    view_h: int = u32_field()
    port_x: int = i32_field()
    port_y: int = i32_field()
    port_w: int = u32_field()
    port_h: int = u32_field()
    h_border: int = u32_field()
    v_border: int = u32_field()
    h_speed: int = i32_field()
    v_speed: int = i32_field()
    follow: Optional[int] = ref_field()


@dataclass
class RoomInstance:
    x: int = i32_field()
    y: int = i32_field()
    object_index: int = u32_field()
    id: int = u32_field()
    creation_code: bytes = b""
    creation: Any = None


@dataclass
class RoomTile:
    x: int = i32_field()
    y: int = i32_field()
    background_index: Optional[int] = ref_field()
    tile_x: int = u32_field()
    tile_y: int = u32_field()
    width: int = u32_field()
    height: int = u32_field()
    depth: int = i32_field()
    id: int = u32_field()


@dataclass
class Room:
    name: str = ""
    caption: str = ""
    width: int = 0
    height: int = 0
    speed: int = 0
    persistent: bool = False
    background_colour: int = 0
    draw_background_colour: bool = False
    creation_code: bytes = b""
    creation: Any = None
    backgrounds: List[RoomBackground] = field(default_factory=list)
    enable_views: bool = False
    views: List[RoomView] = field(default_factory=list)
    instances: List[RoomInstance] = field(default_factory=list)
    tiles: List[RoomTile] = field(default_factory=list)


# ============================================================
# Triggers, constants, include files, extensions
# ============================================================

@dataclass
class Trigger:
    name: str = ""
    condition_code: bytes = b""
    condition: Any = None
    check_moment: int = 0
    constant_name: str = ""


@dataclass
class Constant:
    name: str = ""
    value: str = ""


@dataclass
class IncludeFile:
    file_name: str = ""
    file_path: str = ""
    original_size: int = 0
    data: Optional[bytes] = None
    export_flags: int = 0
    export_folder: str = ""
    overwrite: bool = False
    free_memory: bool = False
    remove_at_game_end: bool = False


@dataclass
class ExtensionFunction:
    name: str = ""
    external_name: str = ""
    convention: int = 0
    arg_count: int = 0
    arg_types: List[int] = field(default_factory=list)
    return_type: int = 0


@dataclass
class ExtensionConstant:
    name: str = ""
    value: str = ""


@dataclass
class ExtensionFile:
    file_name: str = ""
    kind: int = 0
    initializer: str = ""
    finalizer: str = ""
    functions: List[ExtensionFunction] = field(default_factory=list)
    constants: List[ExtensionConstant] = field(default_factory=list)
    data: bytes = b""


@dataclass
class Extension:
    name: str = ""
    folder_name: str = ""
    files: List[ExtensionFile] = field(default_factory=list)


# ============================================================
# Game information (F1 help window)
# ============================================================

@dataclass
class GameInfo:
    background_colour: int = 0
    separate_window: bool = False
    caption: str = ""
    left: int = 0
    top: int = 0
    width: int = 0
    height: int = 0
    show_border: bool = False
    allow_window_resize: bool = False
    on_top: bool = False
    freeze_game: bool = False
    text: str = ""
