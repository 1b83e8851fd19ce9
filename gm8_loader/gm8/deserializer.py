"""
Asset deserializer.

Reads every asset category from the decrypted game data, in the fixed order
they are stored. Most categories share one framing: a version word, a count,
then one compressed block per reserved slot whose first word says whether
the slot is populated. Extensions and constants are stored uncompressed.

Records are collected locally and committed to the AssetManager one whole
category at a time.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..errors import CorruptBlock
from ..crypto.extension_cipher import ExtensionFileDescrambler
from ..io.cursor import Cursor
from ..io.inflate import BlockInflator
from ..io.record_fields import to_reference
from ..runtime.code_registry import CodeRegistry
from ..runtime.image_store import ImageStore
from .actions import read_action_list
from .assets import AssetCategory, AssetManager
from .enums import EVENT_TYPE_COUNT, Revision
from .pixels import swap_red_blue, alpha_to_rgba
from .structures import (
    Background, CodeAction, CollisionMap, Constant, Extension, ExtensionConstant,
    ExtensionFile, ExtensionFunction, Font, GameInfo, IncludeFile, Object, Path,
    PathPoint, Room, RoomBackground, RoomInstance, RoomTile, RoomView, Script,
    Sound, Sprite, SpriteFrame, Timeline, Trigger,
    EXTENSION_ARG_SLOTS, FONT_GLYPH_WORDS,
)

# Event lists end with this sub-index
EVENT_LIST_END = 0xFFFFFFFF


@dataclass
class GameTail:
    """Everything stored after the asset categories."""
    info: GameInfo = field(default_factory=GameInfo)
    room_order: List[int] = field(default_factory=list)
    last_instance_id: int = 0
    last_tile_id: int = 0


class AssetDeserializer:
    """
    Decoder for the asset section of a GameMaker 8 game.

    Attributes:
        assets: Receives each category once it is fully decoded
        inflater: Shared block inflater
        registry: Receives every code-bearing field
        images: Receives every decoded image
        revision: Container revision
        encoding: Code page used for names and other display text
        verbose: Print progress messages
    """

    def __init__(self,
                 assets: AssetManager,
                 inflater: BlockInflator,
                 registry: CodeRegistry,
                 images: ImageStore,
                 revision: Revision,
                 encoding: str = 'cp1252',
                 verbose: bool = False):
        self.assets = assets
        self.inflater = inflater
        self.registry = registry
        self.images = images
        self.revision = revision
        self.encoding = encoding
        self.verbose = verbose

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)

    def _text(self, cursor: Cursor) -> str:
        return cursor.read_text(self.encoding)

    # ========== Main Entry ==========

    def read_all(self, cursor: Cursor) -> GameTail:
        """
        Read every category and the trailing sections.

        Args:
            cursor: Cursor positioned at the extensions version word

        Returns:
            The game information, room order and last used ids
        """
        self._log("Get Extensions")
        self.read_extensions(cursor)
        self._read_category(cursor, AssetCategory.TRIGGERS, self.read_trigger)
        self._read_category(cursor, AssetCategory.CONSTANTS, self.read_constant, compressed=False)
        self._read_category(cursor, AssetCategory.SOUNDS, self.read_sound)
        self._read_category(cursor, AssetCategory.SPRITES, self.read_sprite)
        self._read_category(cursor, AssetCategory.BACKGROUNDS, self.read_background)
        self._read_category(cursor, AssetCategory.PATHS, self.read_path)
        self._read_category(cursor, AssetCategory.SCRIPTS, self.read_script)
        self._read_category(cursor, AssetCategory.FONTS, self.read_font)
        self._read_category(cursor, AssetCategory.TIMELINES, self.read_timeline)
        self._read_category(cursor, AssetCategory.OBJECTS, self.read_object)
        self._read_category(cursor, AssetCategory.ROOMS, self.read_room)

        tail = GameTail()
        tail.last_instance_id = cursor.read_uint32()
        tail.last_tile_id = cursor.read_uint32()

        self._read_category(cursor, AssetCategory.INCLUDE_FILES, self.read_include_file)

        self._log("Get Game Information")
        tail.info = self.read_game_info(cursor)

        self._log("Skip Library Init Code")
        self.skip_library_init_code(cursor)

        self._log("Get Room Order")
        tail.room_order = self.read_room_order(cursor)
        return tail

    def _read_category(self,
                       cursor: Cursor,
                       category: AssetCategory,
                       read_record: Callable[[Cursor], Any],
                       compressed: bool = True) -> None:
        """Read one versioned, counted category and commit it."""
        self._log(f"Get {category.value.replace('_', ' ').title()}")
        cursor.skip(4)  # Data version
        count = cursor.check_count(cursor.read_uint32())

        records: List[Optional[Any]] = []
        for _ in range(count):
            if not compressed:
                records.append(read_record(cursor))
                continue
            data = self.inflater.inflate_cursor(cursor)
            if not data.read_bool():
                records.append(None)
                continue
            records.append(read_record(data))

        self.assets.commit(category, records, count)

    # ========== Extensions ==========

    def read_extensions(self, cursor: Cursor) -> None:
        """Read the extensions category and unpack each extension's files."""
        cursor.skip(4)  # Data version, 700
        count = cursor.check_count(cursor.read_uint32())
        records: List[Optional[Any]] = [self.read_extension(cursor) for _ in range(count)]
        self.assets.commit(AssetCategory.EXTENSIONS, records, count)

    def read_extension(self, cursor: Cursor) -> Extension:
        ext = Extension()
        cursor.skip(4)  # Data version, 700
        ext.name = self._text(cursor)
        ext.folder_name = self._text(cursor)

        file_count = cursor.check_count(cursor.read_uint32())
        ext.files = [self._read_extension_file(cursor) for _ in range(file_count)]

        payload = bytearray(cursor.read_string())
        if file_count:
            self._unpack_extension_payload(ext, payload)
        return ext

    def _read_extension_file(self, cursor: Cursor) -> ExtensionFile:
        ext_file = ExtensionFile()
        cursor.skip(4)  # Data version, 700
        ext_file.file_name = self._text(cursor)
        ext_file.kind = cursor.read_uint32()
        ext_file.initializer = self._text(cursor)
        ext_file.finalizer = self._text(cursor)

        function_count = cursor.check_count(cursor.read_uint32())
        for _ in range(function_count):
            function = ExtensionFunction()
            cursor.skip(4)  # Data version, 700
            function.name = self._text(cursor)
            function.external_name = self._text(cursor)
            function.convention = cursor.read_uint32()
            cursor.skip(4)  # Function id, unused
            function.arg_count = cursor.read_uint32()
            if function.arg_count > EXTENSION_ARG_SLOTS:
                raise CorruptBlock(
                    f"Extension function {function.name} declares {function.arg_count} arguments"
                )
            function.arg_types = cursor.read_uint32_array(EXTENSION_ARG_SLOTS)
            function.return_type = cursor.read_uint32()
            ext_file.functions.append(function)

        constant_count = cursor.check_count(cursor.read_uint32())
        for _ in range(constant_count):
            cursor.skip(4)  # Data version, 700
            name = self._text(cursor)
            value = self._text(cursor)
            ext_file.constants.append(ExtensionConstant(name=name, value=value))

        return ext_file

    def _unpack_extension_payload(self, ext: Extension, payload: bytearray) -> None:
        """
        Descramble an extension payload and inflate one block per file.

        The payload starts with the scrambling seed; the first byte after it
        is stored in the clear.
        """
        seed = Cursor(payload).read_uint32()
        ExtensionFileDescrambler(seed).descramble(payload, 4)

        data = Cursor(payload, 4)
        for ext_file in ext.files:
            ext_file.data = bytes(self.inflater.inflate(data))

    # ========== Compressed Categories ==========

    def read_trigger(self, data: Cursor) -> Trigger:
        trigger = Trigger()
        data.skip(4)  # Data version, 800
        trigger.name = self._text(data)
        trigger.condition_code = data.read_string()
        trigger.condition = self.registry.register_expression(trigger.condition_code)
        trigger.check_moment = data.read_uint32()
        trigger.constant_name = self._text(data)
        return trigger

    def read_constant(self, cursor: Cursor) -> Constant:
        name = self._text(cursor)
        value = self._text(cursor)
        return Constant(name=name, value=value)

    def read_sound(self, data: Cursor) -> Sound:
        sound = Sound()
        sound.name = self._text(data)
        data.skip(4)  # Data version, 800
        sound.kind = data.read_uint32()
        sound.file_type = self._text(data)
        sound.file_name = self._text(data)
        if data.read_bool():
            sound.data = data.read_string()
        sound.effects = data.read_uint32()
        sound.volume = data.read_double()
        sound.pan = data.read_double()
        sound.preload = data.read_bool()
        return sound

    def read_sprite(self, data: Cursor) -> Sprite:
        sprite = Sprite()
        sprite.name = self._text(data)
        data.skip(4)  # Data version, 800
        sprite.origin_x = data.read_int32()
        sprite.origin_y = data.read_int32()

        frame_count = data.check_count(data.read_uint32(), 16)
        if frame_count == 0:
            return sprite

        for i in range(frame_count):
            data.skip(4)  # Data version, 800
            width = data.read_uint32()
            height = data.read_uint32()
            length = data.read_uint32()
            if length != width * height * 4:
                raise CorruptBlock(
                    f"Sprite {sprite.name} frame {i}: {length} pixel bytes for {width}x{height}"
                )
            pixels = swap_red_blue(data.read_bytes(length))
            image = self.images.make_image(width, height, sprite.origin_x, sprite.origin_y, pixels)
            sprite.frames.append(SpriteFrame(width=width, height=height, image=image))
            if i == 0:
                sprite.width = width
                sprite.height = height

        sprite.separate_collision = data.read_bool()
        map_count = frame_count if sprite.separate_collision else 1
        for _ in range(map_count):
            sprite.collision_maps.append(self._read_collision_map(data))
        return sprite

    def _read_collision_map(self, data: Cursor) -> CollisionMap:
        data.skip(4)  # Data version, 800
        collision = data.read_class(CollisionMap)
        cells = data.check_count(collision.width * collision.height)
        collision.mask = [cell != 0 for cell in data.read_uint32_array(cells)]
        return collision

    def read_background(self, data: Cursor) -> Background:
        background = Background()
        background.name = self._text(data)
        data.skip(8)  # Data versions, 710 and 800
        background.width = data.read_uint32()
        background.height = data.read_uint32()
        if background.width > 0 and background.height > 0:
            length = data.read_uint32()
            if length != background.width * background.height * 4:
                raise CorruptBlock(
                    f"Background {background.name}: {length} pixel bytes for "
                    f"{background.width}x{background.height}"
                )
            pixels = swap_red_blue(data.read_bytes(length))
            background.image = self.images.make_image(
                background.width, background.height, 0, 0, pixels
            )
        return background

    def read_path(self, data: Cursor) -> Path:
        path = Path()
        path.name = self._text(data)
        data.skip(4)  # Data version, 530
        path.kind = data.read_uint32()
        path.closed = data.read_bool()
        path.precision = data.read_uint32()
        point_count = data.read_uint32()
        path.points = data.read_class_array(PathPoint, point_count)
        return path

    def read_script(self, data: Cursor) -> Script:
        script = Script()
        script.name = self._text(data)
        data.skip(4)  # Data version, 800
        script.source = data.read_string()
        script.code = self.registry.register(script.source)
        return script

    def read_font(self, data: Cursor) -> Font:
        font = Font()
        font.name = self._text(data)
        data.skip(4)  # Data version, 800
        font.font_name = self._text(data)
        font.size = data.read_uint32()
        font.bold = data.read_bool()
        font.italic = data.read_bool()
        font.range_begin = data.read_uint32()
        font.range_end = data.read_uint32()

        if self.revision == Revision.GM81:
            font.charset = (font.range_begin >> 24) & 0xFF
            font.aa_level = (font.range_begin >> 16) & 0xFF
            font.range_begin &= 0xFFFF

        font.glyph_map = data.read_uint32_array(FONT_GLYPH_WORDS)
        font.image_width = data.read_uint32()
        font.image_height = data.read_uint32()
        length = data.read_uint32()
        if length != font.image_width * font.image_height:
            raise CorruptBlock(
                f"Font {font.name}: {length} alpha bytes for "
                f"{font.image_width}x{font.image_height}"
            )
        alpha = data.read_bytes(length)
        font.image = self.images.make_image(
            font.image_width, font.image_height, 0, 0, alpha_to_rgba(alpha)
        )
        return font

    def read_timeline(self, data: Cursor) -> Timeline:
        timeline = Timeline()
        timeline.name = self._text(data)
        data.skip(4)  # Data version, 500
        moment_count = data.check_count(data.read_uint32(), 12)
        for _ in range(moment_count):
            moment = data.read_uint32()
            if moment in timeline.moments:
                raise CorruptBlock(f"Timeline {timeline.name}: moment {moment} stored twice")
            timeline.moments[moment] = read_action_list(data, self.registry, self.encoding)
        return timeline

    def read_object(self, data: Cursor) -> Object:
        obj = Object()
        obj.name = self._text(data)
        data.skip(4)  # Data version, 430
        obj.sprite_index = to_reference(data.read_int32())
        obj.solid = data.read_bool()
        obj.visible = data.read_bool()
        obj.depth = data.read_int32()
        obj.persistent = data.read_bool()
        obj.parent_index = to_reference(data.read_int32())
        obj.mask_index = to_reference(data.read_int32())
        data.skip(4)  # Event table version

        for event_type in range(EVENT_TYPE_COUNT):
            obj.events[event_type] = self._read_event_list(data, obj.name, event_type)
        return obj

    def _read_event_list(self, data: Cursor, name: str, event_type: int) -> Dict[int, List[CodeAction]]:
        events: Dict[int, List[CodeAction]] = {}
        while True:
            sub_index = data.read_uint32()
            if sub_index == EVENT_LIST_END:
                return events
            if sub_index in events:
                raise CorruptBlock(f"Object {name}: event {event_type}/{sub_index} stored twice")
            events[sub_index] = read_action_list(data, self.registry, self.encoding)

    def read_room(self, data: Cursor) -> Room:
        room = Room()
        room.name = self._text(data)
        data.skip(4)  # Data version, 541
        room.caption = self._text(data)
        room.width = data.read_uint32()
        room.height = data.read_uint32()
        room.speed = data.read_uint32()
        room.persistent = data.read_bool()
        room.background_colour = data.read_uint32()
        room.draw_background_colour = data.read_bool()
        room.creation_code = data.read_string()
        room.creation = self.registry.register(room.creation_code)

        room.backgrounds = data.read_class_array(RoomBackground, data.read_uint32())
        room.enable_views = data.read_bool()
        room.views = data.read_class_array(RoomView, data.read_uint32())

        instance_count = data.check_count(data.read_uint32(), 20)
        for _ in range(instance_count):
            instance = data.read_class(RoomInstance)
            instance.creation_code = data.read_string()
            instance.creation = self.registry.register(instance.creation_code)
            room.instances.append(instance)

        room.tiles = data.read_class_array(RoomTile, data.read_uint32())
        return room

    def read_include_file(self, data: Cursor) -> IncludeFile:
        include = IncludeFile()
        data.skip(4)  # Data version, 800
        include.file_name = self._text(data)
        include.file_path = self._text(data)
        data_exists = data.read_bool()
        include.original_size = data.read_uint32()
        stored_in_gmk = data.read_bool()
        if data_exists and stored_in_gmk:
            include.data = data.read_string()
        include.export_flags = data.read_uint32()
        include.export_folder = self._text(data)
        include.overwrite = data.read_bool()
        include.free_memory = data.read_bool()
        include.remove_at_game_end = data.read_bool()
        return include

    # ========== Trailing Sections ==========

    def read_game_info(self, cursor: Cursor) -> GameInfo:
        cursor.skip(4)  # Data version, 800
        data = self.inflater.inflate_cursor(cursor)
        info = GameInfo()
        info.background_colour = data.read_uint32()
        info.separate_window = data.read_bool()
        info.caption = self._text(data)
        info.left = data.read_int32()
        info.top = data.read_int32()
        info.width = data.read_uint32()
        info.height = data.read_uint32()
        info.show_border = data.read_bool()
        info.allow_window_resize = data.read_bool()
        info.on_top = data.read_bool()
        info.freeze_game = data.read_bool()
        info.text = self._text(data)
        return info

    def skip_library_init_code(self, cursor: Cursor) -> None:
        """Skip the library initialization strings, which are never used."""
        cursor.skip(4)  # Data version, 500
        count = cursor.check_count(cursor.read_uint32())
        for _ in range(count):
            cursor.skip(cursor.read_uint32())

    def read_room_order(self, cursor: Cursor) -> List[int]:
        cursor.skip(4)  # Data version, 700
        count = cursor.check_count(cursor.read_uint32())
        return cursor.read_uint32_array(count)
