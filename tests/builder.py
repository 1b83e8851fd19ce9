"""
Synthetic GameMaker 8 container builder used by the tests.

Records are built as plain byte strings in stored layout; GameBuilder
assembles them into a complete GM8.0 or GM8.1 executable, applying the real
cipher inverses from the package.
"""

import random
import struct
import zlib
from typing import Dict, List, Optional, Sequence, Tuple, Union

from gm8_loader.crypto.crc32 import crc32_register
from gm8_loader.crypto.extension_cipher import ExtensionFileDescrambler
from gm8_loader.crypto.stream_cipher import StreamCipher, make_key
from gm8_loader.crypto.substitution import encrypt_span
from gm8_loader.gm8.assets import AssetCategory
from gm8_loader.gm8.container import (
    GM80_MARKER, GM80_MARKER_OFFSET, GM81_SCAN_OFFSET, GM81_HEADER_SKIP,
)
from gm8_loader.gm8.enums import ActionKind, ArgumentType, ExecutionType
from gm8_loader.gm8.structures import EXTENSION_ARG_SLOTS, FONT_GLYPH_WORDS

Text = Union[str, bytes]


class Writer:
    """Little-endian writer with chainable calls."""

    def __init__(self):
        self.buf = bytearray()

    def u32(self, value: int) -> 'Writer':
        self.buf += struct.pack('<I', value & 0xFFFFFFFF)
        return self

    def i32(self, value: int) -> 'Writer':
        self.buf += struct.pack('<i', value)
        return self

    def bool(self, value: bool) -> 'Writer':
        return self.u32(1 if value else 0)

    def f64(self, value: float) -> 'Writer':
        self.buf += struct.pack('<d', value)
        return self

    def string(self, value: Text) -> 'Writer':
        if isinstance(value, str):
            value = value.encode('cp1252')
        self.u32(len(value))
        self.buf += value
        return self

    def raw(self, value: bytes) -> 'Writer':
        self.buf += value
        return self

    def block(self, payload: bytes) -> 'Writer':
        compressed = zlib.compress(payload)
        self.u32(len(compressed))
        self.buf += compressed
        return self

    def getvalue(self) -> bytes:
        return bytes(self.buf)


def block(payload: bytes) -> bytes:
    return Writer().block(payload).getvalue()


# ========== Settings and game information ==========

def settings_payload(loading_bar: int = 0,
                     back: Optional[bytes] = None,
                     front: Optional[bytes] = None,
                     custom_image: Optional[bytes] = None,
                     uninitialized: int = 0) -> bytes:
    w = Writer()
    for _ in range(23):
        w.u32(0)
    w.u32(loading_bar)
    if loading_bar:
        w.bool(back is not None)
        if back is not None:
            w.block(back)
        w.bool(front is not None)
        if front is not None:
            w.block(front)
    w.bool(custom_image is not None)
    if custom_image is not None:
        w.block(custom_image)
    for _ in range(6):
        w.u32(0)
    w.u32(uninitialized)
    return w.getvalue()


def game_info_payload(caption: str = "Game Info", text: str = "Help text") -> bytes:
    return (Writer()
            .u32(0xFFFFE1).bool(False).string(caption)
            .i32(-1).i32(-1).u32(600).u32(400)
            .bool(True).bool(True).bool(False).bool(True)
            .string(text)
            .getvalue())


# ========== Actions ==========

def action(kind: int = ActionKind.NORMAL,
           execution_type: int = ExecutionType.FUNCTION,
           function_code: Text = b"",
           param_types: Sequence[int] = (),
           arguments: Sequence[Text] = (),
           param_count: Optional[int] = None,
           applies_to: int = -1) -> bytes:
    if param_count is None:
        param_count = len(arguments)
    w = (Writer()
         .u32(440).u32(1).u32(101).u32(kind)
         .bool(False).bool(False).bool(True)
         .u32(execution_type)
         .string("action_fn").string(function_code)
         .u32(param_count))
    w.u32(len(param_types))
    for t in param_types:
        w.u32(t)
    w.i32(applies_to).bool(False)
    w.u32(len(arguments))
    for arg in arguments:
        w.string(arg)
    w.bool(False)
    return w.getvalue()


def code_action(code: Text) -> bytes:
    return action(
        kind=ActionKind.CODE,
        execution_type=ExecutionType.CODE,
        param_types=[ArgumentType.STRING],
        arguments=[code],
    )


def action_list(actions: Sequence[bytes]) -> bytes:
    w = Writer().u32(400).u32(len(actions))
    for a in actions:
        w.raw(a)
    return w.getvalue()


# ========== Asset payloads (inside their compressed block) ==========

def sprite_payload(name: str = "spr",
                   frames: Sequence[Tuple[int, int, bytes]] = ((1, 1, b'\x01\x02\x03\x04'),),
                   origin: Tuple[int, int] = (0, 0),
                   separate_collision: bool = False,
                   frame_length: Optional[int] = None) -> bytes:
    w = Writer().u32(1).string(name).u32(800).i32(origin[0]).i32(origin[1])
    w.u32(len(frames))
    for width, height, pixels in frames:
        w.u32(800).u32(width).u32(height)
        w.u32(len(pixels) if frame_length is None else frame_length)
        w.raw(pixels)
    if frames:
        w.bool(separate_collision)
        maps = frames if separate_collision else frames[:1]
        for width, height, _ in maps:
            w.u32(800).u32(width).u32(height).u32(0).u32(width - 1).u32(height - 1).u32(0)
            for _ in range(width * height):
                w.u32(1)
    return w.getvalue()


def sound_payload(name: str = "snd", data: Optional[bytes] = b"RIFF") -> bytes:
    w = Writer().u32(1).string(name).u32(800).u32(0).string(".wav").string("snd.wav")
    w.bool(data is not None)
    if data is not None:
        w.string(data)
    return w.u32(0).f64(1.0).f64(0.0).bool(True).getvalue()


def background_payload(name: str = "bg", width: int = 2, height: int = 1,
                       pixels: Optional[bytes] = None) -> bytes:
    if pixels is None:
        pixels = bytes(range(width * height * 4))
    w = Writer().u32(1).string(name).u32(710).u32(800).u32(width).u32(height)
    if width and height:
        w.u32(len(pixels)).raw(pixels)
    return w.getvalue()


def path_payload(name: str = "pth", points: Sequence[Tuple[float, float, float]] = ((0.0, 0.0, 100.0),)) -> bytes:
    w = Writer().u32(1).string(name).u32(530).u32(0).bool(True).u32(4).u32(len(points))
    for x, y, speed in points:
        w.f64(x).f64(y).f64(speed)
    return w.getvalue()


def script_payload(name: str = "scr", code: Text = b"return 1;") -> bytes:
    return Writer().u32(1).string(name).u32(800).string(code).getvalue()


def font_payload(name: str = "fnt", range_begin: int = 32, width: int = 2, height: int = 2,
                 alpha: Optional[bytes] = None) -> bytes:
    if alpha is None:
        alpha = bytes([0, 64, 128, 255])[:width * height]
    w = (Writer().u32(1).string(name).u32(800).string("Arial").u32(12)
         .bool(True).bool(False).u32(range_begin).u32(127))
    for i in range(FONT_GLYPH_WORDS):
        w.u32(i)
    return w.u32(width).u32(height).u32(len(alpha)).raw(alpha).getvalue()


def timeline_payload(name: str = "tl", moments: Optional[Dict[int, Sequence[bytes]]] = None) -> bytes:
    moments = moments or {}
    w = Writer().u32(1).string(name).u32(500).u32(len(moments))
    for index, actions in moments.items():
        w.u32(index).raw(action_list(actions))
    return w.getvalue()


def object_payload(name: str = "obj",
                   sprite: int = -1,
                   parent: int = -1,
                   mask: int = -1,
                   events: Optional[Dict[int, Dict[int, Sequence[bytes]]]] = None) -> bytes:
    events = events or {}
    w = (Writer().u32(1).string(name).u32(430)
         .i32(sprite).bool(False).bool(True).i32(0).bool(False)
         .i32(parent).i32(mask).u32(0))
    for event_type in range(12):
        for sub_index, actions in events.get(event_type, {}).items():
            w.u32(sub_index).raw(action_list(actions))
        w.u32(0xFFFFFFFF)
    return w.getvalue()


def room_payload(name: str = "rm",
                 creation_code: Text = b"",
                 instances: Sequence[Tuple[int, int, int, int, Text]] = (),
                 backgrounds: int = 0,
                 views: int = 0,
                 tiles: int = 0) -> bytes:
    w = (Writer().u32(1).string(name).u32(541).string("Caption")
         .u32(640).u32(480).u32(30).bool(False).u32(0xC0C0C0).bool(True)
         .string(creation_code))
    w.u32(backgrounds)
    for i in range(backgrounds):
        w.bool(True).bool(False).i32(i).i32(0).i32(0).bool(True).bool(True).i32(0).i32(0).bool(False)
    w.bool(views > 0).u32(views)
    for _ in range(views):
        w.bool(True)
        for _ in range(12):
            w.u32(0)
        w.i32(-1)
    w.u32(len(instances))
    for x, y, obj, instance_id, code in instances:
        w.i32(x).i32(y).u32(obj).u32(instance_id).string(code)
    w.u32(tiles)
    for i in range(tiles):
        w.i32(0).i32(0).i32(-1).u32(0).u32(0).u32(16).u32(16).i32(1000).u32(10000001 + i)
    return w.getvalue()


def trigger_payload(name: str = "trg", condition: Text = b"x > 1") -> bytes:
    return (Writer().u32(1).u32(800).string(name).string(condition)
            .u32(0).string("ev_trg").getvalue())


def include_file_payload(file_name: str = "data.txt", data: Optional[bytes] = b"hello") -> bytes:
    w = Writer().u32(1).u32(800).string(file_name).string("C:\\data.txt")
    w.bool(data is not None).u32(len(data) if data else 0).bool(data is not None)
    if data is not None:
        w.string(data)
    return (w.u32(0).string("").bool(False).bool(True).bool(False)).getvalue()


def extension_record(name: str = "ext",
                     files: Sequence[Tuple[str, bytes]] = (("ext.dll", b"MZ extension"),),
                     seed: int = 12345) -> bytes:
    w = Writer().u32(700).string(name).string("ext_folder").u32(len(files))
    for file_name, _ in files:
        w.u32(700).string(file_name).u32(1).string("ext_init").string("ext_final")
        w.u32(1)
        w.u32(700).string("ext_fn").string("ExtFn").u32(12).u32(0).u32(2)
        for i in range(EXTENSION_ARG_SLOTS):
            w.u32(2 if i < 2 else 0)
        w.u32(2)
        w.u32(1).u32(700).string("EXT_CONST").string("42")

    payload = bytearray(struct.pack('<I', seed & 0xFFFFFFFF))
    for _, data in files:
        payload += block(data)
    if files:
        ExtensionFileDescrambler(seed).scramble(payload, 4)
    return w.string(bytes(payload)).getvalue()


PLACEHOLDER = struct.pack('<I', 0)

COMPRESSED_VERSIONS = {
    AssetCategory.TRIGGERS: 800,
    AssetCategory.SOUNDS: 800,
    AssetCategory.SPRITES: 800,
    AssetCategory.BACKGROUNDS: 800,
    AssetCategory.PATHS: 420,
    AssetCategory.SCRIPTS: 800,
    AssetCategory.FONTS: 800,
    AssetCategory.TIMELINES: 800,
    AssetCategory.OBJECTS: 800,
    AssetCategory.ROOMS: 800,
    AssetCategory.INCLUDE_FILES: 800,
}


class GameBuilder:
    """
    Assembles a complete synthetic game executable.

    Compressed categories hold payloads; ``None`` entries become placeholder
    slots.
    """

    def __init__(self):
        self.settings = settings_payload()
        self.extensions: List[bytes] = []
        self.constants: List[Tuple[str, str]] = []
        self.payloads: Dict[AssetCategory, List[Optional[bytes]]] = {
            category: [] for category in COMPRESSED_VERSIONS
        }
        self.game_info = game_info_payload()
        self.library_init: List[bytes] = []
        self.room_order: List[int] = []
        self.last_instance_id = 100001
        self.last_tile_id = 10000001
        self.garbage_words = 3
        self.swap_seed = 1

    def add(self, category: AssetCategory, payload: Optional[bytes]) -> int:
        self.payloads[category].append(payload)
        return len(self.payloads[category]) - 1

    def _category(self, w: Writer, category: AssetCategory) -> None:
        entries = self.payloads[category]
        w.u32(COMPRESSED_VERSIONS[category]).u32(len(entries))
        for payload in entries:
            w.block(PLACEHOLDER if payload is None else payload)

    def body(self) -> bytes:
        """Everything from the extensions version word to the room order."""
        w = Writer()
        w.u32(700).u32(len(self.extensions))
        for ext in self.extensions:
            w.raw(ext)
        self._category(w, AssetCategory.TRIGGERS)
        w.u32(800).u32(len(self.constants))
        for name, value in self.constants:
            w.string(name).string(value)
        for category in (AssetCategory.SOUNDS, AssetCategory.SPRITES, AssetCategory.BACKGROUNDS,
                         AssetCategory.PATHS, AssetCategory.SCRIPTS, AssetCategory.FONTS,
                         AssetCategory.TIMELINES, AssetCategory.OBJECTS, AssetCategory.ROOMS):
            self._category(w, category)
        w.u32(self.last_instance_id).u32(self.last_tile_id)
        self._category(w, AssetCategory.INCLUDE_FILES)
        w.u32(800).block(self.game_info)
        w.u32(500).u32(len(self.library_init))
        for entry in self.library_init:
            w.string(entry)
        w.u32(700).u32(len(self.room_order))
        for room in self.room_order:
            w.u32(room)
        return w.getvalue()

    def swap_table(self) -> bytes:
        table = list(range(256))
        random.Random(self.swap_seed).shuffle(table)
        return bytes(table)

    def data_section(self) -> bytes:
        """Settings block, wrapper and the encrypted data block."""
        w = Writer()
        w.u32(800).block(self.settings)
        w.u32(8).raw(b'WRAPPER1').u32(4).raw(b'DLL2')

        span = Writer().u32(self.garbage_words).raw(bytes((self.garbage_words + 6) * 4))
        span.raw(self.body())
        span_bytes = bytearray(span.getvalue())
        table = self.swap_table()
        encrypt_span(span_bytes, 0, len(span_bytes), table)

        garbage1, garbage2 = 5, 2
        w.u32(garbage1).u32(garbage2)
        w.raw(bytes(range(garbage1 * 4)))
        w.raw(table)
        w.raw(bytes(garbage2 * 4))
        w.u32(len(span_bytes)).raw(bytes(span_bytes))
        return w.getvalue()

    def build_gm80(self) -> bytes:
        buf = bytearray(GM80_MARKER_OFFSET)
        buf[0:2] = b'MZ'
        buf += struct.pack('<I', GM80_MARKER) + bytes(8)
        buf += self.data_section()
        return bytes(buf)

    def build_gm81(self, key_seed: int = 1234, seed1: int = 0x1A2B3C4D) -> bytes:
        buf = bytearray(GM81_SCAN_OFFSET)
        buf[0:2] = b'MZ'
        buf += struct.pack('<II', 0xF7000000, 0x00140067)
        seeds_end = len(buf) + 8
        buf += struct.pack('<II', key_seed, seed1)
        buf += bytes(GM81_HEADER_SKIP)
        buf += self.data_section()

        seed2 = crc32_register(make_key(key_seed))
        StreamCipher(seed1, seed2).apply(buf, seeds_end + (seed2 & 0xFF) + 10)
        return bytes(buf)


def minimal_game() -> GameBuilder:
    """One 1x1 sprite, one object using it and one room holding an instance."""
    game = GameBuilder()
    game.add(AssetCategory.SPRITES, sprite_payload("spr_player", frames=[(1, 1, b'\x10\x20\x30\x40')]))
    game.add(AssetCategory.OBJECTS, object_payload("obj_player", sprite=0))
    game.add(AssetCategory.ROOMS, room_payload("rm_start", instances=[(16, 32, 0, 100001, b"")]))
    game.room_order = [0]
    return game
