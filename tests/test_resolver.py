"""Tests for identity resolution and compilation order."""

import pytest

from gm8_loader.errors import CompileError, CorruptBlock
from gm8_loader.gm8.assets import AssetCategory, AssetManager
from gm8_loader.gm8.enums import EventType
from gm8_loader.gm8.resolver import IdentityResolver
from gm8_loader.gm8.structures import (
    CodeAction, Object, Room, RoomInstance, Script, Timeline, Trigger,
)
from gm8_loader.runtime.code_registry import RecordingCodeRegistry


def _actions(*handles):
    return [CodeAction(code_handles=list(handles))]


def _objects(*objects):
    assets = AssetManager()
    assets.commit(AssetCategory.OBJECTS, list(objects), len(objects))
    return assets


class FailingRegistry(RecordingCodeRegistry):
    """Rejects one handle."""

    def __init__(self, bad_handle, raise_error=False):
        super().__init__()
        self.bad_handle = bad_handle
        self.raise_error = raise_error

    def compile(self, handle):
        super().compile(handle)
        if handle == self.bad_handle:
            if self.raise_error:
                raise RuntimeError("syntax error")
            return False
        return True


def test_identity_chain_and_children():
    base = Object(name="base")
    middle = Object(name="middle", parent_index=0)
    leaf = Object(name="leaf", parent_index=1)
    assets = _objects(base, None, middle, leaf)
    middle.parent_index = 0
    leaf.parent_index = 2
    IdentityResolver(assets, RecordingCodeRegistry()).link_objects()
    assert leaf.identities == (3, 2, 0)
    assert base.identities == (0,)
    assert sorted(base.children) == [2, 3]
    assert middle.children == [3]
    assert leaf.children == []


def test_inherited_events_child_overrides_parent():
    parent = Object(name="parent")
    parent.events[EventType.CREATE][0] = _actions("parent_create")
    parent.events[EventType.ALARM][1] = _actions("parent_alarm1")
    child = Object(name="child", parent_index=0)
    child.events[EventType.CREATE][0] = _actions("child_create")
    assets = _objects(parent, child)

    IdentityResolver(assets, RecordingCodeRegistry()).link_objects()
    inherited = child.inherited_events
    assert inherited[EventType.CREATE][0][0].code_handles == ["child_create"]
    assert inherited[EventType.ALARM][1][0].code_handles == ["parent_alarm1"]
    assert child.events[EventType.ALARM] == {}
    assert parent.inherited_events[EventType.CREATE][0][0].code_handles == ["parent_create"]


def test_parent_loop_aborts():
    a = Object(name="a", parent_index=1)
    b = Object(name="b", parent_index=0)
    with pytest.raises(CorruptBlock):
        IdentityResolver(_objects(a, b), RecordingCodeRegistry()).link_objects()


def test_self_parent_aborts():
    with pytest.raises(CorruptBlock):
        IdentityResolver(_objects(Object(parent_index=0)), RecordingCodeRegistry()).link_objects()


def test_missing_parent_aborts():
    with pytest.raises(CorruptBlock):
        IdentityResolver(_objects(Object(parent_index=1), None), RecordingCodeRegistry()).link_objects()


def test_room_order_must_name_existing_rooms():
    assets = AssetManager()
    assets.commit(AssetCategory.ROOMS, [Room(name="r0"), None], 2)
    resolver = IdentityResolver(assets, RecordingCodeRegistry())
    resolver.check_room_order([0])
    with pytest.raises(CorruptBlock):
        resolver.check_room_order([0, 1])


def _populated_assets(registry):
    assets = AssetManager()
    room_handle = registry.register(b"room")
    instance_handle = registry.register(b"instance")
    trigger_handle = registry.register_expression(b"cond")
    object_handle = registry.register(b"object")
    timeline_handle = registry.register(b"timeline")
    script_handle = registry.register(b"script")

    obj = Object(name="obj")
    obj.events[EventType.STEP][0] = _actions(object_handle)
    assets.commit(AssetCategory.SCRIPTS, [Script(name="scr", code=script_handle)], 1)
    assets.commit(AssetCategory.TIMELINES, [Timeline(name="tl", moments={0: _actions(timeline_handle)})], 1)
    assets.commit(AssetCategory.OBJECTS, [obj], 1)
    assets.commit(AssetCategory.TRIGGERS, [Trigger(name="trg", condition=trigger_handle)], 1)
    room = Room(name="rm", creation=room_handle,
                instances=[RoomInstance(creation=instance_handle)])
    assets.commit(AssetCategory.ROOMS, [room], 1)
    return assets


def test_compile_order():
    registry = RecordingCodeRegistry()
    assets = _populated_assets(registry)
    IdentityResolver(assets, registry).resolve([0])
    compiled = [registry.entries[h].code for h in registry.compile_order]
    assert compiled == [b"script", b"timeline", b"object", b"cond", b"room", b"instance"]


def test_first_compile_failure_aborts():
    registry = FailingRegistry(bad_handle=4)  # timeline
    assets = _populated_assets(registry)
    with pytest.raises(CompileError) as info:
        IdentityResolver(assets, registry).compile_all()
    assert info.value.category == "timelines"
    assert info.value.index == 0
    # Nothing after the failing handle is compiled
    assert registry.compile_order == [5, 4]


def test_registry_exception_becomes_compile_error():
    registry = FailingRegistry(bad_handle=2, raise_error=True)  # trigger
    assets = _populated_assets(registry)
    with pytest.raises(CompileError) as info:
        IdentityResolver(assets, registry).compile_all()
    assert info.value.category == "triggers"
    assert "syntax error" in str(info.value)
