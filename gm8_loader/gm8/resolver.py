"""
Identity resolution and code compilation.

Runs once every category is loaded. Links objects to their parents, derives
each object's identity chain, descendants and inherited event table, checks
the room order, and finally asks the code registry to compile everything
that was registered during the load.
"""

from typing import Any, Dict, List

from ..errors import CompileError, CorruptBlock, LoadError
from ..runtime.code_registry import CodeRegistry
from .assets import AssetCategory, AssetManager
from .enums import EVENT_TYPE_COUNT
from .structures import CodeAction, Object


class IdentityResolver:
    """
    Post-load pass over a populated AssetManager.

    Attributes:
        assets: The loaded asset tables
        registry: Registry that holds every code handle
        verbose: Print progress messages
    """

    def __init__(self, assets: AssetManager, registry: CodeRegistry, verbose: bool = False):
        self.assets = assets
        self.registry = registry
        self.verbose = verbose

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)

    def resolve(self, room_order: List[int]) -> None:
        """Run every step: object linkage, room order check, compilation."""
        self._log("Resolve Object Parents")
        self.link_objects()
        self.check_room_order(room_order)
        self.compile_all()

    # ========== Object Linkage ==========

    def _parent_chain(self, index: int) -> List[int]:
        """Ancestors of an object, nearest first."""
        chain: List[int] = []
        seen = {index}
        obj: Object = self.assets.get(AssetCategory.OBJECTS, index)
        while obj.parent_index is not None:
            parent = obj.parent_index
            if parent in seen:
                raise CorruptBlock(f"Object {obj.name} has a parent loop through object {parent}")
            parent_obj = self.assets.get(AssetCategory.OBJECTS, parent)
            if parent_obj is None:
                raise CorruptBlock(f"Object {obj.name} has missing parent {parent}")
            seen.add(parent)
            chain.append(parent)
            obj = parent_obj
        return chain

    def link_objects(self) -> None:
        """
        Derive identities, children and inherited events for every object.

        Raises:
            CorruptBlock: If a parent is missing or the parents form a loop
        """
        objects = list(self.assets.iter_existing(AssetCategory.OBJECTS))
        chains: Dict[int, List[int]] = {index: self._parent_chain(index) for index, _ in objects}

        for index, obj in objects:
            obj.identities = (index, *chains[index])
            obj.children = []

        for index, _ in objects:
            for ancestor in chains[index]:
                self.assets.get(AssetCategory.OBJECTS, ancestor).children.append(index)

        for index, obj in objects:
            obj.inherited_events = self._inherited_events(obj, chains[index])

    def _inherited_events(self, obj: Object, chain: List[int]) -> List[Dict[int, List[CodeAction]]]:
        # Apply the most distant ancestor first so nearer definitions win
        table: List[Dict[int, List[CodeAction]]] = [{} for _ in range(EVENT_TYPE_COUNT)]
        sources = [self.assets.get(AssetCategory.OBJECTS, i) for i in reversed(chain)] + [obj]
        for source in sources:
            for event_type in range(EVENT_TYPE_COUNT):
                table[event_type].update(source.events[event_type])
        return table

    # ========== Room Order ==========

    def check_room_order(self, room_order: List[int]) -> None:
        """
        Raises:
            CorruptBlock: If the room order names a missing room
        """
        for position, room in enumerate(room_order):
            if not self.assets.exists(AssetCategory.ROOMS, room):
                raise CorruptBlock(f"Room order entry {position} names missing room {room}")

    # ========== Compilation ==========

    def _compile(self, handle: Any, category: AssetCategory, index: int) -> None:
        try:
            ok = self.registry.compile(handle)
        except CompileError as e:
            if e.category is None:
                raise CompileError(str(e), category.value, index) from e
            raise
        except LoadError:
            raise
        except Exception as e:
            raise CompileError(f"Code registry failed: {e}", category.value, index) from e
        if not ok:
            raise CompileError("Code failed to compile", category.value, index)

    def _compile_actions(self, actions: List[CodeAction], category: AssetCategory, index: int) -> None:
        for action in actions:
            for handle in action.code_handles:
                self._compile(handle, category, index)

    def compile_all(self) -> None:
        """
        Compile every registered handle.

        Order is scripts, timelines, objects, triggers, then rooms (each room's
        creation code followed by its instances' creation code).

        Raises:
            CompileError: On the first failure
        """
        self._log("Compile Scripts")
        for index, script in self.assets.iter_existing(AssetCategory.SCRIPTS):
            self._compile(script.code, AssetCategory.SCRIPTS, index)

        self._log("Compile Timelines")
        for index, timeline in self.assets.iter_existing(AssetCategory.TIMELINES):
            for moment in sorted(timeline.moments):
                self._compile_actions(timeline.moments[moment], AssetCategory.TIMELINES, index)

        self._log("Compile Objects")
        for index, obj in self.assets.iter_existing(AssetCategory.OBJECTS):
            for events in obj.events:
                for sub_index in sorted(events):
                    self._compile_actions(events[sub_index], AssetCategory.OBJECTS, index)

        self._log("Compile Triggers")
        for index, trigger in self.assets.iter_existing(AssetCategory.TRIGGERS):
            self._compile(trigger.condition, AssetCategory.TRIGGERS, index)

        self._log("Compile Rooms")
        for index, room in self.assets.iter_existing(AssetCategory.ROOMS):
            self._compile(room.creation, AssetCategory.ROOMS, index)
            for instance in room.instances:
                self._compile(instance.creation, AssetCategory.ROOMS, index)
