"""
File export of a loaded game.

Writes the code text and embedded files of a game into an output directory:

    <output>/assets.json
    <output>/scripts/<index>_<name>.gml
    <output>/triggers/<index>_<name>.gml
    <output>/rooms/<index>_<name>.gml
    <output>/rooms/<index>_<name>_instance_<id>.gml
    <output>/include_files/<file name>
    <output>/extensions/<extension>/<file name>
"""

from pathlib import Path
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import Config

from ..gm8.assets import AssetCategory
from ..gm8.loader import Game
from ..utils.string_utils import safe_filename
from .asset_json import AssetJson


class GameExporter:
    """
    Writes the contents of a loaded game to disk.

    Code is written as the raw stored bytes, so text that is not valid in the
    configured code page survives unchanged.
    """

    def __init__(self, game: Game, output_dir: str):
        """
        Initialize the exporter.

        Args:
            game: The loaded game
            output_dir: Output directory path, created on demand
        """
        self.game = game
        self.output_dir = Path(output_dir)
        self.written: List[Path] = []

    def _write(self, relative: Path, data: bytes) -> Path:
        path = self.output_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        self.written.append(path)
        return path

    def export(self, config: 'Config') -> List[Path]:
        """
        Write everything the configuration asks for.

        Returns:
            Paths of all files written
        """
        if config.dump_json:
            self.write_json()
        if config.export_scripts:
            self.export_code()
        if config.extract_include_files:
            self.export_include_files()
        if config.extract_extension_files:
            self.export_extension_files()
        return self.written

    def write_json(self) -> Path:
        """Write the assets.json summary."""
        path = self.output_dir / "assets.json"
        self.output_dir.mkdir(parents=True, exist_ok=True)
        AssetJson.from_game(self.game).save(str(path))
        self.written.append(path)
        return path

    def export_code(self) -> None:
        """Write script, trigger condition and room creation code."""
        assets = self.game.assets

        for index, script in assets.iter_existing(AssetCategory.SCRIPTS):
            name = f"{index}_{safe_filename(script.name)}.gml"
            self._write(Path("scripts") / name, script.source)

        for index, trigger in assets.iter_existing(AssetCategory.TRIGGERS):
            name = f"{index}_{safe_filename(trigger.name)}.gml"
            self._write(Path("triggers") / name, trigger.condition_code)

        for index, room in assets.iter_existing(AssetCategory.ROOMS):
            base = f"{index}_{safe_filename(room.name)}"
            if room.creation_code:
                self._write(Path("rooms") / f"{base}.gml", room.creation_code)
            for instance in room.instances:
                if instance.creation_code:
                    name = f"{base}_instance_{instance.id}.gml"
                    self._write(Path("rooms") / name, instance.creation_code)

    def export_include_files(self) -> None:
        """Write every include file whose data is stored in the game."""
        for index, include in self.game.assets.iter_existing(AssetCategory.INCLUDE_FILES):
            if include.data is None:
                continue
            name = safe_filename(include.file_name, fallback=f"include_{index}")
            self._write(Path("include_files") / name, include.data)

    def export_extension_files(self) -> None:
        """Write the unpacked files of every extension."""
        for index, ext in self.game.assets.iter_existing(AssetCategory.EXTENSIONS):
            folder = safe_filename(ext.name, fallback=f"extension_{index}")
            for file_index, ext_file in enumerate(ext.files):
                name = safe_filename(ext_file.file_name, fallback=f"file_{file_index}")
                self._write(Path("extensions") / folder / name, ext_file.data)
