"""
JSON-backed lists of file type groups and preset commands.

Both lists live in the current working directory. A missing file is
replaced by a built-in default list which is saved right away; a corrupt
file loads as an empty list.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Sequence, Type, TypeVar

log = logging.getLogger(__name__)

FILETYPES_FILE = "filetypes.json"
PRESET_FILE = "presets.json"


class ConfigError(Exception):
    """A configuration file could not be turned into records."""

    def __init__(self, path: Path, cause: Exception):
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


class ConfigCorruptError(ConfigError):
    """The file exists but is unreadable, malformed JSON, or the wrong shape."""


def _require(data: Dict[str, Any], key: str, kind: type) -> Any:
    value = data.get(key)
    if not isinstance(value, kind):
        raise ValueError(f"field '{key}' must be {kind.__name__}, got {type(value).__name__}")
    return value


@dataclass
class FileTypeGroup:
    name: str
    extensions: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileTypeGroup":
        extensions = _require(data, "extensions", list)
        if not all(isinstance(ext, str) for ext in extensions):
            raise ValueError("field 'extensions' must contain only strings")
        return cls(name=_require(data, "name", str), extensions=list(extensions))


@dataclass
class PresetCommand:
    name: str
    text: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PresetCommand":
        return cls(name=_require(data, "name", str), text=_require(data, "text", str))


T = TypeVar("T", FileTypeGroup, PresetCommand)


class ConfigStore(Generic[T]):
    """Load-or-initialize store for one JSON list of records."""

    def __init__(self, path: Path, record_type: Type[T], defaults: Callable[[], List[T]]):
        self.path = Path(path)
        self.record_type = record_type
        self.defaults = defaults

    def read(self) -> List[T]:
        """Read the backing file, raising :class:`ConfigCorruptError` on any failure."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            return [self.record_type.from_dict(item) for item in data]
        except (OSError, ValueError, TypeError, AttributeError) as e:
            raise ConfigCorruptError(self.path, e) from e

    def load(self) -> List[T]:
        if not self.path.exists():
            records = self.defaults()
            log.info(f"{self.path} not found, writing {len(records)} default entries")
            self.save(records)
            return records

        try:
            return self.read()
        except ConfigError as e:
            log.warning(f"Ignoring unusable config {e.path}: {e.cause}")
            return []

    def save(self, records: Sequence[T]) -> bool:
        """Overwrite the backing file with ``records`` as pretty-printed JSON.

        Returns False if the data could not be serialized (an empty file is
        written instead) or the file could not be written.
        """
        ok = True
        try:
            data = json.dumps([asdict(record) for record in records], indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            log.warning(f"Could not serialize {self.path}, writing it empty: {e}")
            data = ""
            ok = False

        try:
            self.path.write_text(data, encoding="utf-8")
        except OSError as e:
            log.error(f"Failed to write {self.path}: {e}")
            return False
        return ok


def default_filetypes() -> List[FileTypeGroup]:
    return [
        FileTypeGroup("Rust", ["rs"]),
        FileTypeGroup("JSON", ["json"]),
        FileTypeGroup("Lua", ["lua"]),
    ]


FUNCTION_DOCS_PRESET = """for each function, create very detailed documentation for that function, only respond with a single function and even still only respond with the documentation  and not the contents of the function itself. After providing the documentation, prompt for the next function.

provide information such as panics, parameters, all the interesting stuff about that function

write the documentation as code blocks that appear above the function, similar to how other proper documentated rust functions are with code blocks

prompt with the name of the function, do not respond with the code body of the function, only the documentation
start with the main function

use "///" for the function blocks"""

README_PRESET = """I want you to update the readme.md file. I want this readme to be the most fancy readme possible with as many fancy emojis, information, examples, and other interesting things.
any sort of flowcharts, sequence diagrams, or other things that would look really good on a public facing github page are welcome
"""


def default_presets() -> List[PresetCommand]:
    return [
        PresetCommand("Create Function Documentation", FUNCTION_DOCS_PRESET),
        PresetCommand("Create Readme", README_PRESET),
        PresetCommand("Button 3", "tbd"),
        PresetCommand("Button 4", "tbd"),
        PresetCommand("Button 5", "tbd"),
    ]


FILETYPES: ConfigStore[FileTypeGroup] = ConfigStore(Path(FILETYPES_FILE), FileTypeGroup, default_filetypes)
PRESETS: ConfigStore[PresetCommand] = ConfigStore(Path(PRESET_FILE), PresetCommand, default_presets)
