"""The values collected by the interactive session, handed over in one piece."""

from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Sequence, Tuple

from .config import PresetCommand


@dataclass(frozen=True)
class SelectionRecord:
    directory: Optional[Path] = None
    extensions: Optional[Tuple[str, ...]] = None
    recursive: bool = False
    ignored_folder_names: FrozenSet[str] = frozenset()
    user_text: str = ""
    preset_texts: Tuple[str, ...] = ()
    copy_to_clipboard: bool = False

    @property
    def cancelled(self) -> bool:
        return self.directory is None or self.extensions is None


def parse_ignored_folders(text: str) -> FrozenSet[str]:
    """One folder name per line, trimmed and case-folded; blank lines dropped."""
    return frozenset(line.strip().casefold() for line in text.splitlines() if line.strip())


def parse_extensions(values: Iterable[str]) -> Tuple[str, ...]:
    # "py, .rs" -> ("py", "rs")
    extensions = []
    for value in values:
        for part in value.split(","):
            ext = part.strip().lstrip(".")
            if ext and ext not in extensions:
                extensions.append(ext)
    return tuple(extensions)


def collect_preset_texts(
    presets: Sequence[PresetCommand], selected_names: Iterable[str]
) -> Tuple[str, ...]:
    """Texts of the selected presets, in preset list order."""
    selected = set(selected_names)
    return tuple(preset.text for preset in presets if preset.name in selected)
