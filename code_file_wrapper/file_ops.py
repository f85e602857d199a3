"""
Directory walking and tag serialization.

Every matching file of a folder is written into a single text artifact,
wrapped in ``<relative\\path>`` / ``</relative\\path>`` tags, followed by a
fixed footer and an optional ``[Additional Commands]`` section.
"""

import logging
import os
from pathlib import Path, PurePath
from typing import Collection, Iterable, Iterator, NamedTuple, Tuple

log = logging.getLogger(__name__)

OUTPUT_FILE = "tags_output.txt"
SECTION_LABEL = "[Additional Commands]"
TAG_SEPARATOR = "\\"
HIDDEN_MARKER = "."

FOOTER_LINES = (
    '* The above is the current state of my project with each "<>" block containing the file it belongs to',
    "* Provide context above and below code changes with clear temp comments to indicate change",
    "* Be extremely explicit with where to make changes",
)


class SerializeSummary(NamedTuple):
    written: int
    skipped: int


def is_includable(path: Path, allowed_extensions: Collection[str]) -> bool:
    """True if ``path`` is a regular file whose extension is allowed.

    Extensions are compared exactly (case-sensitive) and without the
    leading dot. Files without an extension, or whose extension cannot be
    encoded as UTF-8, never match.
    """
    try:
        if not path.is_file():
            return False
    except OSError:
        return False

    extension = path.suffix[1:]
    if not extension:
        return False
    try:
        extension.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return extension in allowed_extensions


def _is_ignored_folder(name: str, ignored: Collection[str]) -> bool:
    return name.startswith(HIDDEN_MARKER) or name.casefold() in ignored


def _raise_walk_error(error: OSError) -> None:
    raise error


def walk(
    root: Path, recursive: bool, ignored_folder_names: Iterable[str] = ()
) -> Iterator[Tuple[Path, PurePath]]:
    """
    Lazily yield ``(absolute_path, relative_path)`` for the non-directory
    entries under ``root``.

    Without ``recursive`` only direct children are listed. With it, the tree
    is walked depth-first and any subfolder whose name starts with ``.`` or
    matches ``ignored_folder_names`` (case-insensitive) is pruned along with
    its whole subtree. Listing errors propagate; order is whatever the OS
    returns.
    """
    root = Path(root).resolve()

    if not recursive:
        with os.scandir(root) as entries:
            for entry in entries:
                if entry.is_dir():
                    continue
                path = Path(entry.path)
                yield path, path.relative_to(root)
        return

    ignored = {name.casefold() for name in ignored_folder_names}
    for current, dirs, files in os.walk(root, topdown=True, onerror=_raise_walk_error):
        kept = [d for d in dirs if not _is_ignored_folder(d, ignored)]
        if len(kept) != len(dirs):
            log.debug(f"Skipping folders in {current}: {sorted(set(dirs) - set(kept))}")
        dirs[:] = kept

        current_path = Path(current)
        for filename in files:
            path = current_path / filename
            yield path, path.relative_to(root)


def render_tag_path(relative_path: PurePath) -> str:
    """Join path segments with a backslash, whatever the host separator."""
    return TAG_SEPARATOR.join(relative_path.parts)


def write_folder_tags(
    root: Path,
    extensions: Collection[str],
    recursive: bool = False,
    ignored_folder_names: Iterable[str] = (),
    output_target: Path = Path(OUTPUT_FILE),
) -> SerializeSummary:
    """
    Write each matching file under ``root`` into ``output_target`` with tags.

    The output file is truncated first and never read back into itself.
    Files that cannot be opened or are not valid UTF-8 are skipped with a
    warning; any other I/O error (walking ``root`` or writing the output) is
    raised. The footer is always written, even when no file matched.
    """
    allowed = set(extensions)
    output_resolved = Path(output_target).resolve()
    written = 0
    skipped = 0

    with open(output_target, "w", encoding="utf-8", newline="") as output:
        for path, relative_path in walk(root, recursive, ignored_folder_names):
            # Prevent processing the output file itself
            if path.resolve() == output_resolved:
                log.debug(f"Skipping output file: {path}")
                continue
            if not is_includable(path, allowed):
                continue

            try:
                with open(path, "r", encoding="utf-8", newline="") as in_f:
                    contents = in_f.read()
            except (OSError, UnicodeDecodeError) as e:
                log.warning(f"Skipping {path}: {e}")
                skipped += 1
                continue

            tag = render_tag_path(relative_path)
            log.debug(f"Writing tags for: {tag}")
            output.write(f"<{tag}>\n")
            output.write(f"{contents}\n")
            output.write(f"</{tag}>\n\n")
            written += 1

        for line in FOOTER_LINES:
            output.write(f"{line}\n")
        output.flush()

    return SerializeSummary(written, skipped)


def combine_commands(preset_texts: Iterable[str], user_text: str = "") -> str:
    """Merge preset texts and free-form text into one block for a single append."""
    combined = ""
    for preset_text in preset_texts:
        combined += f"\n{preset_text.strip()}\n"
    if user_text.strip():
        combined += f"\n{user_text.strip()}\n"
    return combined


def append_additional_commands(
    output_target: Path, body_text: str, label: str = SECTION_LABEL
) -> None:
    """
    Append a labeled section to ``output_target``.

    Not idempotent: each call adds another label. Combine everything with
    :func:`combine_commands` first.
    """
    with open(output_target, "a", encoding="utf-8", newline="") as output:
        output.write("\n")
        output.write(f"{label}\n")
        output.write(body_text)
        output.write("\n\n")
