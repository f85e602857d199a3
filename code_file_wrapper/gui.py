"""
Interactive selection window.

Lets the user pick a directory, a file type group, recursion and ignored
folders, extra commands and presets. The window blocks until OK or close
and returns a single :class:`SelectionRecord`.
"""

import logging
import tkinter as tk
from abc import ABC, abstractmethod
from pathlib import Path
from tkinter import filedialog, messagebox, scrolledtext, ttk
from typing import List, Optional, Tuple

from .config import FILETYPES, PRESETS, FileTypeGroup, PresetCommand
from .selection import (
    SelectionRecord,
    collect_preset_texts,
    parse_extensions,
    parse_ignored_folders,
)

log = logging.getLogger(__name__)

WINDOW_TITLE = "Select Processing Mode"
WINDOW_SIZE = (600, 450)
WINDOW_MIN_SIZE = (500, 350)
DEFAULT_POSITION = (100, 100)
SUCCESS_MESSAGE_MS = 3000
SELECTED_BG = "#007828"


def get_cursor_position(root: tk.Misc) -> Optional[Tuple[int, int]]:
    try:
        return root.winfo_pointerxy()
    except tk.TclError:
        return None


class _ManagerWindow(ABC):
    """Shared layout for the preset and file type editors."""

    title = ""
    saved_message = "Saved successfully."
    add_label = "Add New"

    def __init__(self, master: tk.Misc, on_save):
        self.on_save = on_save
        self.window = tk.Toplevel(master)
        self.window.title(self.title)
        self.window.geometry("520x420")
        self.rows: list = []

        self.canvas = tk.Canvas(self.window, highlightthickness=0)
        scrollbar = ttk.Scrollbar(self.window, orient=tk.VERTICAL, command=self.canvas.yview)
        self.body = ttk.Frame(self.canvas)
        self.body.bind(
            "<Configure>",
            lambda _e: self.canvas.configure(scrollregion=self.canvas.bbox("all")),
        )
        self.canvas.create_window((0, 0), window=self.body, anchor=tk.NW)
        self.canvas.configure(yscrollcommand=scrollbar.set)

        buttons = ttk.Frame(self.window, padding=6)
        buttons.pack(side=tk.BOTTOM, fill=tk.X)
        ttk.Button(buttons, text=self.add_label, command=self.add_row).pack(side=tk.LEFT)
        ttk.Button(buttons, text="Save Changes", command=self.save).pack(side=tk.LEFT, padx=6)
        self.status = ttk.Label(buttons, foreground="green")
        self.status.pack(side=tk.LEFT, padx=6)

        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)
        self.canvas.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

    def _remove_row(self, row):
        row["frame"].destroy()
        self.rows.remove(row)

    @abstractmethod
    def add_row(self):
        """Append one editable row to the window."""

    @abstractmethod
    def records(self) -> list:
        """The rows as records, in display order."""

    def save(self):
        records = self.records()
        self.on_save(records)
        self.status.configure(text=self.saved_message)
        self.window.after(SUCCESS_MESSAGE_MS, lambda: self.status.configure(text=""))


class PresetManager(_ManagerWindow):
    title = "Preset Manager"
    saved_message = "Presets saved successfully."
    add_label = "Add New Preset"

    def __init__(self, master: tk.Misc, presets: List[PresetCommand], on_save):
        super().__init__(master, on_save)
        for preset in presets:
            self.add_row(preset)

    def add_row(self, preset: Optional[PresetCommand] = None):
        preset = preset or PresetCommand("New Preset", "")
        frame = ttk.Frame(self.body, padding=4)
        frame.pack(fill=tk.X)

        header = ttk.Frame(frame)
        header.pack(fill=tk.X)
        ttk.Label(header, text="Name:").pack(side=tk.LEFT)
        name_var = tk.StringVar(value=preset.name)
        ttk.Entry(header, textvariable=name_var, width=36).pack(side=tk.LEFT, padx=4)

        ttk.Label(frame, text="Text:").pack(anchor=tk.W)
        text = scrolledtext.ScrolledText(frame, height=4, width=60, wrap=tk.WORD)
        text.insert("1.0", preset.text)
        text.pack(fill=tk.X)
        ttk.Separator(frame).pack(fill=tk.X, pady=4)

        row = {"frame": frame, "name": name_var, "text": text}
        ttk.Button(header, text="Delete", command=lambda: self._remove_row(row)).pack(side=tk.LEFT)
        self.rows.append(row)

    def records(self) -> List[PresetCommand]:
        return [
            PresetCommand(row["name"].get(), row["text"].get("1.0", "end-1c"))
            for row in self.rows
        ]


class FileTypeManager(_ManagerWindow):
    title = "File Type Manager"
    saved_message = "File types saved successfully."
    add_label = "Add New File Type"

    def __init__(self, master: tk.Misc, groups: List[FileTypeGroup], on_save):
        super().__init__(master, on_save)
        for group in groups:
            self.add_row(group)

    def add_row(self, group: Optional[FileTypeGroup] = None):
        group = group or FileTypeGroup("New Group", [])
        frame = ttk.Frame(self.body, padding=4)
        frame.pack(fill=tk.X)

        name_var = tk.StringVar(value=group.name)
        extensions_var = tk.StringVar(value=", ".join(group.extensions))
        ttk.Label(frame, text="Name:").grid(row=0, column=0, sticky=tk.W)
        ttk.Entry(frame, textvariable=name_var, width=20).grid(row=0, column=1, padx=4)
        ttk.Label(frame, text="Extensions:").grid(row=0, column=2, sticky=tk.W)
        ttk.Entry(frame, textvariable=extensions_var, width=24).grid(row=0, column=3, padx=4)

        row = {"frame": frame, "name": name_var, "extensions": extensions_var}
        ttk.Button(frame, text="Delete", command=lambda: self._remove_row(row)).grid(row=0, column=4)
        self.rows.append(row)

    def records(self) -> List[FileTypeGroup]:
        return [
            FileTypeGroup(row["name"].get(), list(parse_extensions([row["extensions"].get()])))
            for row in self.rows
        ]


class ModeSelector:
    def __init__(
        self,
        root: tk.Tk,
        file_type_groups: List[FileTypeGroup],
        presets: List[PresetCommand],
    ):
        self.root = root
        self.file_type_groups = list(file_type_groups)
        self.presets = list(presets)
        self.result = SelectionRecord()

        self.selected_dir: Optional[Path] = None
        self.selected_group: Optional[int] = None
        self.dir_var = tk.StringVar()
        self.clipboard_var = tk.BooleanVar(value=False)
        self.recursive_var = tk.BooleanVar(value=False)
        self.warning_var = tk.StringVar()

        self.create_widgets()
        root.protocol("WM_DELETE_WINDOW", self.cancel)

    def create_widgets(self):
        main = ttk.Frame(self.root, padding=10)
        main.pack(fill=tk.BOTH, expand=True)

        # Directory picker
        dir_row = ttk.Frame(main)
        dir_row.pack(fill=tk.X)
        ttk.Button(dir_row, text="Select Directory", command=self.browse_directory).pack(side=tk.LEFT)
        ttk.Entry(dir_row, textvariable=self.dir_var, state="readonly", width=50).pack(
            side=tk.LEFT, fill=tk.X, expand=True, padx=5
        )

        # File type groups
        ttk.Label(main, text="File Type Selection:").pack(anchor=tk.W, pady=(8, 0))
        self.group_frame = ttk.Frame(main)
        self.group_frame.pack(fill=tk.X)
        self.refresh_group_buttons()

        ttk.Checkbutton(
            main, text="Enable save to clipboard automatically", variable=self.clipboard_var
        ).pack(anchor=tk.W)
        ttk.Checkbutton(
            main,
            text="Enable recursive directory search",
            variable=self.recursive_var,
            command=self.toggle_ignored_folders,
        ).pack(anchor=tk.W)

        # packed into the anchor only while recursion is on
        self.ignored_anchor = ttk.Frame(main)
        self.ignored_anchor.pack(fill=tk.X)
        self.ignored_frame = ttk.LabelFrame(main, text="Ignore Folders (one per line, case insensitive):")
        self.ignored_text = scrolledtext.ScrolledText(self.ignored_frame, height=4, wrap=tk.NONE)
        self.ignored_text.pack(fill=tk.X)

        commands_frame = ttk.LabelFrame(main, text="Additional Commands:")
        commands_frame.pack(fill=tk.BOTH, expand=True, pady=4)
        self.commands_text = scrolledtext.ScrolledText(commands_frame, height=5, wrap=tk.WORD)
        self.commands_text.pack(fill=tk.BOTH, expand=True)

        # Presets
        preset_row = ttk.Frame(main)
        preset_row.pack(fill=tk.X)
        ttk.Label(preset_row, text="Preset Command:").pack(side=tk.LEFT, anchor=tk.N)
        self.preset_list = tk.Listbox(preset_row, selectmode=tk.MULTIPLE, height=4, exportselection=False)
        self.preset_list.pack(side=tk.LEFT, fill=tk.X, expand=True, padx=5)
        self.preset_list.bind("<<ListboxSelect>>", lambda _e: self.update_preview())
        ttk.Button(preset_row, text="Manage Presets", command=self.open_preset_manager).pack(
            side=tk.LEFT, anchor=tk.N
        )
        self.preview_anchor = ttk.Frame(main)
        self.preview_anchor.pack(fill=tk.X)
        self.preview = scrolledtext.ScrolledText(main, height=4, wrap=tk.WORD, state=tk.DISABLED)
        self.refresh_preset_list()

        ttk.Label(main, textvariable=self.warning_var, foreground="red").pack(anchor=tk.W)
        ttk.Button(main, text="OK", command=self.confirm).pack(pady=(4, 0))

    def browse_directory(self):
        directory = filedialog.askdirectory(initialdir=".", title="Select Directory")
        if directory:
            self.selected_dir = Path(directory)
            self.dir_var.set(str(self.selected_dir))
            self.warning_var.set("")

    def refresh_group_buttons(self):
        for child in self.group_frame.winfo_children():
            child.destroy()
        for index, group in enumerate(self.file_type_groups):
            selected = index == self.selected_group
            tk.Button(
                self.group_frame,
                text=group.name,
                bg=SELECTED_BG if selected else None,
                fg="white" if selected else None,
                command=lambda i=index: self.select_group(i),
            ).pack(side=tk.LEFT, padx=2, pady=2)
        ttk.Button(self.group_frame, text="Manage File Types", command=self.open_filetype_manager).pack(
            side=tk.LEFT, padx=6
        )

    def select_group(self, index: int):
        self.selected_group = index
        self.warning_var.set("")
        self.refresh_group_buttons()

    def toggle_ignored_folders(self):
        if self.recursive_var.get():
            self.ignored_frame.pack(in_=self.ignored_anchor, fill=tk.X)
        else:
            self.ignored_frame.pack_forget()

    def selected_preset_names(self) -> List[str]:
        return [self.preset_list.get(i) for i in self.preset_list.curselection()]

    def refresh_preset_list(self):
        self.preset_list.delete(0, tk.END)
        for preset in self.presets:
            self.preset_list.insert(tk.END, preset.name)
        self.update_preview()

    def update_preview(self):
        texts = collect_preset_texts(self.presets, self.selected_preset_names())
        self.preview.configure(state=tk.NORMAL)
        self.preview.delete("1.0", tk.END)
        if texts:
            self.preview.insert("1.0", "\n\n".join(texts))
            self.preview.pack(in_=self.preview_anchor, fill=tk.X)
        else:
            self.preview.pack_forget()
        self.preview.configure(state=tk.DISABLED)

    def open_preset_manager(self):
        PresetManager(self.root, self.presets, self.save_presets)

    def save_presets(self, presets: List[PresetCommand]):
        self.presets = presets
        PRESETS.save(presets)
        self.refresh_preset_list()

    def open_filetype_manager(self):
        FileTypeManager(self.root, self.file_type_groups, self.save_filetypes)

    def save_filetypes(self, groups: List[FileTypeGroup]):
        self.file_type_groups = groups
        if self.selected_group is not None and self.selected_group >= len(groups):
            self.selected_group = None
        FILETYPES.save(groups)
        self.refresh_group_buttons()

    def confirm(self):
        if self.selected_dir is None:
            self.warning_var.set("Please select a directory before proceeding!")
            return
        if self.selected_group is None:
            self.warning_var.set("Please select a file type before proceeding!")
            return

        group = self.file_type_groups[self.selected_group]
        recursive = self.recursive_var.get()
        self.result = SelectionRecord(
            directory=self.selected_dir,
            extensions=tuple(group.extensions),
            recursive=recursive,
            ignored_folder_names=(
                parse_ignored_folders(self.ignored_text.get("1.0", "end-1c")) if recursive else frozenset()
            ),
            user_text=self.commands_text.get("1.0", "end-1c"),
            preset_texts=collect_preset_texts(self.presets, self.selected_preset_names()),
            copy_to_clipboard=self.clipboard_var.get(),
        )
        log.debug(f"Selection confirmed: {self.result}")
        self.root.destroy()

    def cancel(self):
        log.debug("Selection window closed without confirming")
        self.result = SelectionRecord()
        self.root.destroy()


def mode_selection_gui(
    file_type_groups: List[FileTypeGroup], presets: List[PresetCommand]
) -> SelectionRecord:
    """Show the selection window and block until it is closed."""
    root = tk.Tk()
    root.title(WINDOW_TITLE)
    x, y = get_cursor_position(root) or DEFAULT_POSITION
    width, height = WINDOW_SIZE
    root.geometry(f"{width}x{height}+{x}+{y}")
    root.minsize(*WINDOW_MIN_SIZE)

    app = ModeSelector(root, file_type_groups, presets)
    root.mainloop()
    return app.result


def ask_open_output(file_path: Path) -> bool:
    root = tk.Tk()
    root.withdraw()
    try:
        return messagebox.askyesno(
            "Open Output File?",
            f"Would you like to open the generated {Path(file_path).name} file?",
            parent=root,
        )
    finally:
        root.destroy()
