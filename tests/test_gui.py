import unittest
from pathlib import Path
from unittest import mock

from code_file_wrapper.config import FileTypeGroup, PresetCommand
from code_file_wrapper.selection import SelectionRecord

try:
    import tkinter as tk

    from code_file_wrapper import gui
except ImportError:  # interpreter built without Tk
    tk = gui = None


GROUPS = [
    FileTypeGroup("Rust", ["rs"]),
    FileTypeGroup("Lua", ["lua"]),
    FileTypeGroup("Web", ["html", "css"]),
]
PRESETS = [
    PresetCommand("Docs", "write docs"),
    PresetCommand("Readme", "write a readme"),
]


class TkTestCase(unittest.TestCase):
    def setUp(self):
        if tk is None:
            self.skipTest("tkinter is not available")
        try:
            self.root = tk.Tk()
        except tk.TclError as e:
            self.skipTest(f"no display available: {e}")
        self.root.withdraw()

    def tearDown(self):
        try:
            self.root.destroy()
        except tk.TclError:
            pass  # already closed by the window under test


class TestModeSelector(TkTestCase):
    def setUp(self):
        super().setUp()
        self.selector = gui.ModeSelector(self.root, GROUPS, PRESETS)

    def test_confirm_requires_directory(self):
        self.selector.select_group(0)
        self.selector.confirm()

        self.assertEqual(self.selector.warning_var.get(), "Please select a directory before proceeding!")
        self.assertTrue(self.selector.result.cancelled)
        self.assertTrue(self.root.winfo_exists())

    def test_confirm_requires_file_type(self):
        self.selector.selected_dir = Path("proj")
        self.selector.confirm()

        self.assertEqual(self.selector.warning_var.get(), "Please select a file type before proceeding!")
        self.assertTrue(self.selector.result.cancelled)

    def test_confirm_builds_record(self):
        self.selector.selected_dir = Path("proj")
        self.selector.select_group(2)
        self.selector.clipboard_var.set(True)
        self.selector.commands_text.insert("1.0", "explain the parser")
        self.selector.preset_list.selection_set(1)

        self.selector.confirm()

        self.assertEqual(
            self.selector.result,
            SelectionRecord(
                directory=Path("proj"),
                extensions=("html", "css"),
                recursive=False,
                ignored_folder_names=frozenset(),
                user_text="explain the parser",
                preset_texts=("write a readme",),
                copy_to_clipboard=True,
            ),
        )

    def test_ignored_folders_dropped_when_not_recursive(self):
        self.selector.selected_dir = Path("proj")
        self.selector.select_group(0)
        self.selector.ignored_text.insert("1.0", "Target\nnode_modules")

        self.selector.confirm()

        self.assertFalse(self.selector.result.recursive)
        self.assertEqual(self.selector.result.ignored_folder_names, frozenset())

    def test_ignored_folders_parsed_when_recursive(self):
        self.selector.selected_dir = Path("proj")
        self.selector.select_group(0)
        self.selector.recursive_var.set(True)
        self.selector.toggle_ignored_folders()
        self.selector.ignored_text.insert("1.0", "Target\n\n  .Venv ")

        self.selector.confirm()

        self.assertTrue(self.selector.result.recursive)
        self.assertEqual(self.selector.result.ignored_folder_names, {"target", ".venv"})

    def test_preset_texts_follow_list_order(self):
        self.selector.selected_dir = Path("proj")
        self.selector.select_group(0)
        self.selector.preset_list.selection_set(1)
        self.selector.preset_list.selection_set(0)

        self.selector.confirm()

        self.assertEqual(self.selector.result.preset_texts, ("write docs", "write a readme"))

    def test_cancel_returns_cancelled_record(self):
        self.selector.selected_dir = Path("proj")
        self.selector.select_group(0)

        self.selector.cancel()

        self.assertEqual(self.selector.result, SelectionRecord())
        self.assertTrue(self.selector.result.cancelled)

    def test_save_filetypes_resets_out_of_range_selection(self):
        self.selector.select_group(2)
        with mock.patch.object(gui.FILETYPES, "save") as save:
            self.selector.save_filetypes([FileTypeGroup("Rust", ["rs"])])

        save.assert_called_once_with([FileTypeGroup("Rust", ["rs"])])
        self.assertIsNone(self.selector.selected_group)

    def test_save_filetypes_keeps_valid_selection(self):
        self.selector.select_group(0)
        with mock.patch.object(gui.FILETYPES, "save"):
            self.selector.save_filetypes([FileTypeGroup("Go", ["go"])])
        self.assertEqual(self.selector.selected_group, 0)

    def test_save_presets_refreshes_list(self):
        with mock.patch.object(gui.PRESETS, "save") as save:
            self.selector.save_presets([PresetCommand("Only", "text")])

        save.assert_called_once_with([PresetCommand("Only", "text")])
        self.assertEqual(self.selector.preset_list.get(0, tk.END), ("Only",))


class TestManagers(TkTestCase):
    def test_filetype_manager_records(self):
        on_save = mock.Mock()
        manager = gui.FileTypeManager(self.root, GROUPS[:2], on_save)
        manager.rows[0]["extensions"].set(".rs, ron")
        manager.rows[1]["name"].set("Scripts")
        manager.add_row()

        expected = [
            FileTypeGroup("Rust", ["rs", "ron"]),
            FileTypeGroup("Scripts", ["lua"]),
            FileTypeGroup("New Group", []),
        ]
        self.assertEqual(manager.records(), expected)
        manager.save()
        on_save.assert_called_once_with(expected)
        self.assertEqual(str(manager.status.cget("text")), "File types saved successfully.")

    def test_preset_manager_records(self):
        manager = gui.PresetManager(self.root, PRESETS, mock.Mock())
        manager.rows[0]["text"].delete("1.0", tk.END)
        manager.rows[0]["text"].insert("1.0", "line one\nline two")
        manager._remove_row(manager.rows[1])
        manager.add_row()

        self.assertEqual(
            manager.records(),
            [PresetCommand("Docs", "line one\nline two"), PresetCommand("New Preset", "")],
        )


@unittest.skipIf(gui is None, "tkinter is not available")
class TestManagerBase(unittest.TestCase):
    def test_base_window_is_abstract(self):
        with self.assertRaises(TypeError):
            gui._ManagerWindow(None, None)


if __name__ == "__main__":
    unittest.main()
