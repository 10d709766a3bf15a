from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from revpicker import config
from revpicker.picker import PickerOptions


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_file_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("revpicker.config.CONFIG_PATH", Path(tmp) / "missing.json"):
                self.assertEqual(config.load_config(), {})
                self.assertEqual(config.load_picker_options("jj"), PickerOptions())
                self.assertEqual(config.load_theme_name(), "default")

    def test_base_revset_key_depends_on_backend(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("revpicker.config.CONFIG_PATH", config_path):
                config.save_config(
                    {
                        "limit": 50,
                        "jj_log_revset": " mine() ",
                        "git_revspec": "main..HEAD",
                        "trunk": "main",
                        "include_staged": False,
                        "preview_style": "native",
                        "theme": "Ocean",
                    }
                )

                jj_options = config.load_picker_options("jj")
                git_options = config.load_picker_options("git")
                theme = config.load_theme_name()

        self.assertEqual(jj_options.revset, "mine()")
        self.assertEqual(jj_options.limit, 50)
        self.assertEqual(jj_options.trunk, "main")
        self.assertFalse(jj_options.include_staged)
        self.assertEqual(jj_options.preview_style, "native")
        self.assertEqual(git_options.revset, "main..HEAD")
        self.assertEqual(theme, "ocean")

    def test_invalid_values_fall_back_per_key(self) -> None:
        options = config.load_picker_options(
            "git",
            {"limit": True, "git_revspec": "   ", "trunk": 3, "include_staged": "yes", "preview_style": ""},
        )
        self.assertEqual(options, PickerOptions())
        self.assertEqual(config.load_picker_options("git", {"limit": -4}).limit, 200)

    def test_saved_theme_is_normalized_and_unknown_names_are_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("revpicker.config.CONFIG_PATH", Path(tmp) / "config.json"):
                config.save_config({"limit": 30})
                config.save_theme_name("  OCEAN ")
                config.save_theme_name("sepia")

                saved = config.load_config()
        self.assertEqual(saved, {"limit": 30, "theme": "ocean"})

    def test_malformed_or_non_object_json_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("revpicker.config.CONFIG_PATH", config_path):
                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})

                config_path.write_text(json.dumps(["limit", 5]), encoding="utf-8")
                self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
