"""
End-to-end build from svg.zip with font compilation replaced by a stub,
plus configuration and housekeeping commands.
"""
import json
import os
import sys
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tests.helpers import SQUARE_SVG, make_zip, write_svgs
import build
from codepoints import AllocationError, CodepointMap
from fontgen import FontCompileTimeout
from styles import FAMILIES


def fake_compile(ufo_path, out_dir, out_prefix, timeout=60, formats=("ttf", "woff", "woff2")):
    Path(out_dir).mkdir(parents=True, exist_ok=True)
    outputs = []
    for ext in formats:
        path = Path(out_dir) / f"{out_prefix}.{ext}"
        path.write_bytes(b"font")
        outputs.append(path)
    return outputs


class BuildTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.zip_path = self.tmp / "input" / "svg.zip"
        self.out = self.tmp / "Fonts"
        self.temp = self.tmp / "temp_svgs"
        self.config = build.load_config(self.tmp / "missing.json")

    def tearDown(self):
        self._tmp.cleanup()

    def make_icons_zip(self, prefix="all/"):
        names = ["a-bold.svg", "b-bold.svg", "b-linear.svg", "c-linear.svg",
                 "plain.svg", "misc/x.svg", "TwoTone/t.svg"]
        return make_zip(self.zip_path, {prefix + n: SQUARE_SVG for n in names})

    def run_build(self, **kwargs):
        return build.run_build(self.config, self.zip_path, self.out, self.temp, **kwargs)

    def read_json(self, name):
        with open(self.out / name, encoding="utf-8") as f:
            return json.load(f)


class TestRunBuild(BuildTestCase):

    def test_full_build(self):
        self.make_icons_zip()
        with mock.patch("build.compile_font", side_effect=fake_compile) as compile_font:
            self.assertTrue(self.run_build())

        prefixes = [c.args[2] for c in compile_font.call_args_list]
        self.assertEqual(prefixes, ["saxi-icons-pro-bold", "saxi-icons-pro-linear", "saxi-icons-pro-twotone"])

        self.assertEqual(self.read_json("saxi-icons-pro.json"), {"a": "E900", "b": "E901", "c": "E902"})
        self.assertEqual(self.read_json("saxi-icons-pro-twotone.json"), {"t": "E900"})
        self.assertEqual(self.read_json("build-info.json")["totalIcons"], 4)

        for name in ("saxi-icons-pro.css", "saxi-icons-pro-twotone.css", "saxi-icons-all.css",
                     "Icon-Font-README.md", "demo.html", "saxi-icons-pro-bold.woff2"):
            self.assertTrue((self.out / name).exists(), name)
        self.assertFalse(self.temp.exists())

    def test_all_dir_inside_svg_folder(self):
        self.make_icons_zip(prefix="svg/all/")
        with mock.patch("build.compile_font", side_effect=fake_compile):
            self.assertTrue(self.run_build(keep_temp=True))
        self.assertTrue((self.temp / "Bold" / "a.svg").exists())
        self.assertTrue((self.temp / "ufo" / "saxi-icons-pro-bold.ufo").exists())

    def test_shared_codepoints_reach_every_variant(self):
        self.make_icons_zip()
        seen = {}

        def record(family, variant, icons, files, config, ufo_dir, ligatures=True):
            seen[variant.style] = dict(icons)
            return Path(ufo_dir) / f"{variant.out_prefix}.ufo", len(icons)

        with mock.patch("build.build_ufo", side_effect=record), \
                mock.patch("build.compile_font", side_effect=fake_compile):
            self.run_build()
        self.assertEqual(seen["Bold"], {"a": 0xE900, "b": 0xE901})
        self.assertEqual(seen["Linear"], {"b": 0xE901, "c": 0xE902})
        self.assertEqual(seen["TwoTone"], {"t": 0xE900})

    def test_failed_variant_is_not_fatal(self):
        self.make_icons_zip()

        def flaky(ufo_path, out_dir, out_prefix, **kwargs):
            if out_prefix.endswith("linear"):
                raise FontCompileTimeout("too slow")
            return fake_compile(ufo_path, out_dir, out_prefix, **kwargs)

        with mock.patch("build.compile_font", side_effect=flaky):
            self.assertTrue(self.run_build())
        css = (self.out / "saxi-icons-pro.css").read_text(encoding="utf-8")
        self.assertNotIn("saxi-icons-pro-linear.woff2", css)
        self.assertIn('content: "\\E902";', css)

    def test_failed_variant_with_strict(self):
        self.make_icons_zip()
        with mock.patch("build.compile_font", side_effect=FontCompileTimeout("too slow")):
            self.assertFalse(self.run_build(strict=True))

    def test_no_fonts_is_a_failure(self):
        make_zip(self.zip_path, {"all/plain.svg": SQUARE_SVG})
        with mock.patch("build.compile_font", side_effect=fake_compile) as compile_font:
            self.assertFalse(self.run_build())
        compile_font.assert_not_called()

    def test_docs_failure_is_soft(self):
        self.make_icons_zip()
        with mock.patch("build.compile_font", side_effect=fake_compile), \
                mock.patch("build.write_readme", side_effect=OSError("disk full")):
            self.assertTrue(self.run_build())
        self.assertFalse((self.out / "Icon-Font-README.md").exists())

    def test_rebuild_drops_stale_family_mapping(self):
        self.out.mkdir()
        (self.out / "saxi-icons-pro-twotone.json").write_text('{"old": "E900"}', encoding="utf-8")
        make_zip(self.zip_path, {"all/a-bold.svg": SQUARE_SVG})
        with mock.patch("build.compile_font", side_effect=fake_compile):
            self.assertTrue(self.run_build())
        self.assertEqual(self.read_json("saxi-icons-pro-twotone.json"), {})
        self.assertEqual(self.read_json("build-info.json")["totalIcons"], 1)
        readme = (self.out / "Icon-Font-README.md").read_text(encoding="utf-8")
        self.assertNotIn("`old`", readme)

    def test_unexpected_docs_error_is_soft(self):
        self.make_icons_zip()
        error = AttributeError("'list' object has no attribute 'items'")
        with mock.patch("build.compile_font", side_effect=fake_compile), \
                mock.patch("build.write_demo", side_effect=error):
            self.assertTrue(self.run_build())
        self.assertFalse((self.out / "demo.html").exists())
        self.assertTrue((self.out / "Icon-Font-README.md").exists())

    def test_missing_zip(self):
        with self.assertRaises(FileNotFoundError):
            self.run_build()

    def test_missing_all_dir(self):
        make_zip(self.zip_path, {"icons/a-bold.svg": SQUARE_SVG})
        with self.assertRaises(FileNotFoundError):
            self.run_build()


class TestBuildFamily(BuildTestCase):

    def test_inconsistent_allocation_aborts_family(self):
        write_svgs(self.temp / "Bold", ["a.svg", "b.svg"])
        broken = CodepointMap("saxi-icons-pro", 0xE900, (("a", 0xE900),))
        with mock.patch("build.allocate", return_value=broken), \
                mock.patch("build.compile_font", side_effect=fake_compile) as compile_font:
            with self.assertRaises(AllocationError):
                build.build_family(FAMILIES[0], self.temp, self.out, self.config)
        compile_font.assert_not_called()

    def test_empty_variants_are_skipped(self):
        write_svgs(self.temp / "Bulk", ["w.svg"])
        with mock.patch("build.compile_font", side_effect=fake_compile):
            result = build.build_family(FAMILIES[1], self.temp, self.out, self.config)
        self.assertEqual([v.style for v in result.built], ["Bulk"])
        self.assertEqual([v.style for v in result.skipped], ["TwoTone"])
        self.assertEqual(result.codepoints.as_dict(), {"w": 0xE900})

    def test_empty_family_overwrites_previous_outputs(self):
        self.temp.mkdir()
        self.out.mkdir()
        (self.out / "saxi-icons-pro-twotone.json").write_text('{"old": "E900"}', encoding="utf-8")
        (self.out / "saxi-icons-pro-twotone.css").write_text(".saxi-old:before {}", encoding="utf-8")
        with mock.patch("build.compile_font", side_effect=fake_compile) as compile_font:
            result = build.build_family(FAMILIES[1], self.temp, self.out, self.config)
        compile_font.assert_not_called()
        self.assertEqual(len(result.codepoints), 0)
        self.assertEqual(self.read_json("saxi-icons-pro-twotone.json"), {})
        css = (self.out / "saxi-icons-pro-twotone.css").read_text(encoding="utf-8")
        self.assertNotIn("saxi-old", css)
        self.assertNotIn("@font-face", css)


class TestMain(BuildTestCase):

    def test_main_success(self):
        self.make_icons_zip()
        argv = ["--zip", str(self.zip_path), "--output", str(self.out), "--temp", str(self.temp)]
        with mock.patch("build.compile_font", side_effect=fake_compile):
            self.assertEqual(build.main(argv), 0)

    def test_main_missing_zip(self):
        argv = ["build", "--zip", str(self.tmp / "nope.zip"), "--output", str(self.out), "--temp", str(self.temp)]
        self.assertEqual(build.main(argv), 1)

    def test_timeout_option(self):
        self.make_icons_zip()
        argv = ["--zip", str(self.zip_path), "--output", str(self.out), "--temp", str(self.temp),
                "--timeout", "5", "--no-ligatures"]
        with mock.patch("build.compile_font", side_effect=fake_compile) as compile_font, \
                mock.patch("build.build_ufo", wraps=build.build_ufo) as build_ufo:
            build.main(argv)
        self.assertEqual(compile_font.call_args.kwargs["timeout"], 5.0)
        self.assertFalse(build_ufo.call_args.kwargs["ligatures"])


class TestConfig(unittest.TestCase):

    def test_defaults_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            config = build.load_config(Path(tmp) / "none.json")
        self.assertEqual(config["build"]["timeoutSeconds"], 60)
        self.assertEqual(config["paths"]["output"], "Fonts")

    def test_user_values_are_merged(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cfg.json"
            path.write_text(json.dumps({"build": {"timeoutSeconds": 5}, "version": "2.1.0"}), encoding="utf-8")
            config = build.load_config(path)
        self.assertEqual(config["build"]["timeoutSeconds"], 5)
        self.assertTrue(config["build"]["ligatures"])
        self.assertEqual(config["version"], "2.1.0")
        self.assertEqual(build.DEFAULT_CONFIG["build"]["timeoutSeconds"], 60)

    def test_default_file_sits_next_to_build_script(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / build.CONFIG_NAME
            path.write_text(json.dumps({"font": {"unitsPerEm": 2048}}), encoding="utf-8")
            with mock.patch.object(build, "PROJECT", Path(tmp)), \
                    mock.patch.object(build, "CONFIG", None):
                config = build.load_config()
        self.assertEqual(config["font"]["unitsPerEm"], 2048)
        self.assertEqual(config["font"]["fontHeight"], 1000)

    def test_project_is_the_script_directory(self):
        self.assertEqual(build.PROJECT, Path(build.__file__).resolve().parent)

    def test_parse_base_codepoint(self):
        self.assertEqual(build.parse_base_codepoint("E900"), 0xE900)
        self.assertEqual(build.parse_base_codepoint("U+F000"), 0xF000)
        self.assertEqual(build.parse_base_codepoint(59648), 0xE900)
        self.assertEqual(build.parse_base_codepoint(None), 0xE900)


class TestHousekeeping(BuildTestCase):

    def test_setup(self):
        build.setup_dirs(self.tmp, self.config)
        for name in ("Fonts", "temp_svgs", "input"):
            self.assertTrue((self.tmp / name).is_dir())
        self.assertIn("svg.zip", (self.tmp / "input" / "README.md").read_text(encoding="utf-8"))

    def test_clean(self):
        write_svgs(self.temp / "Bold", ["a.svg"])
        self.out.mkdir()
        (self.out / "old.css").write_text("", encoding="utf-8")
        build.clean(self.temp, self.out, clean_output=True, assume_yes=True)
        self.assertFalse(self.temp.exists())
        self.assertEqual(list(self.out.iterdir()), [])

    def test_clean_removes_copied_zip(self):
        copied = self.tmp / "svg.zip"
        make_zip(copied, {"all/a-bold.svg": SQUARE_SVG})
        self.make_icons_zip()
        build.clean(self.temp, self.out, copied_zip=copied)
        self.assertFalse(copied.exists())
        self.assertTrue(self.zip_path.exists())

    def test_clean_command_removes_copied_zip_in_working_directory(self):
        make_zip(self.tmp / "svg.zip", {"all/a-bold.svg": SQUARE_SVG})
        argv = ["clean", "--output", str(self.out), "--temp", str(self.temp)]
        with mock.patch("build.Path.cwd", return_value=self.tmp):
            self.assertEqual(build.main(argv), 0)
        self.assertFalse((self.tmp / "svg.zip").exists())

    def test_clean_keeps_output_by_default(self):
        self.out.mkdir()
        (self.out / "old.css").write_text("", encoding="utf-8")
        build.clean(self.temp, self.out)
        self.assertTrue((self.out / "old.css").exists())

    def test_build_info(self):
        self.out.mkdir()
        (self.out / "saxi-icons-pro.json").write_text('{"a": "E900", "b": "E901"}', encoding="utf-8")
        now = datetime(2026, 3, 4, 5, 6, 7, tzinfo=timezone.utc)
        info = build.write_build_info(self.out, "1.2.3", now)
        self.assertEqual(info["totalIcons"], 2)
        self.assertEqual(info["buildDate"], "2026-03-04")
        self.assertEqual(self.read_json("build-info.json")["version"], "1.2.3")

    def test_format_file_size(self):
        self.assertEqual(build.format_file_size(10), "10 bytes")
        self.assertEqual(build.format_file_size(2048), "2.0 KB")
        self.assertEqual(build.format_file_size(3 * 1024 * 1024), "3.0 MB")

    def test_zip_mtime(self):
        self.assertIsNone(build.zip_mtime(self.zip_path))
        self.make_icons_zip()
        self.assertIsNotNone(build.zip_mtime(self.zip_path))


if __name__ == "__main__":
    unittest.main()
