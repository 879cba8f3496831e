# build.py: svg.zip -> icon web-fonts, CSS, JSON mappings and docs
# Usage: python build.py [build|setup|clean|watch] [options]
import argparse
import copy
import json
import shutil
import subprocess
import sys
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from archive import extract_archive, find_all_dir
from codepoints import BASE_CODEPOINT, allocate, hex_codepoint, verify_shared
from docs import BUILD_INFO, write_demo, write_readme
from fontgen import FontCompileError, build_ufo, compile_font
from styles import FAMILIES, list_variant_icons, sort_into_styles
from stylesheets import write_combined_css, write_family_outputs

PROJECT = Path(__file__).resolve().parent
CONFIG_NAME = "icon-font-config.json"

# Global configuration loaded from JSON
CONFIG = None

DEFAULT_CONFIG = {
    "version": "1.0.0",
    "font": {
        "unitsPerEm": 1000,
        "ascender": 1000,
        "descender": 0,
        "fontHeight": 1000,
    },
    "build": {
        "baseCodepoint": "E900",
        "timeoutSeconds": 60,
        "ligatures": True,
        "normalize": True,
        "centerHorizontally": True,
        "formats": ["ttf", "woff", "woff2"],
    },
    "paths": {
        "zip": "input/svg.zip",
        "temp": "temp_svgs",
        "output": "Fonts",
        "input": "input",
    },
}

INPUT_README = """# Icon Font Generator Input

Place your svg.zip file here.

The zip must contain an "all" folder (at the top level or inside "svg/").
Inside it, either use one folder per style:
- bold/, linear/, outline/, broken/, twotone/, bulk/

or put the style at the end of each filename:
- filename-bold.svg
- filename-linear.svg
- filename-outline.svg
- filename-broken.svg
- filename-twotone.svg
- filename-bulk.svg

Files with no recognizable style are reported and skipped.
"""


def load_config(config_file=None):
    """Load the build configuration, falling back to built-in defaults."""
    global CONFIG
    if CONFIG is None or config_file is not None:
        config = copy.deepcopy(DEFAULT_CONFIG)
        config_file = Path(config_file) if config_file else PROJECT / CONFIG_NAME
        if config_file.exists():
            with open(config_file, 'r', encoding="utf-8") as f:
                user = json.load(f)
            for key, value in user.items():
                if isinstance(value, dict) and isinstance(config.get(key), dict):
                    config[key].update(value)
                else:
                    config[key] = value
        CONFIG = config
    return CONFIG


def parse_base_codepoint(value):
    if value is None:
        return BASE_CODEPOINT
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.upper().startswith("U+"):
        text = text[2:]
    return int(text, 16)


@dataclass
class FamilyResult:
    family: object
    codepoints: object
    built: list = field(default_factory=list)
    failed: list = field(default_factory=list)
    skipped: list = field(default_factory=list)


def build_family(family, temp_dir: Path, out_dir: Path, config, ligatures=True, timeout=60):
    """Two passes: allocate the shared codepoints, then build every variant's font."""
    build_cfg = config["build"]
    base = parse_base_codepoint(build_cfg.get("baseCodepoint"))
    formats = tuple(build_cfg["formats"])

    files_by_variant = {v: list_variant_icons(temp_dir, v) for v in family.variants}
    icons_by_variant = {v: list(files) for v, files in files_by_variant.items()}
    cmap = allocate(family, icons_by_variant, base)
    print(f"Assigned codepoints for {len(cmap)} icons in {family.family}")

    per_variant = {v.style: cmap.for_variant(icons_by_variant[v]) for v in family.variants}
    verify_shared(cmap, per_variant)

    result = FamilyResult(family, cmap)
    for variant in family.variants:
        icons = per_variant[variant.style]
        if not icons:
            print(f"Warning: No SVG files found for {variant.style} style, skipping")
            result.skipped.append(variant)
            continue

        print(f"\nGenerating {variant.style} font with {len(icons)} icons (weight {variant.weight})...")
        try:
            ufo_path, count = build_ufo(
                family, variant, icons, files_by_variant[variant], config,
                Path(temp_dir) / "ufo", ligatures=ligatures,
            )
            compile_font(ufo_path, out_dir, variant.out_prefix, timeout=timeout, formats=formats)
        except (FontCompileError, subprocess.CalledProcessError, OSError) as e:
            print(f"Error: generating {variant.style} font failed: {e}")
            result.failed.append(variant)
            continue
        print(f"Successfully generated {variant.style} font")
        result.built.append(variant)

    # Always written, also when empty, replacing any earlier mapping
    write_family_outputs(family, cmap, out_dir, formats, result.built)
    return result


def count_icons(out_dir: Path):
    total = 0
    for json_file in Path(out_dir).glob("*.json"):
        if json_file.name == BUILD_INFO:
            continue
        with open(json_file, "r", encoding="utf-8") as f:
            total += len(json.load(f))
    return total


def write_build_info(out_dir: Path, version: str, now=None):
    now = now or datetime.now(timezone.utc)
    info = {
        "version": version,
        "timestamp": now.isoformat(),
        "buildDate": now.date().isoformat(),
        "totalIcons": count_icons(out_dir),
    }
    path = Path(out_dir) / BUILD_INFO
    with open(path, "w", encoding="utf-8") as f:
        json.dump(info, f, indent=2)
    print(f"Build info saved to {path}")
    return info


def format_file_size(size):
    if size < 1024:
        return f"{size} bytes"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def list_generated_files(out_dir: Path):
    print("\n--- Generated Files ---")
    for path in sorted(Path(out_dir).iterdir()):
        if path.is_file():
            print(f"{path.name} ({format_file_size(path.stat().st_size)})")
    print("------------------------\n")


def run_soft(label, fn, *args):
    """Documentation steps never fail the build."""
    try:
        fn(*args)
    except Exception as e:
        print(f"Warning: {label} failed: {e}")


def run_build(config, zip_path: Path, out_dir: Path, temp_dir: Path,
              ligatures=True, timeout=60, strict=False, keep_temp=False):
    """Full build. Returns True on success."""
    print("Starting icon font build process...")
    out_dir.mkdir(parents=True, exist_ok=True)
    try:
        extract_archive(zip_path, temp_dir)
        all_dir = find_all_dir(temp_dir)
        if all_dir is None:
            print('Error: "all" directory not found in the extracted zip. '
                  'Please ensure your svg.zip contains an "all" folder with SVG files.')
            raise FileNotFoundError('"all" directory not found in svg.zip')
        sort_into_styles(all_dir, temp_dir)

        print("\n=== Starting font generation for all styles ===")
        results = []
        for family in FAMILIES:
            print(f"\n=== Processing {family.family} group ===")
            results.append(build_family(family, temp_dir, out_dir, config, ligatures, timeout))

        write_combined_css(out_dir)
        today = datetime.now().date().isoformat()
        run_soft("Icon documentation generation", write_readme, out_dir, today)
        run_soft("Demo HTML generation", write_demo, out_dir)
        info = write_build_info(out_dir, config.get("version", "0.0.0"))
        list_generated_files(out_dir)
    finally:
        if keep_temp:
            print("Note: Keeping temp directory for debugging")
        else:
            shutil.rmtree(temp_dir, ignore_errors=True)

    built = sum(len(r.built) for r in results)
    failed = [v.style for r in results for v in r.failed]
    if built == 0:
        print("Error: no font was generated")
        return False
    if failed:
        print(f"Warning: fonts failed for {', '.join(failed)}")
        if strict:
            return False
    print(f"\nBuild completed successfully! Generated {info['totalIcons']} icons")
    for r in results:
        if len(r.codepoints):
            last = r.codepoints.codepoints[-1][1]
            print(f"  {r.family.family}: U+{hex_codepoint(r.codepoints.base)} - U+{hex_codepoint(last)}")
    return True


def setup_dirs(root: Path, config):
    print("Setting up directory structure...")
    paths = config["paths"]
    for key in ("output", "temp", "input"):
        d = root / paths[key]
        d.mkdir(parents=True, exist_ok=True)
        print(f"Created directory: {paths[key]}")
    (root / paths["input"] / "README.md").write_text(INPUT_README, encoding="utf-8")
    print("\nSetup complete!")
    print("\nNext steps:")
    print(f"1. Place your svg.zip file in the \"{paths['input']}\" directory")
    print("2. Run \"python build.py\" to generate the icon fonts")


def clean(temp_dir: Path, out_dir: Path, clean_output=False, assume_yes=False, copied_zip=None):
    print("Cleaning temporary files and directories...")
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
        print(f"Removed: {temp_dir.name}/")
    if copied_zip is not None and copied_zip.is_file():
        copied_zip.unlink()
        print(f"Removed: {copied_zip.name}")
    if clean_output and out_dir.exists():
        answer = "y" if assume_yes else input(f"Do you want to clean the output directory ({out_dir.name}/) as well? (y/N): ")
        if answer.strip().lower() == "y":
            for path in out_dir.iterdir():
                if path.is_dir():
                    shutil.rmtree(path)
                else:
                    path.unlink()
            print(f"Cleaned output directory: {out_dir.name}/")
    print("\nCleanup completed!")


def zip_mtime(zip_path: Path):
    try:
        return zip_path.stat().st_mtime
    except FileNotFoundError:
        return None


def wait_until_stable(zip_path: Path, stability=2.0, poll=0.1):
    """Wait until the file stops changing for `stability` seconds."""
    last = zip_mtime(zip_path)
    stable_since = time.monotonic()
    while time.monotonic() - stable_since < stability:
        time.sleep(poll)
        current = zip_mtime(zip_path)
        if current != last:
            last = current
            stable_since = time.monotonic()
    return last


def watch(zip_path: Path, rebuild, interval=1.0, stability=2.0):
    print("Starting watch mode...")
    print(f"Watching for changes to {zip_path}")
    print("Press Ctrl+C to stop")
    zip_path.parent.mkdir(parents=True, exist_ok=True)
    seen = None
    try:
        while True:
            current = zip_mtime(zip_path)
            if current is None and seen is not None:
                print(f"svg.zip removed at {zip_path}")
                seen = None
            elif current is not None and current != seen:
                print(f"svg.zip changed at {zip_path}")
                seen = wait_until_stable(zip_path, stability)
                print("\n-------------------------------------")
                print(f"Change detected at {datetime.now().strftime('%H:%M:%S')}")
                try:
                    rebuild()
                except Exception as e:
                    print(f"Error running build: {e}")
            time.sleep(interval)
    except KeyboardInterrupt:
        print("\nStopped watching.")


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Build SAXI icon web-fonts from svg.zip")
    ap.add_argument("command", nargs="?", default="build", choices=["build", "setup", "clean", "watch"])
    ap.add_argument("--config", help=f"Configuration file (default: {CONFIG_NAME} next to build.py)")
    ap.add_argument("--zip", help="Input svg.zip (default from config)")
    ap.add_argument("--output", help="Output directory (default from config)")
    ap.add_argument("--temp", help="Working directory for extracted SVGs (default from config)")
    ap.add_argument("--timeout", type=float, help="Deadline in seconds for each font compilation")
    ap.add_argument("--no-ligatures", action="store_true", help="Do not add ligature glyphs and features")
    ap.add_argument("--strict", action="store_true", help="Fail the build if any style's font fails")
    ap.add_argument("--keep-temp", action="store_true", help="Keep the extracted SVGs and UFOs")
    ap.add_argument("--clean-output", action="store_true", help="clean: also empty the output directory")
    ap.add_argument("--yes", action="store_true", help="clean: do not ask for confirmation")
    ap.add_argument("--interval", type=float, default=1.0, help="watch: polling interval in seconds")
    return ap.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = load_config(args.config)
    root = Path.cwd()
    paths = config["paths"]
    zip_path = Path(args.zip) if args.zip else root / paths["zip"]
    out_dir = Path(args.output) if args.output else root / paths["output"]
    temp_dir = Path(args.temp) if args.temp else root / paths["temp"]
    timeout = args.timeout if args.timeout is not None else config["build"]["timeoutSeconds"]
    ligatures = config["build"]["ligatures"] and not args.no_ligatures

    def do_build():
        return run_build(config, zip_path, out_dir, temp_dir, ligatures=ligatures,
                         timeout=timeout, strict=args.strict, keep_temp=args.keep_temp)

    if args.command == "setup":
        setup_dirs(root, config)
        return 0
    if args.command == "clean":
        clean(temp_dir, out_dir, clean_output=args.clean_output, assume_yes=args.yes,
              copied_zip=root / "svg.zip")
        return 0
    if args.command == "watch":
        watch(zip_path, do_build, interval=args.interval)
        return 0

    try:
        ok = do_build()
    except Exception as e:
        print(f"Error building icon font: {e}")
        return 1
    if ok:
        print("Done. Check the output folder.")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
