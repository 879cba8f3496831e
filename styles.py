# styles.py: style variants, font families and filename classification
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class StyleVariant:
    style: str        # human label, also the temp folder name
    weight: int
    out_prefix: str
    css_prefix: str

    @property
    def token(self):
        return self.style.lower()


@dataclass(frozen=True)
class FontFamily:
    family: str
    variants: tuple
    mapping_file: str


BOLD = StyleVariant("Bold", 700, "saxi-icons-pro-bold", "saxi-solid")
LINEAR = StyleVariant("Linear", 400, "saxi-icons-pro-linear", "saxi-regular")
OUTLINE = StyleVariant("Outline", 300, "saxi-icons-pro-outline", "saxi-light")
BROKEN = StyleVariant("Broken", 400, "saxi-icons-pro-broken", "saxi-broken")
TWOTONE = StyleVariant("TwoTone", 400, "saxi-icons-pro-twotone", "saxi-twotone")
BULK = StyleVariant("Bulk", 700, "saxi-icons-pro-bulk", "saxi-bulk")

FAMILIES = (
    FontFamily("saxi-icons-pro", (BOLD, LINEAR, OUTLINE, BROKEN), "saxi-icons-pro.json"),
    FontFamily("saxi-icons-pro-twotone", (TWOTONE, BULK), "saxi-icons-pro-twotone.json"),
)

# Priority order for filename suffixes; first match wins.
SUFFIX_ORDER = (BOLD, LINEAR, OUTLINE, BROKEN, BULK, TWOTONE)
VARIANTS_BY_TOKEN = {v.token: v for v in SUFFIX_ORDER}

SUFFIX_PATTERNS = [
    (re.compile(rf"^(?P<name>.+)-{v.token}$", re.IGNORECASE), v) for v in SUFFIX_ORDER
]

IGNORED_NAMES = {".DS_Store", "Thumbs.db", "__MACOSX"}


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one directory or file name.

    ``variant`` is None when nothing matched; ``reason`` then says why so the
    caller can report the item instead of dropping it.
    """
    source: str
    variant: StyleVariant = None
    icon_name: str = None
    reason: str = None

    @property
    def recognized(self):
        return self.variant is not None


@dataclass
class SortReport:
    counts: dict = field(default_factory=lambda: {v.token: 0 for v in SUFFIX_ORDER})
    unrecognized: list = field(default_factory=list)

    @property
    def total(self):
        return sum(self.counts.values())


def normalize_icon_name(stem: str):
    """Strip exactly one trailing style suffix (any casing) from an icon stem.

    Returns (icon_name, variant); variant is None when the stem carries no
    known suffix, in which case the stem is returned untouched.
    """
    for pattern, variant in SUFFIX_PATTERNS:
        m = pattern.match(stem)
        if m:
            return m.group("name"), variant
    return stem, None


def classify_directory(name: str) -> Classification:
    variant = VARIANTS_BY_TOKEN.get(name.strip().lower())
    if variant is None:
        return Classification(name, reason=f"directory '{name}' is not a known style")
    return Classification(name, variant=variant)


def classify_filename(filename: str) -> Classification:
    path = Path(filename)
    if path.suffix.lower() != ".svg":
        return Classification(filename, reason="not an SVG file")
    icon_name, variant = normalize_icon_name(path.stem)
    if variant is None:
        return Classification(filename, reason="no style suffix in filename")
    return Classification(filename, variant=variant, icon_name=icon_name)


def classify_in_directory(variant: StyleVariant, filename: str) -> Classification:
    """A file inside a style folder takes the folder's style; no suffix stripping."""
    path = Path(filename)
    if path.suffix.lower() != ".svg":
        return Classification(filename, reason="not an SVG file")
    return Classification(filename, variant=variant, icon_name=path.stem)


def style_dirs(temp_dir: Path):
    return {v.token: Path(temp_dir) / v.style for v in SUFFIX_ORDER}


def _copy_icon(svg_file: Path, entry: Classification, targets, report: SortReport):
    """Copy one classified SVG into its style folder, refusing to overwrite."""
    target = targets[entry.variant.token] / f"{entry.icon_name}.svg"
    if target.exists():
        print(f"Warning: {entry.source} duplicates {entry.variant.style}/{target.name}, skipping")
        report.unrecognized.append(
            Classification(entry.source, reason=f"duplicate icon name '{entry.icon_name}' in {entry.variant.style}")
        )
        return False
    shutil.copyfile(svg_file, target)
    report.counts[entry.variant.token] += 1
    return True


def sort_into_styles(all_dir: Path, temp_dir: Path) -> SortReport:
    """Copy SVGs from the extracted "all" folder into one folder per style."""
    all_dir = Path(all_dir)
    targets = style_dirs(temp_dir)
    for d in targets.values():
        d.mkdir(parents=True, exist_ok=True)

    report = SortReport()
    items = sorted(all_dir.iterdir())
    print(f"Found {len(items)} items in the \"all\" directory")

    for item in items:
        if item.name in IGNORED_NAMES:
            continue

        if item.is_dir():
            result = classify_directory(item.name)
            if not result.recognized:
                files = sorted(p.relative_to(item).as_posix() for p in item.rglob("*.svg"))
                print(f"Warning: {result.reason}, skipping {len(files)} SVG files")
                report.unrecognized.append(result)
                for name in files:
                    report.unrecognized.append(Classification(f"{item.name}/{name}", reason=result.reason))
                continue

            copied = 0
            for svg_file in sorted(item.iterdir()):
                source = f"{item.name}/{svg_file.name}"
                if svg_file.name in IGNORED_NAMES:
                    continue
                if svg_file.is_dir():
                    nested = sorted(p.relative_to(item).as_posix() for p in svg_file.rglob("*.svg"))
                    print(f"Warning: nested folder {source} in a style folder, skipping {len(nested)} SVG files")
                    report.unrecognized.append(Classification(source, reason="nested folder in a style folder"))
                    for name in nested:
                        report.unrecognized.append(
                            Classification(f"{item.name}/{name}", reason="nested folder in a style folder")
                        )
                    continue
                entry = classify_in_directory(result.variant, svg_file.name)
                if not entry.recognized:
                    print(f"Warning: {entry.reason}: {source}")
                    report.unrecognized.append(Classification(source, reason=entry.reason))
                    continue
                entry = Classification(source, variant=entry.variant, icon_name=entry.icon_name)
                if _copy_icon(svg_file, entry, targets, report):
                    copied += 1
            print(f"Copied {copied} SVG files from {item.name} directory")

        elif item.suffix.lower() == ".svg":
            result = classify_filename(item.name)
            if not result.recognized:
                print(f"Warning: Could not determine style for file: {item.name}")
                report.unrecognized.append(result)
                continue
            _copy_icon(item, result, targets, report)

    print("Files organized by style:")
    print(report.counts)
    if report.unrecognized:
        print(f"Warning: {len(report.unrecognized)} items were skipped")
    return report


def list_variant_icons(temp_dir: Path, variant: StyleVariant):
    """Return {icon_name: svg_path} for one style folder, sorted by name."""
    folder = Path(temp_dir) / variant.style
    if not folder.exists():
        return {}
    files = sorted(p for p in folder.iterdir() if p.is_file() and p.suffix.lower() == ".svg")
    return {p.stem: p for p in files}
