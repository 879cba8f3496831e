# fontgen.py: SVG -> UFO -> TTF/WOFF/WOFF2 for one style variant
import subprocess
from pathlib import Path

from fontTools.ttLib import TTFont
from ufoLib2 import Font

from glyphs import load_svg_to_glyph, production_name_from_cp

WEB_FLAVORS = ("woff", "woff2")


class FontCompileError(RuntimeError):
    pass


class FontCompileTimeout(FontCompileError):
    pass


def postscript_name(family: str, style: str) -> str:
    fam = "".join(p.capitalize() for p in family.replace("_", "-").split("-"))
    return f"{fam}-{style}"


def char_glyph_name(ch: str) -> str:
    if ch == " ":
        return "space"
    return production_name_from_cp(ord(ch))


def generate_liga_fea(icon_glyphs):
    """Feature code substituting each typed icon name by its glyph.

    ``icon_glyphs`` is a list of (icon_name, glyph_name). Single-character
    names are left out, a ligature needs at least two components. Longer
    names come first so "add-circle" wins over "add".
    """
    rules = []
    for name, gname in sorted(icon_glyphs, key=lambda t: (-len(t[0]), t[0])):
        if len(name) < 2:
            continue
        components = " ".join(char_glyph_name(ch) for ch in name)
        rules.append(f"    sub {components} by {gname};")
    if not rules:
        return ""
    lines = [
        "languagesystem DFLT dflt;",
        "languagesystem latn dflt;",
        "",
        "feature liga {",
        *rules,
        "} liga;",
        "",
    ]
    return "\n".join(lines)


def build_ufo(family, variant, icons, files, config, ufo_dir: Path, ligatures=True):
    """Build the UFO source for one variant.

    ``icons`` is the variant's list of (icon_name, codepoint) taken from the
    family's shared map; ``files`` maps icon_name -> SVG path.
    Returns (ufo_path, number_of_drawn_glyphs).
    """
    font_cfg = config["font"]
    build_cfg = config["build"]

    u = Font()
    u.info.familyName = family.family
    u.info.styleName = variant.style
    u.info.postscriptFontName = postscript_name(family.family, variant.style)
    u.info.openTypeNamePreferredFamilyName = family.family
    u.info.openTypeNamePreferredSubfamilyName = variant.style
    u.info.openTypeOS2WeightClass = variant.weight
    u.info.unitsPerEm = font_cfg["unitsPerEm"]
    u.info.ascender = font_cfg["ascender"]
    u.info.descender = font_cfg["descender"]
    major, _, minor = str(config.get("version", "1.0")).partition(".")
    u.info.versionMajor = int(major or 1)
    u.info.versionMinor = int((minor or "0").split(".")[0])

    g = u.newGlyph(".notdef")
    g.width = font_cfg["unitsPerEm"]
    sp = u.newGlyph("space")
    sp.unicodes = [0x0020]
    sp.width = font_cfg["unitsPerEm"] // 4
    glyph_order = [".notdef", "space"]

    drawn = []
    for name, cp in icons:
        gname = production_name_from_cp(cp)
        g = u.newGlyph(gname)
        g.unicodes = [cp]
        g.width = font_cfg["unitsPerEm"]
        try:
            ok = load_svg_to_glyph(files[name], g, font_cfg, build_cfg)
        except Exception as e:
            print(f"Warning: Could not draw {files[name].name}: {e}")
            ok = False
        if not ok:
            print(f"Warning: {files[name].name} has no drawable outlines, glyph left empty")
        glyph_order.append(gname)
        drawn.append((name, gname))

    if ligatures:
        for ch in sorted({ch for name, _ in drawn for ch in name}):
            cname = char_glyph_name(ch)
            if cname in u:
                continue
            cg = u.newGlyph(cname)
            cg.unicodes = [ord(ch)]
            cg.width = 0
            glyph_order.append(cname)
        u.features.text = generate_liga_fea(drawn)

    u.lib["public.glyphOrder"] = glyph_order

    ufo_dir = Path(ufo_dir)
    ufo_dir.mkdir(parents=True, exist_ok=True)
    ufo_path = ufo_dir / f"{variant.out_prefix}.ufo"
    u.save(ufo_path, overwrite=True)
    return ufo_path, len(drawn)


def compile_font(ufo_path: Path, out_dir: Path, out_prefix: str, timeout=60, formats=("ttf", "woff", "woff2")):
    """Compile a UFO into <out_prefix>.ttf plus web flavours, within timeout seconds."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    ttf_path = out_dir / f"{out_prefix}.ttf"

    cmd = ["fontmake", "-u", str(ufo_path), "-o", "ttf", "--output-path", str(ttf_path)]
    print("Running:", " ".join(cmd))
    try:
        subprocess.run(cmd, check=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise FontCompileTimeout(f"Timeout ({timeout}s) reached while compiling {out_prefix}") from e

    for flavor in WEB_FLAVORS:
        if flavor not in formats:
            continue
        font = TTFont(str(ttf_path))
        font.flavor = flavor
        font.save(str(out_dir / f"{out_prefix}.{flavor}"))

    outputs = []
    for ext in formats:
        path = out_dir / f"{out_prefix}.{ext}"
        if not path.exists():
            raise FontCompileError(f"Expected file {path.name} was not generated")
        print(f"Generated file: {path.name} ({path.stat().st_size} bytes)")
        outputs.append(path)
    return outputs
