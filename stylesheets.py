# stylesheets.py: per-family CSS, combined CSS and JSON codepoint mappings
import json
import re
from pathlib import Path

from codepoints import hex_codepoint

BASE_CLASS = "saxi"
COMBINED_CSS = "saxi-icons-all.css"

URL_RE = re.compile(r"""url\(['"]?([^'")]+)['"]?\)""")

SRC_FORMATS = (
    ("woff2", "woff2"),
    ("woff", "woff"),
    ("ttf", "truetype"),
)


def font_face(family, variant, formats=("ttf", "woff", "woff2")):
    sources = [
        f'url("{variant.out_prefix}.{ext}") format("{fmt}")'
        for ext, fmt in SRC_FORMATS
        if ext in formats
    ]
    return [
        "@font-face {",
        f"  font-family: '{family.family}';",
        "  src: " + ",\n       ".join(sources) + ";",
        f"  font-weight: {variant.weight};",
        "  font-style: normal !important;",
        "  font-display: block;",
        "}\n",
    ]


def family_css(family, codepoints, formats=("ttf", "woff", "woff2"), variants=None):
    """Stylesheet for one family.

    ``codepoints`` is the family's CodepointMap. ``variants`` limits the
    @font-face rules to the variants that actually produced a font.
    """
    lines = []
    for variant in variants if variants is not None else family.variants:
        lines.extend(font_face(family, variant, formats))

    lines += [
        f".{BASE_CLASS} {{",
        f"  font-family: '{family.family}' !important;",
        "  speak: never;",
        "  font-style: normal !important;",
        "  font-weight: normal;",
        "  font-variant: normal;",
        "  text-transform: none;",
        "  line-height: 1;",
        "  -webkit-font-smoothing: antialiased;",
        "  -moz-osx-font-smoothing: grayscale;",
        '  -webkit-font-feature-settings: "liga";',
        '  -moz-font-feature-settings: "liga=1";',
        '  -moz-font-feature-settings: "liga";',
        '  -ms-font-feature-settings: "liga" 1;',
        '  font-feature-settings: "liga";',
        "  text-rendering: optimizeLegibility;",
        "}\n",
    ]

    for variant in family.variants:
        lines += [
            f".{variant.css_prefix} {{",
            f"  font-family: '{family.family}';",
            f"  font-weight: {variant.weight};",
            "}\n",
        ]

    for name, cp in codepoints.codepoints:
        lines += [
            f".{BASE_CLASS}-{name}:before {{",
            f'  content: "\\{hex_codepoint(cp)}";',
            "}\n",
        ]
    return "\n".join(lines)


def write_mapping(family, codepoints, out_dir: Path):
    path = Path(out_dir) / family.mapping_file
    with open(path, "w", encoding="utf-8") as f:
        json.dump(codepoints.to_hex(), f, indent=2)
        f.write("\n")
    print(f"Generated JSON mapping: {path}")
    return path


def write_family_outputs(family, codepoints, out_dir: Path, formats=("ttf", "woff", "woff2"), variants=None):
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    css_path = out_dir / f"{family.family}.css"
    css_path.write_text(family_css(family, codepoints, formats, variants), encoding="utf-8")
    print(f"Generated CSS file: {css_path}")
    return css_path, write_mapping(family, codepoints, out_dir)


UTILITY_CSS = """/* Utility Classes */
.saxi {
  font-family: 'saxi-icons-pro' !important;
  font-style: normal !important;
  speak: never;
  font-variant: normal;
  text-transform: none;
  line-height: 1;
  -webkit-font-smoothing: antialiased;
  -moz-osx-font-smoothing: grayscale;
}

/* Font-weight utilities */
.saxi-bold, .saxi-solid {
  font-weight: 700 !important;
}

.saxi-regular, .saxi-linear, .saxi-broken, .saxi-twotone {
  font-weight: 400 !important;
}

.saxi-light, .saxi-outline {
  font-weight: 300 !important;
}

.saxi-twotone {
  font-family: 'saxi-icons-pro-twotone' !important;
}

.saxi-bulk {
  font-weight: 700 !important;
  font-family: 'saxi-icons-pro-twotone' !important;
}

/* Ensure all icons have the correct baseline */
[class^="saxi-"], [class*=" saxi-"] {
  font-style: normal !important;
  line-height: 1;
}
"""


def relative_urls(css: str) -> str:
    return URL_RE.sub(lambda m: f"url('{Path(m.group(1)).name}')", css)


def write_combined_css(out_dir: Path):
    """Concatenate every family stylesheet into saxi-icons-all.css."""
    out_dir = Path(out_dir)
    print("\nGenerating combined CSS file...")
    parts = ["/* Combined SAXI Icons CSS */\n\n"]
    for css_file in sorted(out_dir.glob("*.css")):
        if css_file.name == COMBINED_CSS:
            continue
        css = relative_urls(css_file.read_text(encoding="utf-8"))
        css = re.sub(r"font-style:\s*normal;", "font-style: normal !important;", css)
        parts.append(f"/* {css_file.name} */\n{css}\n\n")
    parts.append(UTILITY_CSS)

    combined = out_dir / COMBINED_CSS
    combined.write_text("".join(parts), encoding="utf-8")
    print(f"Created combined CSS file: {COMBINED_CSS}")
    return combined
