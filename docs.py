# docs.py: Icon-Font-README.md and demo.html from the JSON mappings
import html
import json
from dataclasses import dataclass
from pathlib import Path

from styles import FAMILIES

README_NAME = "Icon-Font-README.md"
DEMO_NAME = "demo.html"
BUILD_INFO = "build-info.json"


@dataclass(frozen=True)
class IconRecord:
    name: str
    unicode: str
    family: object   # FontFamily


def family_for_mapping(filename: str):
    for family in FAMILIES:
        if family.mapping_file == filename:
            return family
    return None


def read_mappings(out_dir: Path):
    """Load every family mapping file in out_dir as a flat list of IconRecord."""
    icons = []
    for json_file in sorted(Path(out_dir).glob("*.json")):
        if json_file.name == BUILD_INFO:
            continue
        family = family_for_mapping(json_file.name)
        if family is None:
            print(f"Warning: {json_file.name} is not a known mapping file, skipping")
            continue
        with open(json_file, "r", encoding="utf-8") as f:
            mapping = json.load(f)
        icons.extend(IconRecord(name, code, family) for name, code in mapping.items())
    return icons


def category_of(name: str) -> str:
    head, sep, _ = name.partition("-")
    return head if sep else "Misc"


def _usage(icon):
    first = icon.family.variants[0].css_prefix
    return (f'`<i class="{first} saxi-{icon.name}"></i>` or '
            f'`<i class="{first}">{icon.name}</i>`')


def _classes(icon):
    return ", ".join(f"`{v.css_prefix}`" for v in icon.family.variants)


def icon_table(icons):
    lines = [
        "## Icon Table",
        "",
        "| Icon | Name | Unicode | Family | CSS Class | Usage Example |",
        "|------|------|---------|--------|-----------|---------------|",
    ]
    for icon in sorted(icons, key=lambda i: (i.name, i.family.family)):
        lines.append(
            f"| &#x{icon.unicode}; | `{icon.name}` | `\\{icon.unicode}` | {icon.family.family} "
            f"| {_classes(icon)} | {_usage(icon)} |"
        )
    return "\n".join(lines)


def categorized_tables(icons):
    categories = {}
    for icon in icons:
        categories.setdefault(category_of(icon.name), []).append(icon)

    lines = ["## Icon Categories"]
    for category in sorted(categories):
        lines.append(f"\n### {category[:1].upper() + category[1:]} Icons\n")
        lines.append("| Icon | Name | Unicode | Style Options |")
        lines.append("|------|------|---------|---------------|")
        for icon in sorted(categories[category], key=lambda i: (i.name, i.family.family)):
            lines.append(f"| &#x{icon.unicode}; | `{icon.name}` | `\\{icon.unicode}` | {_classes(icon)} |")
    return "\n".join(lines)


def usage_examples(icons):
    sample = icons[0] if icons else None
    name = sample.name if sample else "archive-add"
    code = sample.unicode if sample else "E900"

    html_classes = []
    html_ligatures = []
    for family in FAMILIES:
        for v in family.variants:
            html_classes.append(f'<i class="{v.css_prefix} saxi-{name}"></i>  <!-- {v.style} -->')
            html_ligatures.append(f'<i class="{v.css_prefix}">{name}</i>  <!-- {v.style} -->')

    return "\n".join([
        "## Usage Examples",
        "",
        "### HTML with CSS Classes",
        "",
        "```html",
        *html_classes,
        "```",
        "",
        "### HTML with Ligatures",
        "",
        "```html",
        *html_ligatures,
        "```",
        "",
        "### CSS",
        "",
        "```css",
        ".download-button:before {",
        f'  content: "\\{code}";',
        "  font-family: 'saxi-icons-pro';",
        "  margin-right: 8px;",
        "}",
        "",
        ".icon-bold { font-weight: 700; }",
        ".icon-regular { font-weight: 400; }",
        ".icon-light { font-weight: 300; }",
        "```",
        "",
        "### Using in Design Tools (Figma, Canva, etc.)",
        "",
        "1. Install the font files (.ttf) on your system.",
        "2. Select text and change the font to 'saxi-icons-pro' (Bold, Linear, Outline, Broken)",
        "   or 'saxi-icons-pro-twotone' (TwoTone, Bulk) with the matching weight.",
        f"3. Type the icon name (e.g. '{name}') to use the ligature.",
        "4. Alternatively, paste the Unicode character directly.",
        "",
    ])


def render_readme(icons, date: str) -> str:
    families = sorted({i.family.family for i in icons})
    overview = []
    for family in FAMILIES:
        overview.append(f"- **{family.family}**:")
        for v in family.variants:
            overview.append(f"  - {v.style} ({v.weight}) - Use with class `{v.css_prefix}`")

    return "\n".join([
        "# SAXI Icon Font Documentation",
        "",
        f"Generated on: {date}",
        f"Total Icons: {len(icons)}",
        f"Families: {', '.join(families)}",
        "",
        "## Overview",
        "",
        "This icon font includes the following font files:",
        "",
        *overview,
        "",
        "## Features",
        "",
        "- **Multiple styles** available for each icon through font weights and families",
        "- **Ligature support** - Just type the icon name inside the element",
        "- **Unicode support** - Each icon has a dedicated Unicode code point, shared by every style of its family",
        "- **FontAwesome-style classes** - e.g. `saxi-solid saxi-archive-add`",
        "",
        "## Installation",
        "",
        "```html",
        '<link rel="stylesheet" href="Fonts/saxi-icons-all.css">',
        "<!-- Or include only what you need: -->",
        *(f'<link rel="stylesheet" href="Fonts/{f.family}.css">' for f in FAMILIES),
        "```",
        "",
        icon_table(icons),
        "",
        categorized_tables(icons),
        "",
        usage_examples(icons),
    ])


def render_demo(icons) -> str:
    names = sorted({i.name for i in icons})
    cards = "\n".join(
        f'    <div class="icon-card" data-name="{html.escape(n)}">'
        f'<i class="saxi-regular saxi-{html.escape(n)}"></i>'
        f'<div class="icon-name">{html.escape(n)}</div></div>'
        for n in names
    )
    style_buttons = "\n".join(
        f'    <button data-style="{v.css_prefix}">{v.style}</button>'
        for family in FAMILIES for v in family.variants
    )
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>SAXI Icons Demo</title>
<link rel="stylesheet" href="saxi-icons-all.css">
<style>
  body {{ font-family: -apple-system, "Segoe UI", Roboto, sans-serif; padding: 2rem; }}
  .icon-card {{
    display: inline-flex; flex-direction: column; align-items: center; justify-content: center;
    width: 120px; height: 120px; margin: 10px; padding: 15px;
    border-radius: 8px; box-shadow: 0 2px 5px rgba(0,0,0,0.1);
  }}
  .icon-card.hidden {{ display: none; }}
  .icon-card i {{ font-size: 32px; margin-bottom: 10px; }}
  .icon-name {{ font-size: 12px; text-align: center; word-break: break-word; }}
</style>
</head>
<body>
  <h1>SAXI Icons</h1>
  <p>{len(names)} icons</p>
  <input type="text" id="search" placeholder="Filter icons by name..." autocomplete="off">
  <div id="styles">
{style_buttons}
  </div>
  <div id="icons">
{cards}
  </div>
<script>
(function() {{
  const cards = document.querySelectorAll('.icon-card');
  document.getElementById('search').addEventListener('input', function() {{
    const q = this.value.trim().toLowerCase();
    cards.forEach(c => c.classList.toggle('hidden', q && !c.dataset.name.includes(q)));
  }});
  const prefixes = Array.from(document.querySelectorAll('#styles button')).map(b => b.dataset.style);
  document.querySelectorAll('#styles button').forEach(b => b.addEventListener('click', () => {{
    cards.forEach(c => {{
      const icon = c.querySelector('i');
      prefixes.forEach(p => icon.classList.remove(p));
      icon.classList.add(b.dataset.style);
    }});
  }}));
}})();
</script>
</body>
</html>
"""


def write_readme(out_dir: Path, date: str):
    print("Generating icon font README...")
    icons = read_mappings(out_dir)
    print(f"Found {len(icons)} icons across all families.")
    path = Path(out_dir) / README_NAME
    path.write_text(render_readme(icons, date), encoding="utf-8")
    print(f"Icon font README generated at: {path}")
    return path


def write_demo(out_dir: Path):
    print("Generating demo HTML file...")
    path = Path(out_dir) / DEMO_NAME
    path.write_text(render_demo(read_mappings(out_dir)), encoding="utf-8")
    print(f"Demo HTML file generated at: {path}")
    return path
