# glyphs.py: draw SVG icon outlines into UFO glyphs
import xml.etree.ElementTree as ET
from pathlib import Path

from fontTools.misc.transform import Transform
from fontTools.pens.transformPen import TransformPen
from svgpathtools import svg2paths2, Line, QuadraticBezier, CubicBezier, Arc


def production_name_from_cp(cp: int):
    # Use 'uniXXXX' / 'uXXXXX' naming convention
    if cp <= 0xFFFF:
        return f"uni{cp:04X}"
    return f"u{cp:05X}"


def parse_viewbox(value):
    if not value:
        return None
    parts = value.replace(",", " ").split()
    if len(parts) != 4:
        return None
    x, y, w, h = (float(p) for p in parts)
    if w <= 0 or h <= 0:
        return None
    return (x, y, x + w, y + h)


def get_svg_bbox(svg_file):
    """Bounding box (min_x, min_y, max_x, max_y) of the drawn content, or None."""
    try:
        paths, attrs, svg_attrs = svg2paths2(str(svg_file))

        min_x = min_y = float('inf')
        max_x = max_y = float('-inf')

        for path in paths:
            if path:
                xmin, xmax, ymin, ymax = path.bbox()
                min_x = min(min_x, xmin)
                max_x = max(max_x, xmax)
                min_y = min(min_y, ymin)
                max_y = max(max_y, ymax)

        # No paths; look at basic shapes directly
        if min_x == float('inf'):
            root = ET.parse(str(svg_file)).getroot()
            for elem in root.iter():
                tag = elem.tag.split('}')[-1]
                if tag == 'rect':
                    x, y = float(elem.get('x', 0)), float(elem.get('y', 0))
                    w, h = float(elem.get('width', 0)), float(elem.get('height', 0))
                elif tag == 'circle':
                    r = float(elem.get('r', 0))
                    x, y = float(elem.get('cx', 0)) - r, float(elem.get('cy', 0)) - r
                    w = h = r * 2
                elif tag == 'ellipse':
                    rx, ry = float(elem.get('rx', 0)), float(elem.get('ry', 0))
                    x, y = float(elem.get('cx', 0)) - rx, float(elem.get('cy', 0)) - ry
                    w, h = rx * 2, ry * 2
                else:
                    continue
                if w > 0 and h > 0:
                    min_x = min(min_x, x)
                    max_x = max(max_x, x + w)
                    min_y = min(min_y, y)
                    max_y = max(max_y, y + h)

        if min_x == float('inf'):
            return None
        return (min_x, min_y, max_x, max_y)
    except (ET.ParseError, ValueError, OSError) as e:
        print(f"Warning: Could not parse SVG {Path(svg_file).name}: {e}")
        return None


def icon_transform(box, font_config, build_config):
    """Map SVG user space (y down) into the em box (y up).

    The icon is scaled so its larger side equals fontHeight, centred
    vertically between descender and descender + fontHeight, and centred
    horizontally in the advance width when centerHorizontally is set.
    """
    min_x, min_y, max_x, max_y = box
    width = max_x - min_x
    height = max_y - min_y
    font_height = font_config["fontHeight"]
    advance = font_config["unitsPerEm"]
    scale = font_height / max(width, height)

    offset_x = (advance - width * scale) / 2 if build_config["centerHorizontally"] else 0
    offset_y = font_config["descender"] + (font_height - height * scale) / 2

    dx = offset_x - min_x * scale
    dy = max_y * scale + offset_y
    return Transform(scale, 0, 0, -scale, dx, dy)


# --- helpers for robust SVG path drawing ---
def _pt(c):
    return (float(c.real), float(c.imag))


def approx_equal(pt1, pt2, eps=1e-6):
    return abs(pt1[0] - pt2[0]) <= eps and abs(pt1[1] - pt2[1]) <= eps


def _draw_segment(seg, pen):
    if isinstance(seg, Line):
        pen.lineTo(_pt(seg.end))
    elif isinstance(seg, QuadraticBezier):
        p0, q1, p2 = _pt(seg.start), _pt(seg.control), _pt(seg.end)
        c1 = (p0[0] + 2.0/3.0*(q1[0]-p0[0]), p0[1] + 2.0/3.0*(q1[1]-p0[1]))
        c2 = (p2[0] + 2.0/3.0*(q1[0]-p2[0]), p2[1] + 2.0/3.0*(q1[1]-p2[1]))
        pen.curveTo(c1, c2, p2)
    elif isinstance(seg, CubicBezier):
        pen.curveTo(_pt(seg.control1), _pt(seg.control2), _pt(seg.end))
    elif isinstance(seg, Arc):
        for cubic in seg.as_cubic_curves():
            pen.curveTo(_pt(cubic.control1), _pt(cubic.control2), _pt(cubic.end))
    else:
        pen.lineTo(_pt(seg.end))


def _split_into_contours(svg_path):
    contours = []
    current = []
    prev_end = None
    for seg in svg_path:
        if prev_end is not None and not approx_equal(_pt(seg.start), prev_end):
            if current:
                contours.append(current)
                current = []
        current.append(seg)
        prev_end = _pt(seg.end)
    if current:
        contours.append(current)
    return contours


def draw_svg_path_into_pen(svg_path, pen):
    """Draw an SvgPath that may contain multiple discontinuous contours."""
    for segs in _split_into_contours(svg_path):
        start = _pt(segs[0].start)
        pen.moveTo(start)
        for seg in segs:
            _draw_segment(seg, pen)
        # Glyph outlines are filled, so open subpaths are closed too
        pen.closePath()


def load_svg_to_glyph(svg_file, glyph, font_config, build_config):
    """Draw every path of svg_file into glyph. Returns False for empty icons."""
    paths, attrs, svg_attrs = svg2paths2(str(svg_file))
    paths = [p for p in paths if len(p)]

    box = None
    if not build_config["normalize"]:
        box = parse_viewbox(svg_attrs.get("viewBox"))
    if box is None:
        box = get_svg_bbox(svg_file)
    if box is None or max(box[2] - box[0], box[3] - box[1]) <= 0:
        return False

    pen = TransformPen(glyph.getPen(), icon_transform(box, font_config, build_config))
    for p in paths:
        draw_svg_path_into_pen(p, pen)
    return bool(paths)
