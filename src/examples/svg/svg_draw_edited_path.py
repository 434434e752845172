"""Creates a SVG file of a DIN A4 page (portrait format)
showing a path in three editing states:
the parsed input, a rotated and scaled copy and a simplified copy.
Anchor points are marked with small circles, control points with squares.
"""

import os

import svgwrite

from avpath.builder import build
from avpath.document import AvPathDocument
from avpath.geom import curve_bounding_box
from avpath.model import all_points
from avpath.transform import rotate, scale, simplify, translate

OUTPUT_FILE = "data/output/example/svg/din_a4_page_edited_path.svg"

CANVAS_UNIT = "mm"  # Units for CANVAS dimensions
CANVAS_WIDTH = 210  # DIN A4 page width in mm
CANVAS_HEIGHT = 297  # DIN A4 page height in mm

PATH_TEXT = "M 20 20 L 21 21 L 80 20 C 100 20 100 60 80 60 S 40 100 20 60 Q 10 40 20 20 Z M 40 30 h 20 v 10 h -20 z"

STROKE_WIDTH = 0.5  # in mm
MARKER_SIZE = 1.5  # in mm


def add_path(dwg: svgwrite.Drawing, document: AvPathDocument, color: str) -> None:
    """Add the current path of _document_ and markers for its points to _dwg_."""
    dwg.add(dwg.path(d=build(document.segments), stroke=color, stroke_width=STROKE_WIDTH, fill="none"))
    for point in all_points(document.segments):
        if point.is_control_point:
            dwg.add(
                dwg.rect(
                    insert=(point.x - MARKER_SIZE / 2, point.y - MARKER_SIZE / 2),
                    size=(MARKER_SIZE, MARKER_SIZE),
                    fill=color,
                )
            )
        else:
            dwg.add(dwg.circle(center=point.xy, r=MARKER_SIZE / 2, fill=color))


def main(output_file: str = OUTPUT_FILE):
    """Creates a SVG drawing object of DIN A4 size,
    edits a path step by step and adds each state to the drawing.
    Finally, it saves the drawing to a SVG file.
    """
    dwg = svgwrite.Drawing(
        output_file,
        size=(f"{CANVAS_WIDTH}{CANVAS_UNIT}", f"{CANVAS_HEIGHT}{CANVAS_UNIT}"),
        viewBox=f"0 0 {CANVAS_WIDTH} {CANVAS_HEIGHT}",
    )

    document = AvPathDocument(PATH_TEXT)
    add_path(dwg, document, "black")

    # Rotated and scaled copy below the original
    box = curve_bounding_box(document.segments)
    center_x, center_y = box.centroid
    document.apply(rotate, "Rotate", 30, center_x, center_y, rotate_arcs=True)
    document.apply(scale, "Scale", 0.8, 0.8, center_x, center_y, scale_arcs=True)
    document.apply(translate, "Move down", 0, box.height + 20)
    add_path(dwg, document, "blue")

    # Simplified copy of the original below the rotated one
    document.undo()
    document.undo()
    document.undo()
    document.apply(simplify, "Simplify", 2.0)
    document.apply(translate, "Move down", 0, 2 * (box.height + 20))
    add_path(dwg, document, "green")

    # Save the SVG file
    directory = os.path.dirname(output_file)
    if directory:
        os.makedirs(directory, exist_ok=True)
    dwg.saveas(output_file, pretty=True, indent=2)


if __name__ == "__main__":
    main()
