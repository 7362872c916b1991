"""Menu-bar status icons drawn with Pillow."""

import logging
from pathlib import Path

from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)

ICON_SIZE = 36


def make_icon(path: Path, active: bool):
    """
    Draw a template icon: a ring, filled in when an exit node is active.

    Only the alpha channel matters for macOS template images, so everything
    is drawn in black.
    """
    image = Image.new("RGBA", (ICON_SIZE, ICON_SIZE), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)

    m = 4
    draw.ellipse([m, m, ICON_SIZE - m, ICON_SIZE - m], outline=(0, 0, 0, 255), width=3)
    if active:
        m = 11
        draw.ellipse([m, m, ICON_SIZE - m, ICON_SIZE - m], fill=(0, 0, 0, 255))

    image.save(path, "PNG")


def generate_icons(output_dir: Path) -> tuple:
    """Write on/off icons into `output_dir` and return their paths."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    on_path = output_dir / "icon_on.png"
    off_path = output_dir / "icon_off.png"
    make_icon(on_path, active=True)
    make_icon(off_path, active=False)

    logger.debug("Icons written to %s", output_dir)
    return str(on_path), str(off_path)
