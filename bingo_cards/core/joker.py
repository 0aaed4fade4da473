from __future__ import annotations

from io import BytesIO
import logging

from PIL import Image

from .errors import JokerRasterError
from .layout import DEFAULT_LAYOUT


logger = logging.getLogger(__name__)


def _svg_to_png_bytes(markup: str, size: int) -> bytes:
    # cairosvg pulls in the native cairo library; import it only when a joker is needed.
    import cairosvg

    return cairosvg.svg2png(
        bytestring=markup.encode("utf-8"),
        output_width=size,
        output_height=size,
    )


def rasterize_joker(markup: str, *, size: int = DEFAULT_LAYOUT.joker_pixels) -> Image.Image:
    if not markup or not markup.strip():
        raise JokerRasterError("joker image markup is empty")

    try:
        png = _svg_to_png_bytes(markup, size)
        img = Image.open(BytesIO(png)).convert("RGBA")
    except Exception as exc:
        raise JokerRasterError(f"unable to rasterize joker image: {exc}") from exc

    if img.size != (size, size):
        img = img.resize((size, size))

    bg = Image.new("RGBA", (size, size), (255, 255, 255, 255))
    bg.alpha_composite(img)
    logger.debug("Rasterized joker image at %sx%s px", size, size)
    return bg.convert("RGB")


class JokerImage:
    """Joker markup plus its raster, computed on first use and shared afterwards."""

    def __init__(self, markup: str, *, size: int = DEFAULT_LAYOUT.joker_pixels) -> None:
        self.markup = markup
        self.size = size
        self._raster: Image.Image | None = None

    @property
    def raster(self) -> Image.Image:
        if self._raster is None:
            self._raster = rasterize_joker(self.markup, size=self.size)
        return self._raster
