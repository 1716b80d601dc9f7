"""
SVG -> multi-resolution ICO conversion.

Rasterizes the SVG once per target size with CairoSVG, normalises every frame
to an exact transparent square with Pillow and packs the frames into a single
ICO file next to the source.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger
from PIL import Image, UnidentifiedImageError

from domains.icon_export.errors import ConversionError, TransientAccessError, is_transient_os_error
from icowatch.utils.config import Settings, get_settings
from icowatch.utils.helpers import derive_output_path

TRANSPARENT = (0, 0, 0, 0)


def _import_cairosvg():
    """CairoSVG needs the native cairo library; report a missing one clearly."""
    try:
        import cairosvg
    except (ImportError, OSError) as e:
        raise ConversionError(f"SVG support requires 'cairosvg' and libcairo: {e}") from e
    return cairosvg


def fit_to_square(im: Image.Image, size: int) -> Image.Image:
    """
    Return ``im`` as an RGBA ``size`` x ``size`` frame.

    Images that already match are only converted to RGBA. Others are scaled
    to fit, keeping their aspect ratio, and centred on a transparent canvas.
    """
    im = im.convert("RGBA")
    if im.size == (size, size):
        return im

    w, h = im.size
    scale = size / max(w, h, 1)
    fitted = im.resize(
        (max(1, round(w * scale)), max(1, round(h * scale))),
        Image.LANCZOS,
    )

    canvas = Image.new("RGBA", (size, size), TRANSPARENT)
    x = (size - fitted.width) // 2
    y = (size - fitted.height) // 2
    canvas.paste(fitted, (x, y), fitted)
    return canvas


class SvgIcoConverter:
    """Conversion port implementation backed by CairoSVG and Pillow."""

    def __init__(
        self,
        sizes: Optional[Sequence[int]] = None,
        output_extension: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.sizes: List[int] = sorted(
            set(sizes) if sizes is not None else set(settings.get_icon_sizes()),
            reverse=True,
        )
        self.output_extension = output_extension or settings.output_extension

        if not self.sizes:
            raise ValueError("At least one icon size is required")

    def output_path_for(self, source: Path) -> Path:
        return derive_output_path(source, self.output_extension)

    def convert(self, source: Path) -> Path:
        """
        Convert ``source`` into an ICO.

        Args:
            source: SVG file path

        Returns:
            Path of the written ICO

        Raises:
            TransientAccessError: source or output is locked by another process
            ConversionError: the SVG could not be rendered or the ICO written
        """
        source = Path(source)
        output = self.output_path_for(source)

        svg_data = self._read_source(source)
        frames = [self.render_frame(svg_data, size) for size in self.sizes]

        try:
            frames[0].save(
                output,
                format="ICO",
                sizes=[(size, size) for size in self.sizes],
                append_images=frames[1:],
            )
        except OSError as e:
            if is_transient_os_error(e):
                raise TransientAccessError(f"{output} is in use: {e}") from e
            raise ConversionError(f"Cannot write {output}: {e}") from e

        logger.debug(f"Wrote {output} ({len(frames)} frames)")
        return output

    def render_frame(self, svg_data: bytes, size: int) -> Image.Image:
        """Rasterize ``svg_data`` into one exact ``size`` square frame."""
        cairosvg = _import_cairosvg()

        try:
            png_bytes = cairosvg.svg2png(
                bytestring=svg_data,
                output_width=size,
                output_height=size,
            )
            im = Image.open(BytesIO(png_bytes))
            im.load()
        except UnidentifiedImageError as e:
            raise ConversionError(f"Rasterizer produced an unreadable image: {e}") from e
        except Exception as e:
            raise ConversionError(f"Cannot render SVG at {size}px: {e}") from e

        return fit_to_square(im, size)

    def _read_source(self, source: Path) -> bytes:
        try:
            return source.read_bytes()
        except OSError as e:
            if is_transient_os_error(e):
                raise TransientAccessError(f"{source} is in use: {e}") from e
            raise ConversionError(f"Cannot read {source}: {e}") from e
