from __future__ import annotations

from functools import lru_cache
import logging
import math
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from linechart.canvas import DEFAULT_FONT_FAMILY, RGBA

LOGGER = logging.getLogger(__name__)

DEFAULT_FONT_SIZE_PX = 12.0
FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "dejavu sans",
    "liberationsans",
    "helvetica",
    "arial",
    "menlo",
    "dejavusansmono",
)

# (a, b, c, d, e, f): x' = a*x + b*y + c, y' = d*x + e*y + f
Affine = tuple[float, float, float, float, float, float]
IDENTITY: Affine = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)


def draw_text(
    dst: np.ndarray,
    x: float,
    y: float,
    text: str,
    color: RGBA,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    matrix: Affine = IDENTITY,
) -> None:
    """Draw `text` with its left baseline point at (x, y), mapped through `matrix`."""
    if not text:
        return
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    mask, origin_x, origin_y = _render_mask(text=text, font=font)
    if matrix == IDENTITY:
        _blend_mask(dst, int(round(x - origin_x)), int(round(y - origin_y)), mask, color)
        return
    placed, px, py = _transform_mask(mask, x - origin_x, y - origin_y, matrix)
    _blend_mask(dst, px, py, placed, color)


def text_size(
    text: str,
    *,
    font_family: str = DEFAULT_FONT_FAMILY,
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
) -> tuple[int, int]:
    font = _load_font(font_family=font_family, font_size_px=font_size_px)
    if not text:
        ascent, descent = font.getmetrics()
        return (0, max(1, int(ascent + descent)))
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    return (max(0, int(right - left)), max(1, int(bottom - top)))


def _transform_mask(mask: np.ndarray, x: float, y: float, matrix: Affine) -> tuple[np.ndarray, int, int]:
    """Resample a mask whose top-left sits at (x, y) through `matrix`.

    Returns the resampled mask and its integer top-left position on the canvas.
    """

    a, b, c, d, e, f = matrix
    h, w = mask.shape
    corners = [(x, y), (x + w, y), (x, y + h), (x + w, y + h)]
    mapped = [(a * cx + b * cy + c, d * cx + e * cy + f) for cx, cy in corners]
    bx0 = math.floor(min(p[0] for p in mapped))
    by0 = math.floor(min(p[1] for p in mapped))
    bx1 = math.ceil(max(p[0] for p in mapped))
    by1 = math.ceil(max(p[1] for p in mapped))

    det = a * e - b * d
    if abs(det) < 1e-12:
        raise ValueError("text transform is singular")
    ia, ib, id_, ie = e / det, -b / det, -d / det, a / det
    # Canvas point (X + bx0, Y + by0) maps back to mask point through the inverse.
    tx = bx0 - c
    ty = by0 - f
    data = (
        ia,
        ib,
        ia * tx + ib * ty - x,
        id_,
        ie,
        id_ * tx + ie * ty - y,
    )
    image = Image.fromarray(mask)
    out = image.transform(
        (max(1, bx1 - bx0), max(1, by1 - by0)),
        Image.Transform.AFFINE,
        data,
        resample=Image.Resampling.BILINEAR,
        fillcolor=0,
    )
    return np.asarray(out, dtype=np.uint8), bx0, by0


def _blend_mask(dst: np.ndarray, x: int, y: int, mask: np.ndarray, color: RGBA) -> None:
    h, w = mask.shape
    if h <= 0 or w <= 0:
        return

    x0 = max(0, x)
    y0 = max(0, y)
    x1 = min(dst.shape[1], x + w)
    y1 = min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return

    sx0 = x0 - x
    sy0 = y0 - y
    cov = mask[sy0 : sy0 + (y1 - y0), sx0 : sx0 + (x1 - x0)].astype(np.float32) / 255.0
    src_alpha = (color[3] / 255.0) * cov
    if not np.any(src_alpha > 0):
        return

    patch = dst[y0:y1, x0:x1]
    dst_rgb = patch[:, :, :3].astype(np.float32)
    dst_alpha = patch[:, :, 3].astype(np.float32) / 255.0
    src_rgb = np.asarray(color[:3], dtype=np.float32).reshape(1, 1, 3)
    out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
    out_rgb_num = src_rgb * src_alpha[:, :, None] + dst_rgb * dst_alpha[:, :, None] * (1.0 - src_alpha[:, :, None])
    safe_alpha = np.where(out_alpha > 1e-6, out_alpha, 1.0)
    out_rgb = out_rgb_num / safe_alpha[:, :, None]

    patch[:, :, :3] = np.clip(out_rgb, 0, 255).astype(np.uint8)
    patch[:, :, 3] = np.clip(out_alpha * 255.0, 0, 255).astype(np.uint8)


@lru_cache(maxsize=128)
def _render_mask(text: str, font: ImageFont.FreeTypeFont) -> tuple[np.ndarray, int, int]:
    """Rasterise `text` into a coverage mask; also returns the baseline origin inside it."""
    left, top, right, bottom = font.getbbox(text, anchor="ls")
    width = max(1, int(right - left))
    height = max(1, int(bottom - top))
    image = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(image)
    draw.text((-left, -top), text, fill=255, font=font, anchor="ls")
    return np.asarray(image, dtype=np.uint8), int(-left), int(-top)


@lru_cache(maxsize=64)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is not None:
        try:
            return ImageFont.truetype(str(font_path), size=size)
        except OSError as exc:
            LOGGER.warning("failed to load font %s (%s); using bundled default", font_path, exc)
    else:
        LOGGER.warning("no installed font matches %r; using bundled default", font_family)
    return ImageFont.load_default(size=size)


@lru_cache(maxsize=16)
def _resolve_font_path(font_family: str) -> Path | None:
    wanted = font_family.strip().lower() if font_family.strip() else DEFAULT_FONT_FAMILY.lower()
    patterns = (wanted,) + FONT_FALLBACK_PATTERNS

    font_dirs = [
        Path.home() / "Library" / "Fonts",
        Path("/Library/Fonts"),
        Path("/System/Library/Fonts"),
        Path("/System/Library/Fonts/Supplemental"),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
    ]

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if p == stem:
                return path
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if p in stem:
                return path
    return None
