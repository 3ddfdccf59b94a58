from .draw_lines import draw_segment
from .draw_text import draw_text, text_size
from .pixels import draw_hline, draw_pixel, draw_vline, fill_rect, new_canvas
from .surface import RasterCanvas

__all__ = [
    "RasterCanvas",
    "draw_hline",
    "draw_pixel",
    "draw_segment",
    "draw_text",
    "draw_vline",
    "fill_rect",
    "new_canvas",
    "text_size",
]
