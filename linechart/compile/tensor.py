from __future__ import annotations

import numpy as np
import torch


def _check_frame(frame_rgba: np.ndarray) -> None:
    if frame_rgba.dtype != np.uint8:
        raise ValueError("frame_rgba must be uint8")
    if frame_rgba.ndim != 3 or frame_rgba.shape[2] != 4:
        raise ValueError("frame_rgba must have shape (H, W, 4)")


def compile_frame_tensor(frame_rgba: np.ndarray) -> torch.Tensor:
    _check_frame(frame_rgba)
    return torch.from_numpy(np.ascontiguousarray(frame_rgba).copy())


def compile_patch_tensor(frame_rgba: np.ndarray, x: int, y: int, width: int, height: int) -> torch.Tensor:
    _check_frame(frame_rgba)
    if width <= 0 or height <= 0:
        raise ValueError("rect width/height must be > 0")
    if x < 0 or y < 0:
        raise ValueError("rect x/y must be >= 0")
    if x + width > frame_rgba.shape[1] or y + height > frame_rgba.shape[0]:
        raise ValueError("rect exceeds frame bounds")
    return torch.from_numpy(np.ascontiguousarray(frame_rgba[y : y + height, x : x + width]).copy())
