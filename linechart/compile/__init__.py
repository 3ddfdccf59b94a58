from .tensor import compile_frame_tensor, compile_patch_tensor

__all__ = ["compile_frame_tensor", "compile_patch_tensor"]
