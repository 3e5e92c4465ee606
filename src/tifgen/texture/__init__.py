"""Pixel formats, pixel packing, mip planning and block compression."""
