"""Ray tracing building blocks: transforms, a camera, sampling, example scenes and image tools."""

__version__ = "0.1.0"

__all__ = [
    "camera",
    "common",
    "example_scenes",
    "image",
    "img_avg",
    "img_compare",
    "optics",
    "sampling",
    "transform",
]