from __future__ import annotations

import math
from dataclasses import dataclass

TARGET_WIDTH = 854
TARGET_HEIGHT = 480

# Aspect ratios that round to this value are scaled straight to the target size.
DIRECT_SCALE_RATIO = 1.7


@dataclass(frozen=True)
class ScaleFit:
    """ffmpeg `-vf` description that lands every source on 854x480."""

    kind: str  # "direct" | "upscale_pad" | "downscale_pad"
    vf: str
    scaled_width: int
    scaled_height: int


def compute_fit(width: int, height: int) -> ScaleFit:
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid dimensions: {width}x{height}")

    pad = f"pad={TARGET_WIDTH}:{TARGET_HEIGHT}:(ow-iw)/2:(oh-ih)/2"
    ar = round(width / height, 1)

    if ar == DIRECT_SCALE_RATIO:
        return ScaleFit(
            kind="direct",
            vf=f"scale={TARGET_WIDTH}x{TARGET_HEIGHT}:flags=lanczos",
            scaled_width=TARGET_WIDTH,
            scaled_height=TARGET_HEIGHT,
        )

    if width <= TARGET_WIDTH and height <= TARGET_HEIGHT:
        r = min(TARGET_WIDTH / width, TARGET_HEIGHT / height)
        sw = math.trunc(width * r)
        sh = math.trunc(height * r)
        return ScaleFit(
            kind="upscale_pad",
            vf=f"scale={sw}:{sh}:force_original_aspect_ratio=increase,{pad}",
            scaled_width=sw,
            scaled_height=sh,
        )

    r = min(TARGET_WIDTH / width, TARGET_HEIGHT / height)
    return ScaleFit(
        kind="downscale_pad",
        vf=f"scale={TARGET_WIDTH}:{TARGET_HEIGHT}:force_original_aspect_ratio=decrease,{pad}",
        scaled_width=math.trunc(width * r),
        scaled_height=math.trunc(height * r),
    )
