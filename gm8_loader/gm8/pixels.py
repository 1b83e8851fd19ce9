"""
Pixel buffer conversions.
"""


def swap_red_blue(pixels: bytes) -> bytes:
    """
    Swap the first and third channel of every 4-byte pixel.

    Converts BGRA to RGBA and back; applying it twice returns the input.
    """
    if len(pixels) % 4:
        raise ValueError(f"Pixel buffer length {len(pixels)} is not a multiple of 4")
    out = bytearray(pixels)
    out[0::4] = pixels[2::4]
    out[2::4] = pixels[0::4]
    return bytes(out)


def alpha_to_rgba(alpha: bytes) -> bytes:
    """Expand an 8-bit alpha mask into white RGBA pixels."""
    out = bytearray(b'\xff' * (len(alpha) * 4))
    out[3::4] = alpha
    return bytes(out)
