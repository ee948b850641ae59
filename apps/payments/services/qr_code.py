"""
QR code rendering for payment descriptors.

Turns a SPAYD string into a PNG that Czech banking apps can scan. The
descriptor itself is built by ``build_spayd``; this module has no opinion
on its content.
"""

from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q, ERROR_CORRECT_H

ERROR_CORRECTION_LEVELS = {
    'L': ERROR_CORRECT_L,
    'M': ERROR_CORRECT_M,
    'Q': ERROR_CORRECT_Q,
    'H': ERROR_CORRECT_H,
}


def make_qr_image(descriptor: str, *, error_correction: str = 'M', box_size: int = 10, border: int = 4):
    """
    Build a QR code image from a payment descriptor.

    Args:
        descriptor: SPAYD formatted payment string
        error_correction: Level L, M, Q or H. M (15% recovery) is a good
            balance between size and reliability.
        box_size: Pixel size of one QR module
        border: Quiet zone width in modules

    Returns:
        PIL image of the QR code

    Raises:
        ValueError: If error_correction is not a known level
    """
    level = ERROR_CORRECTION_LEVELS.get(error_correction.upper())
    if level is None:
        raise ValueError(f"Unknown QR error correction level: '{error_correction}'")

    qr = qrcode.QRCode(
        version=None,
        error_correction=level,
        box_size=box_size,
        border=border,
    )
    qr.add_data(descriptor)
    qr.make(fit=True)

    return qr.make_image(fill_color="black", back_color="white")


def render_qr_png(descriptor: str, **options) -> bytes:
    """Render the descriptor as PNG bytes, e.g. for an HTTP response."""
    image = make_qr_image(descriptor, **options)
    buffer = BytesIO()
    image.save(buffer, format='PNG')
    return buffer.getvalue()
