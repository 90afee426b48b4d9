import base64
from io import BytesIO

import qrcode
from qrcode import constants

class QRCodeEncoder:
    """Encodes ticket identifiers as base64 PNG QR codes"""

    def __init__(self, box_size: int = 10, border: int = 4, error_correction: str = "M"):
        self.box_size = box_size
        self.border = border
        self.error_correction = getattr(constants, f"ERROR_CORRECT_{error_correction}")

    def encode(self, data: str) -> str:
        qr = qrcode.QRCode(
            version=1,
            error_correction=self.error_correction,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(data)
        qr.make(fit=True)

        qr_image = qr.make_image(fill_color="black", back_color="white")

        buffer = BytesIO()
        qr_image.save(buffer, format="PNG")
        return base64.b64encode(buffer.getvalue()).decode()
