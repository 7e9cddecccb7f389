import qrcode
import io
import base64
from PIL import Image

TICKET_PAYLOAD_PREFIX = "NEXIVENT-TICKET"
MISSING_ORDER_ID = "N/A"
QR_IMAGE_SIZE = 200


def build_ticket_payload(event_name: str, order_id: str = None) -> str:
    return f"{TICKET_PAYLOAD_PREFIX}|EVENT:{event_name}|ORDER:{order_id or MISSING_ORDER_ID}"


def generate_qr_image(payload: str, size: int = QR_IMAGE_SIZE) -> Image.Image:
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )

    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white").get_image()

    # Nearest keeps module edges sharp for scanners
    return img.convert("RGB").resize((size, size), Image.NEAREST)


def generate_qr_code(payload: str, size: int = QR_IMAGE_SIZE) -> str:
    img = generate_qr_image(payload, size)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    img_bytes = buffer.getvalue()
    img_base64 = base64.b64encode(img_bytes).decode('utf-8')

    return f"data:image/png;base64,{img_base64}"
