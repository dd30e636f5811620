from io import BytesIO

import opik
import pytesseract
from PIL import Image, ImageOps

from src.services.ocr.base import OCRService


class TesseractOCR(OCRService):
    """Tesseract OCR over a single ticket photo.

    Image bytes → PIL image (EXIF orientation applied, grayscale) → Tesseract → text.
    """

    def __init__(self, lang: str = "eng"):
        self._lang = lang

    @opik.track(name="ocr_extract_text")
    def extract_text(self, image_bytes: bytes) -> str:
        with Image.open(BytesIO(image_bytes)) as img:
            prepared = ImageOps.exif_transpose(img).convert("L")
        text = pytesseract.image_to_string(prepared, lang=self._lang)
        return text.strip()
