import io
import os
from typing import Tuple


class Utils:
    @staticmethod
    def read_null_terminated_name(raw: bytes) -> str:
        # Non-ASCII bytes survive as surrogates so output files keep the raw name
        return raw.split(b'\x00', 1)[0].decode('ascii', errors='surrogateescape')

    @staticmethod
    def printable_name(name: str) -> str:
        return name.encode('ascii', errors='surrogateescape').decode('ascii', errors='replace')

    @staticmethod
    def safe_name(name: str) -> str:
        # Keep entry names from escaping the output directory
        parts = [p for p in name.replace('\\', '/').split('/') if p not in ('', '.', '..')]
        return os.path.join(*parts) if parts else '_'

    @staticmethod
    def byte_array_to_hex_string(bytes_input: bytes) -> str:
        return bytes_input.hex().upper()

    @staticmethod
    def get_pads(fsize: int, align: int = 16) -> int:
        return (align - fsize % align) % align

    @staticmethod
    def remove_padding(data: bytes) -> bytes:
        """Truncate ``data`` right after its last ``>``.

        Decrypted trophy metadata is an XML document, so anything after the
        final closing bracket is cipher block padding. Data without a ``>`` is
        returned unchanged.
        """
        pos = data.rfind(b'>')
        if pos == -1:
            return data
        return data[:pos + 1]

    @staticmethod
    def bytes_to_bitmap(img_bytes: bytes):
        from PIL import Image
        return Image.open(io.BytesIO(img_bytes))

    @staticmethod
    def image_dimensions(img_bytes: bytes) -> Tuple[int, int]:
        with Utils.bytes_to_bitmap(img_bytes) as image:
            return image.size
