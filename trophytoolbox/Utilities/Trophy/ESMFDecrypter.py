import re
import logging
from Crypto.Cipher import AES

logger = logging.getLogger(__name__)

TROPHY_IV = bytes(16)


class ESMFDecrypter:
    def __init__(self, trophy_key):
        if isinstance(trophy_key, str):
            trophy_key = bytes.fromhex(trophy_key)
        elif not isinstance(trophy_key, (bytes, bytearray)):
            raise ValueError(f"Trophy key must be a hex string or bytes, got {type(trophy_key).__name__}")
        if len(trophy_key) != 16:
            raise ValueError(f"Trophy key must be 16 bytes, got {len(trophy_key)}")
        self.trophy_key = bytes(trophy_key)

    def derive_key(self, np_comm_id):
        cipher = AES.new(self.trophy_key, AES.MODE_CBC, TROPHY_IV)
        return cipher.encrypt(bytes(np_comm_id).ljust(16, b'\x00')[:16])

    def decrypt(self, np_comm_id, iv, ciphertext):
        if len(ciphertext) % AES.block_size:
            raise ValueError(f"ESFM ciphertext length {len(ciphertext)} is not a multiple of {AES.block_size}")
        cipher = AES.new(self.derive_key(np_comm_id), AES.MODE_CBC, bytes(iv))
        decrypted_data = cipher.decrypt(bytes(ciphertext))
        logger.debug(f"Decrypted {len(decrypted_data)} bytes")
        return decrypted_data

    def encrypt(self, np_comm_id, iv, plaintext):
        cipher = AES.new(self.derive_key(np_comm_id), AES.MODE_CBC, bytes(iv))
        return cipher.encrypt(bytes(plaintext))

    __call__ = decrypt

    @staticmethod
    def validate_np_com_id(np_com_id):
        if isinstance(np_com_id, bytes):
            np_com_id = np_com_id.rstrip(b'\x00').decode('ascii', errors='replace')
        return re.match(r'^NPWR\d{5}_\d{2}$', np_com_id) is not None
