import os
import logging
from .enums import EntryFlag, EntryKind, ExtractStatus
from .NPBind import npbind_path, resolve_np_comm_id, has_valid_sentinel
from .TRPReader import TRPReader, TRPError, TRPFormatError
from .Utils import Utils

logger = logging.getLogger(__name__)

IV_LEN = 16
ICON_NAME_MARKER = "TROP"
ESFM_MARKER = "ESFM"
XML_MARKER = "XML"
ICONS_DIR = "Icons"
XML_DIR = "Xml"


def classify(entry, np_comm_id):
    if entry.flag == EntryFlag.PNG and ICON_NAME_MARKER in entry.name:
        return EntryKind.ICON
    if entry.flag == EntryFlag.ESFM and has_valid_sentinel(np_comm_id):
        return EntryKind.ENCRYPTED_METADATA
    return EntryKind.IGNORE


def xml_name_for(entry_name):
    return entry_name.replace(ESFM_MARKER, XML_MARKER, 1)


def default_enumerate_entries(trophy_dir):
    # npbind.dat records are ordered like trophy00.trp, trophy01.trp, ...
    with os.scandir(trophy_dir) as it:
        return sorted(it, key=lambda entry: entry.name)


def _write_bytes(path, data):
    with open(path, 'wb') as out:
        out.write(data)


class TRPExtractor:
    """Extracts trophy icons and decrypted trophy XML for one title.

    ``decrypt`` is called as ``decrypt(np_comm_id, iv, ciphertext)`` and must
    return plaintext of the same length; when it is ``None`` encrypted entries
    are skipped. ``enumerate_entries`` receives the title's trophy directory
    and returns its entries in the order that matches the npbind.dat records.
    """

    def __init__(self, output_root, decrypt=None, enumerate_entries=None):
        self.output_root = os.fspath(output_root)
        self.decrypt = decrypt
        self.enumerate_entries = enumerate_entries or default_enumerate_entries

    def output_dir_for(self, title, container_path):
        stem = os.path.splitext(os.path.basename(container_path))[0]
        return os.path.join(self.output_root, title, "TrophyFiles", stem)

    def extract(self, title_path):
        title_path = os.fspath(title_path)
        title = os.path.basename(os.path.normpath(title_path))
        trophy_dir = os.path.join(title_path, "sce_sys", "trophy")
        if not os.path.isdir(trophy_dir):
            logger.info(f"No trophy directory for {title}, nothing to extract")
            return ExtractStatus.NOTHING_TO_EXTRACT

        binding_file = npbind_path(title_path)
        try:
            for index, it in enumerate(self.enumerate_entries(trophy_dir)):
                if not it.is_file():
                    continue
                np_comm_id = resolve_np_comm_id(binding_file, index)
                self.extract_container(it.path, self.output_dir_for(title, it.path), np_comm_id)
        except (TRPError, OSError, ValueError) as e:
            logger.critical(f"Trophy extraction failed for {title}: {e}")
            return ExtractStatus.FAILED

        logger.info(f"Trophy files for {title} extracted to {os.path.join(self.output_root, title)}")
        return ExtractStatus.SUCCESS

    def extract_container(self, container_path, output_dir, np_comm_id):
        with TRPReader(container_path) as trp:
            icons_dir = os.path.join(output_dir, ICONS_DIR)
            xml_dir = os.path.join(output_dir, XML_DIR)
            os.makedirs(icons_dir, exist_ok=True)
            os.makedirs(xml_dir, exist_ok=True)

            for entry in trp.entries():
                kind = classify(entry, np_comm_id)
                if kind is EntryKind.ICON:
                    self.extract_icon(trp, entry, icons_dir)
                elif kind is EntryKind.ENCRYPTED_METADATA:
                    self.extract_esfm(trp, entry, xml_dir, np_comm_id)
                elif entry.flag == EntryFlag.ESFM:
                    logger.debug(f"Skipping {entry.name}: no valid NP communication id")

    def extract_icon(self, trp, entry, icons_dir):
        try:
            icon = trp.read_payload(entry.offset, entry.size)
        except TRPError:
            logger.critical("Failed to seek to TRP entry offset")
            raise
        output_file = os.path.join(icons_dir, Utils.safe_name(entry.name))
        _write_bytes(output_file, icon)
        logger.debug(f"Extracted {entry.name} to {output_file}")
        return output_file

    def extract_esfm(self, trp, entry, xml_dir, np_comm_id):
        if self.decrypt is None:
            logger.warning(f"Skipping {entry.name}: no trophy key configured")
            return None
        if entry.size < IV_LEN:
            raise TRPFormatError(f"Encrypted entry {entry.name} is shorter than its IV ({entry.size} bytes)")

        try:
            iv = trp.read_payload(entry.offset, IV_LEN)
        except TRPError:
            logger.critical("Failed to seek to TRP entry offset")
            raise
        try:
            esfm = trp.read_payload(entry.offset + IV_LEN, entry.size - IV_LEN)
        except TRPError:
            logger.critical("Failed to seek to TRP entry + iv offset")
            raise

        xml = Utils.remove_padding(self.decrypt(np_comm_id, iv, esfm))
        output_file = os.path.join(xml_dir, Utils.safe_name(xml_name_for(entry.name)))
        _write_bytes(output_file, xml)
        logger.debug(f"Decrypted {entry.name} to {output_file}")
        return output_file
