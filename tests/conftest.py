import io
import logging

import pytest
from PIL import Image

from trophytoolbox.Utilities.Trophy import Archiver, EntryFlag, TRPCreator
from trophytoolbox.Utilities.Trophy.NPBind import NPBIND_BASE_OFFSET, NPBIND_RECORD_SIZE

TEST_IV = bytes(range(0xA0, 0xB0))


@pytest.fixture
def build_trp():
    """Return a function packing ``(name, data, flag)`` tuples into TRP bytes."""
    def _build(entries, version=3):
        archivers = [
            Archiver(i, name, 0, len(data), data, flag)
            for i, (name, data, flag) in enumerate(entries)
        ]
        return TRPCreator(version=version).build(archivers)
    return _build


@pytest.fixture
def build_npbind():
    def _build(np_comm_ids):
        data = bytearray(NPBIND_BASE_OFFSET + NPBIND_RECORD_SIZE * len(np_comm_ids))
        for i, np_comm_id in enumerate(np_comm_ids):
            offset = NPBIND_BASE_OFFSET + i * NPBIND_RECORD_SIZE
            data[offset:offset + len(np_comm_id)] = np_comm_id
        return bytes(data)
    return _build


@pytest.fixture
def make_title(tmp_path, build_npbind):
    """Create ``games/<name>/sce_sys/{trophy/,npbind.dat}`` under tmp_path."""
    def _make(containers, np_comm_ids=None, name="CUSA00001"):
        title = tmp_path / "games" / name
        trophy_dir = title / "sce_sys" / "trophy"
        trophy_dir.mkdir(parents=True)
        for filename, data in containers.items():
            (trophy_dir / filename).write_bytes(data)
        if np_comm_ids is not None:
            (title / "sce_sys" / "npbind.dat").write_bytes(build_npbind(np_comm_ids))
        return title
    return _make


@pytest.fixture
def output_root(tmp_path):
    return tmp_path / "out"


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (4, 2), (255, 0, 0)).save(buffer, "PNG")
    return buffer.getvalue()


@pytest.fixture
def scenario_trp(build_trp):
    icon = bytes([0xFF, 0xD8, 0xFF, 0xE0]) + b"icon-bytes"
    esfm = TEST_IV + b"<xml>data</xml>PADPAD"
    return build_trp([
        ("TROP.PNG", icon, EntryFlag.PNG),
        ("ESFM.DAT", esfm, EntryFlag.ESFM),
    ])


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    root = logging.getLogger('')
    for handler in [h for h in root.handlers if getattr(h, '_trophytoolbox', False)]:
        root.removeHandler(handler)
        handler.close()
