import pytest

from pathlib import Path

from backuptool.errors import ArchiveError, DecryptError, ExtractError
from backuptool.security.archive import Archiver
from backuptool.security.cipher import Cipher
from backuptool.tempfiles import TempRegistry


class FakeArchiver(Archiver):
    """Copies a single file instead of running tar. Records every call."""

    extension = ".fake"

    def __init__(self, fail_compress=False, fail_decompress=False):
        self.calls = []
        self.fail_compress = fail_compress
        self.fail_decompress = fail_decompress

    def compress(self, input_path, output_path):
        self.calls.append(("compress", Path(input_path), Path(output_path)))
        if self.fail_compress:
            raise ArchiveError(f"Failed to create archive from: {input_path}")
        Path(output_path).write_text(Path(input_path).name + "\n" + Path(input_path).read_text())
        return Path(output_path)

    def decompress(self, archive_path, output_dir):
        self.calls.append(("decompress", Path(archive_path), Path(output_dir)))
        if self.fail_decompress:
            raise ExtractError(f"Failed to unpack \"{archive_path}\"")
        name, content = Path(archive_path).read_text().split("\n", 1)
        (Path(output_dir) / name).write_text(content)
        return Path(output_dir)


class FakeCipher(Cipher):
    """Prefixes the passphrase instead of running gpg. Records every call."""

    extension = ".enc"

    def __init__(self, passphrase="secret"):
        self.passphrase = passphrase
        self.calls = []

    def encrypt(self, input_path, output_path):
        self.calls.append(("encrypt", Path(input_path), Path(output_path)))
        Path(output_path).write_text(self.passphrase + "|" + Path(input_path).read_text())
        return Path(output_path)

    def decrypt(self, input_path, output_path):
        self.calls.append(("decrypt", Path(input_path), Path(output_path)))
        passphrase, content = Path(input_path).read_text().split("|", 1)
        if passphrase != self.passphrase:
            raise DecryptError(f"Failed to decrypt \"{input_path}\"")
        Path(output_path).write_text(content)
        return Path(output_path)


@pytest.fixture
def registry(tmp_path):
    scratch = tmp_path / "scratch"
    reg = TempRegistry(str(scratch))
    yield reg
    reg.cleanup()


@pytest.fixture
def fake_archiver():
    return FakeArchiver()


@pytest.fixture
def fake_cipher():
    return FakeCipher()


@pytest.fixture
def fake_classes():
    return FakeArchiver, FakeCipher
