from pathlib import Path
from typing import Optional

from backuptool.globals import Globals
from backuptool.log import logger
from backuptool.security.archive import Archiver, TarArchiver
from backuptool.security.cipher import Cipher, GpgCipher
from backuptool.tempfiles import TempRegistry


class BackupPipeline:
    """
    Composes an archiver and a cipher into one backup artifact per input path.

    Backup:  input --(compress)--> scratch archive --(encrypt)--> artifact
    Restore: artifact --(decrypt)--> scratch archive --(decompress)--> output dir

    Scratch files live in a directory obtained from the registry, so they are
    removed even when a step fails half way. The intermediate file is also
    deleted as soon as the second step succeeds.
    """

    def __init__(self, registry: TempRegistry, archiver: Optional[Archiver] = None, cipher: Optional[Cipher] = None):
        self.registry = registry
        self.archiver = archiver if archiver is not None else TarArchiver()
        self.cipher = cipher if cipher is not None else GpgCipher()

    @property
    def extension(self) -> str:
        return self.archiver.extension + self.cipher.extension

    def _scratch_path(self, input_path: Path) -> Path:
        tmp_dir = self.registry.make_temp_dir()
        return tmp_dir / (Path(input_path).name + Globals.TMP_SUFFIX)

    def make_backup(self, input_path: Path, output_path: Path) -> Path:
        tmp_path = self._scratch_path(input_path)

        self.archiver.compress(input_path, tmp_path)
        logger.debug(f"Compressed {input_path} into {tmp_path}")

        self.cipher.encrypt(tmp_path, output_path)
        logger.debug(f"Encrypted {tmp_path} into {output_path}")

        tmp_path.unlink(missing_ok=True)
        return Path(output_path)

    def restore_backup(self, input_path: Path, output_dir: Path) -> Path:
        tmp_path = self._scratch_path(input_path)

        self.cipher.decrypt(input_path, tmp_path)
        logger.debug(f"Decrypted {input_path} into {tmp_path}")

        self.archiver.decompress(tmp_path, output_dir)
        logger.debug(f"Extracted {tmp_path} into {output_dir}")

        tmp_path.unlink(missing_ok=True)
        return Path(output_dir)
