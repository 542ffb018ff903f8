import subprocess

from pathlib import Path
from backuptool.errors import ArchiveError, ExtractError
from backuptool.log import logger


class Archiver:
    """Turns a path into a single compressed artifact and back."""

    extension = ""

    def compress(self, input_path: Path, output_path: Path) -> Path:
        raise NotImplementedError

    def decompress(self, archive_path: Path, output_dir: Path) -> Path:
        raise NotImplementedError


class TarArchiver(Archiver):
    """
    Gzip-compressed tar archives created with the system `tar` binary.

    The archive holds the input under its base name only, so extracting it
    recreates the file or directory directly inside the output directory.
    """

    extension = ".tar.gz"

    def __init__(self, tar_bin: str = "tar"):
        self.tar_bin = tar_bin

    def compress(self, input_path: Path, output_path: Path) -> Path:
        input_path = Path(input_path).resolve()
        output_path = Path(output_path).resolve()

        tar_cmd = [
            self.tar_bin, "-czf", str(output_path),
            "-C", str(input_path.parent),
            input_path.name
        ]
        logger.debug(tar_cmd)

        try:
            subprocess.run(tar_cmd, check=True)
        except subprocess.CalledProcessError as e:
            raise ArchiveError(f"Failed to create archive from: {input_path} (exit status {e.returncode})") from e
        except OSError as e:
            raise ArchiveError(f"Could not run {self.tar_bin} to archive {input_path}: {e}") from e

        return output_path

    def decompress(self, archive_path: Path, output_dir: Path) -> Path:
        tar_cmd = [
            self.tar_bin,
            "-xzf", str(archive_path),
            "-C", str(output_dir)
        ]
        logger.debug(tar_cmd)

        try:
            subprocess.run(tar_cmd, check=True)
        except subprocess.CalledProcessError as e:
            raise ExtractError(f"Failed to unpack \"{archive_path}\" (exit status {e.returncode})") from e
        except OSError as e:
            raise ExtractError(f"Could not run {self.tar_bin} to unpack {archive_path}: {e}") from e

        return Path(output_dir)
