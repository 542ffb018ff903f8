import subprocess

from pathlib import Path
from typing import Optional

from backuptool.errors import DecryptError, EncryptError
from backuptool.globals import Globals
from backuptool.log import logger


class Cipher:
    """Turns a file into an encrypted artifact and back."""

    extension = ""

    def encrypt(self, input_path: Path, output_path: Path) -> Path:
        raise NotImplementedError

    def decrypt(self, input_path: Path, output_path: Path) -> Path:
        raise NotImplementedError


class GpgCipher(Cipher):
    """
    Symmetric encryption with the system `gpg` binary.

    Without a passphrase gpg asks for one itself (pinentry). With a passphrase,
    gpg runs in batch mode and reads it from standard input, so it never shows
    up in the process list. Passphrases are not cached by the gpg agent, a
    wrong passphrase on restore always fails.
    """

    extension = ".gpg"

    def __init__(self, passphrase: Optional[str] = None, cipher_algo: str = Globals.DEFAULT_CIPHER_ALGO, gpg_bin: str = "gpg"):
        self.passphrase = passphrase
        self.cipher_algo = cipher_algo
        self.gpg_bin = gpg_bin

    def _base_cmd(self) -> list:
        if self.passphrase is None:
            return [self.gpg_bin]
        return [
            self.gpg_bin, "--batch", "--yes",
            "--pinentry-mode", "loopback",
            "--no-symkey-cache",
            "--passphrase-fd", "0"
        ]

    def _run(self, gpg_cmd: list) -> None:
        # Never log the passphrase, only the command line
        logger.debug(gpg_cmd)
        if self.passphrase is None:
            subprocess.run(gpg_cmd, check=True)
        else:
            subprocess.run(gpg_cmd, check=True, input=self.passphrase + "\n", text=True)

    def encrypt(self, input_path: Path, output_path: Path) -> Path:
        if self.passphrase == "":
            raise EncryptError("Passphrase mode requires a non-empty passphrase.")

        gpg_cmd = self._base_cmd() + [
            "--symmetric", "--cipher-algo", self.cipher_algo,
            "--output", str(output_path),
            str(input_path)
        ]

        try:
            self._run(gpg_cmd)
        except subprocess.CalledProcessError as e:
            raise EncryptError(f"GPG encryption of \"{input_path}\" failed (exit status {e.returncode})") from e
        except OSError as e:
            raise EncryptError(f"Could not run {self.gpg_bin} to encrypt {input_path}: {e}") from e

        if not Path(output_path).exists():
            raise EncryptError(f"Encryption completed but file not found: {output_path}")

        return Path(output_path)

    def decrypt(self, input_path: Path, output_path: Path) -> Path:
        gpg_cmd = self._base_cmd() + [
            "--output", str(output_path),
            "--decrypt", str(input_path)
        ]

        try:
            self._run(gpg_cmd)
        except subprocess.CalledProcessError as e:
            raise DecryptError(f"Failed to decrypt \"{input_path}\" (wrong passphrase or corrupt file)") from e
        except OSError as e:
            raise DecryptError(f"Could not run {self.gpg_bin} to decrypt {input_path}: {e}") from e

        return Path(output_path)
