from backuptool.security.archive import Archiver, TarArchiver
from backuptool.security.cipher import Cipher, GpgCipher

__all__ = ["Archiver", "TarArchiver", "Cipher", "GpgCipher"]
