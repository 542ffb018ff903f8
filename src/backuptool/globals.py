class Globals:
    TIMESTAMP_FORMAT = "%Y%m%d%H%M"
    BACKUP_INFIX = ".backup_"
    TMP_PREFIX = "backup_tool."
    TMP_SUFFIX = ".compressed.tmp"
    DEFAULT_CIPHER_ALGO = "AES256"
    DEFAULT_CONFIG_FILE = "backuptool.yaml"
    DEFAULT_CONFIG_DIRS = [".", "~/.config/backuptool", "/etc/backuptool"]
    REQUIRED_SYSTEM_BINS = ["tar", "gpg"]
