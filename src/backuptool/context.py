from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple


class Action(Enum):
    BACKUP = "backup"
    RESTORE = "restore"


@dataclass(frozen=True)
class RunContext:
    """
    Parsed configuration of one invocation.

    Attributes:
        action (Action): Whether the input paths are backed up or restored.
        output_dir (Path): Directory receiving backup artifacts or restored files.
        input_paths (Tuple[Path, ...]): Paths in the order given on the command line.
        use_passphrase (bool): True if the user asked for passphrase-protected encryption.
        passphrase (Optional[str]): The passphrase read at startup, shared by every path.
    """
    action: Action
    output_dir: Path
    input_paths: Tuple[Path, ...]
    use_passphrase: bool = False
    passphrase: Optional[str] = None

    def describe(self) -> str:
        paths = ", ".join(str(p) for p in self.input_paths)
        protection = " (passphrase)" if self.use_passphrase else ""
        return f"{self.action.value}{protection}: {paths} --> {self.output_dir}"
