import getpass
import os
import shutil

from datetime import datetime
from pathlib import Path

from backuptool.context import Action, RunContext
from backuptool.errors import UsageError, ValidationError
from backuptool.globals import Globals
from backuptool.log import logger, set_log_level
from backuptool.parser import find_config_file, get_run_arguments, parse_config


def check_system_dependencies():
	"""
	Checks whether all required system binaries are available in the system's PATH.

	Raises:
		ValidationError: Naming the first binary of `Globals.REQUIRED_SYSTEM_BINS` that is missing.
	"""
	for current_bin in Globals.REQUIRED_SYSTEM_BINS:
		if shutil.which(current_bin) is None:
			raise ValidationError(f"backuptool requires {current_bin}. Please install it on your system.")


def read_passphrase(confirm=False):
	"""
	Prompt for the encryption passphrase without echoing it.

	Parameters:
		confirm (bool): Ask a second time and require both entries to match.

	Returns:
		str: The passphrase.

	Raises:
		UsageError: If the passphrase is empty or the confirmation does not match.
	"""
	passphrase = getpass.getpass("Enter encryption password: ")
	if not passphrase:
		raise UsageError("The encryption password must not be empty.")

	if confirm and getpass.getpass("Confirm encryption password: ") != passphrase:
		raise UsageError("The encryption passwords do not match.")

	return passphrase


def build_backup_filename(input_path, extension, now=None):
	"""
	Name of the backup artifact for `input_path`: <basename>.backup_<YYYYMMDDHHmm><extension>
	"""
	now = now or datetime.now()
	timestamp = now.strftime(Globals.TIMESTAMP_FORMAT)
	# Path("dir/").name drops the trailing slash, resolve() handles "." and ".."
	input_name = Path(input_path).resolve().name
	return f"{input_name}{Globals.BACKUP_INFIX}{timestamp}{extension}"


def ensure_output_dir(output_dir):
	try:
		Path(output_dir).mkdir(parents=True, exist_ok=True)
	except OSError as e:
		raise ValidationError(f"Failed to create output directory {output_dir}: {e}") from e

	if not Path(output_dir).is_dir():
		raise ValidationError(f"{output_dir} must be a directory")


def init(argv=None):
	"""
	Initializes backuptool by parsing the command line and the configuration,
	performing system checks and asking for the passphrase if requested.

	The passphrase is asked for exactly once, before any path is processed.

	Returns:
		tuple: (config, context) with the merged configuration dict and the RunContext.

	Raises:
		BackupToolError: On any usage, configuration or system check failure.
	"""
	args = get_run_arguments(argv)

	config = parse_config(find_config_file(args["config_file"]))
	try:
		set_log_level(config["log_level"])
	except ValueError as e:
		raise ValidationError(str(e)) from e

	check_system_dependencies()

	output_dir = args["destination"] or config["destination"] or os.getcwd()

	passphrase = None
	if args["use_passphrase"]:
		confirm = config["confirm_passphrase"] and args["action"] == Action.BACKUP
		passphrase = read_passphrase(confirm)

	context = RunContext(
		action=args["action"],
		output_dir=Path(output_dir).expanduser(),
		input_paths=tuple(args["input_paths"]),
		use_passphrase=args["use_passphrase"],
		passphrase=passphrase)

	logger.debug(context.describe())
	return config, context
