import argparse
import yaml
import os

from pathlib import Path

from backuptool.context import Action
from backuptool.errors import UsageError, ValidationError
from backuptool.globals import Globals
from backuptool.log import logger

DEFAULT_CONFIG = {
	"destination": None,
	"tmp_dir": None,
	"cipher_algo": Globals.DEFAULT_CIPHER_ALGO,
	"confirm_passphrase": False,
	"log_level": "INFO",
}


class BackupArgumentParser(argparse.ArgumentParser):
	"""ArgumentParser that reports bad arguments as UsageError (exit status 1) instead of exiting with 2."""

	def error(self, message):
		raise UsageError(f"{message}. See usage with --help")


def build_arg_parser():
	parser = BackupArgumentParser(
		prog="backuptool",
		description="Backup and restore files and directories. Backups are compressed with tar and encrypted with gpg.")
	parser.add_argument("action", choices=[a.value for a in Action], help="Either \"backup\" or \"restore\"")
	parser.add_argument("paths", nargs="+", help="Files or directories to back up, or backup files to restore")
	parser.add_argument("-d", "--destination", type=str, help="Output the archive file or restored files into this directory, otherwise the current directory is used.")
	parser.add_argument("-p", dest="use_passphrase", action="store_true", help="Encrypt with a passphrase that is asked for once at startup.")
	parser.add_argument("-c", "--config", type=str, help="Path to the configuration YAML file")
	return parser


def get_run_arguments(argv=None):
	"""
	Parses and validates command-line arguments for backuptool.

	Parameters:
		argv (list[str], optional): Arguments without the program name. Defaults to sys.argv[1:].

	Returns:
		dict: The parsed arguments with the keys "action", "input_paths",
			"destination", "use_passphrase" and "config_file".

	Raises:
		UsageError: If the action is unknown, no path is given or an option is invalid.
		ValidationError: If the destination is not an existing directory.
	"""
	args = build_arg_parser().parse_intermixed_args(argv)

	destination = args.destination
	if destination is not None and not os.path.isdir(destination):
		raise ValidationError(f"{destination} must be an existing directory")

	return {
		"action": Action(args.action),
		"input_paths": [Path(p) for p in args.paths],
		"destination": destination,
		"use_passphrase": args.use_passphrase,
		"config_file": args.config}


def find_config_file(config_file=None):
	"""
	Returns the configuration file to use, or None to run with the defaults.

	An explicitly given file must exist. Otherwise the first `Globals.DEFAULT_CONFIG_FILE`
	found in `Globals.DEFAULT_CONFIG_DIRS` is used.
	"""
	if config_file is not None:
		if not os.path.isfile(config_file):
			raise ValidationError(f"Configuration file \"{config_file}\" not found.")
		return config_file

	for config_dir in Globals.DEFAULT_CONFIG_DIRS:
		candidate = os.path.join(os.path.expanduser(config_dir), Globals.DEFAULT_CONFIG_FILE)
		if os.path.isfile(candidate):
			logger.debug(f"Using configuration file {candidate}")
			return candidate

	return None


def parse_config(path_to_config=None):
	"""
	Parses a YAML configuration file and merges it over the defaults.

	Returns:
		dict: A dictionary with the keys of DEFAULT_CONFIG:
		- 'destination': Default output directory (created if missing).
		- 'tmp_dir': Parent directory for temporary files.
		- 'cipher_algo': Algorithm passed to gpg --cipher-algo.
		- 'confirm_passphrase': Ask for the passphrase twice when backing up.
		- 'log_level': Level of the backuptool logger.

	Raises:
		ValidationError: If the file contains invalid YAML, unknown keys or values of the wrong type.
	"""
	config = dict(DEFAULT_CONFIG)
	if path_to_config is None:
		return config

	try:
		with open(path_to_config) as f:
			loaded = yaml.safe_load(f)
	except yaml.YAMLError as e:
		raise ValidationError(f"Configuration file \"{path_to_config}\" is not valid YAML: {e}") from e
	except OSError as e:
		raise ValidationError(f"Configuration file \"{path_to_config}\" could not be read: {e}") from e

	if loaded is None:
		return config
	if not isinstance(loaded, dict):
		raise ValidationError(f"Configuration file \"{path_to_config}\" must contain a mapping.")

	unknown = sorted(set(loaded) - set(DEFAULT_CONFIG))
	if unknown:
		raise ValidationError(f"Unknown configuration keys: {', '.join(unknown)}")

	for key in ("destination", "tmp_dir", "cipher_algo", "log_level"):
		if loaded.get(key) is not None and not isinstance(loaded[key], str):
			raise ValidationError(f"Configuration key '{key}' must be a string.")
	if "confirm_passphrase" in loaded and not isinstance(loaded["confirm_passphrase"], bool):
		raise ValidationError("Configuration key 'confirm_passphrase' must be true or false.")

	config.update({k: v for k, v in loaded.items() if v is not None})

	logger.debug(f"Configuration loaded from {path_to_config}")
	return config
