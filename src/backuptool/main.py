#!/usr/bin/env python3

"""
main.py

Backs up files and directories by compressing them with tar and encrypting the archive
with gpg, and restores them by reversing those steps. Temporary files are removed on
exit, on errors and on SIGINT/SIGTERM.
"""

from backuptool.context import Action
from backuptool.errors import BackupToolError, ValidationError, RunInterrupted
from backuptool.log import logger
from backuptool.pipeline import BackupPipeline
from backuptool.security.cipher import GpgCipher
from backuptool.tempfiles import TempRegistry, cleanup_guard
from backuptool.utils import init, build_backup_filename, ensure_output_dir


def process_paths(context, pipeline):
	"""
	Back up or restore every input path of the run, in command-line order.

	Each path is checked right before it is processed. The first failure stops
	the run; artifacts of paths processed before it are kept.

	Returns:
		list[Path]: The created backup artifacts, or the output directory once per restored path.
	"""
	results = []
	for input_path in context.input_paths:

		if not input_path.exists():
			raise ValidationError(f"{input_path} must be an existing file or directory")

		output_dir = context.output_dir
		ensure_output_dir(output_dir)

		if context.action == Action.BACKUP:
			logger.info(f"Reading file or directory to archive at: {input_path}")
			backup_output_path = output_dir / build_backup_filename(input_path, pipeline.extension)
			if backup_output_path.exists():
				raise ValidationError(f"Backup file {backup_output_path} already exists, refusing to overwrite it")

			results.append(pipeline.make_backup(input_path, backup_output_path))
			logger.info(f"Backup file created at: {backup_output_path}")

		elif context.action == Action.RESTORE:
			results.append(pipeline.restore_backup(input_path, output_dir))
			logger.info(f"Restored {input_path} to directory {output_dir}")

	return results


def main(argv=None):

	# 1. Parse arguments and configuration, ask for the passphrase
	try:
		config, context = init(argv)
	except BackupToolError as e:
		logger.error(e)
		return e.exit_code
	except KeyboardInterrupt:
		logger.error("Interrupted.")
		return 130

	# 2. Process every path; temporary files are removed however the loop ends
	registry = TempRegistry(config["tmp_dir"])
	pipeline = BackupPipeline(registry, cipher=GpgCipher(context.passphrase, config["cipher_algo"]))

	try:
		with cleanup_guard(registry):
			process_paths(context, pipeline)
	except RunInterrupted as e:
		logger.error(e)
		return e.exit_code
	except BackupToolError as e:
		logger.error(e)
		return e.exit_code

	return 0


if __name__ == "__main__":
	raise SystemExit(main())
