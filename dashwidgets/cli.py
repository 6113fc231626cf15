import argparse
import sys
import shutil
from pathlib import Path
from importlib.resources import files, as_file

from dashwidgets import main as app_main
from dashwidgets.core.base import default_config_dir

CONFIG_PATTERNS: tuple[str, ...] = ('*.yaml', '*.yml', '*.env')


def copy_config_files(source_dir: Path, dest_dir: Path, force: bool) -> list[tuple[Path, str]]:
    """Copy packaged config files, returns (relative path, outcome) for each file"""
    results: list[tuple[Path, str]] = []
    source_files: list[Path] = []
    for pattern in CONFIG_PATTERNS:
        source_files.extend(source_dir.rglob(pattern))

    for source_file in sorted(source_files):
        relative_path = source_file.relative_to(source_dir)
        dest_file = dest_dir / relative_path
        dest_file.parent.mkdir(parents=True, exist_ok=True)

        if dest_file.exists() and not force:
            results.append((relative_path, 'skipped'))
            continue
        try:
            shutil.copy2(source_file, dest_file)
            results.append((relative_path, 'copied'))
        except OSError as e:
            results.append((relative_path, f'error: {e}'))

    return results


def init_command(args: argparse.Namespace) -> None:
    """
    Handles the 'dashwidgets init' subcommand.
    """
    dest_config_dir: Path = Path(args.config_dir).expanduser() if args.config_dir else default_config_dir()

    try:
        dest_config_dir.mkdir(parents=True, exist_ok=True)
        print(f'Created config directory: {dest_config_dir}')
    except OSError as e:
        print(f'Error: Could not create directory {dest_config_dir}. {e}', file=sys.stderr)
        sys.exit(1)

    # 'as_file' gives a concrete Path on the filesystem
    with as_file(files('dashwidgets.config')) as source_config_path:
        print(f'Copying YAML & ENV files from package config to {dest_config_dir}...')
        results = copy_config_files(source_config_path, dest_config_dir, args.force)

    if not results:
        print('Warning: No YAML & ENV files found in the package config.', file=sys.stderr)
        return

    for relative_path, outcome in results:
        if outcome == 'copied':
            print(f'  Copied: {relative_path}')
        elif outcome == 'skipped':
            print(f'  Skipped (exists): {relative_path}')
        else:
            print(f'  Error copying {relative_path}: {outcome}', file=sys.stderr)

    print('\nInitialization complete.')
    print(f'Your configuration files are in: {dest_config_dir}')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Desktop calendar & task dashboard for the terminal.')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    init_parser = subparsers.add_parser('init', help='Initialize user configuration files.')
    init_parser.add_argument(
        '-f', '--force',
        action='store_true',
        help='Overwrite existing configuration files.'
    )
    init_parser.add_argument(
        '--config-dir',
        default=None,
        help='Target directory (default: ~/.config/dashwidgets).'
    )
    init_parser.set_defaults(func=init_command)
    return parser


def main() -> None:
    """
    Main entry point for the 'dashwidgets' command.
    """
    args = build_parser().parse_args()

    if hasattr(args, 'func'):
        args.func(args)
    else:
        try:
            app_main.main_entry_point()
        except KeyboardInterrupt:
            print('\nExiting.')
            sys.exit(0)


if __name__ == '__main__':
    main()
