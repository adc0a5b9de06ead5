"""
cmdx - Main entry point.
Command-line front end for the translation engine.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from cmdx import __version__
from cmdx.config import Config
from cmdx.errors import TranslateError
from cmdx.highlighting import highlight
from cmdx.interactive import TranslatorShell
from cmdx.package_manager import translate_package_command, translate_package_command_auto
from cmdx.paths import translate_path_auto, translate_paths
from cmdx.platforms import Os, PackageManager, PackageOperation, current_os
from cmdx.scripts import translate_script, translate_script_extension, translate_shebang
from cmdx.tables import available_commands
from cmdx.env_vars import translate_env_vars
from cmdx.translator import (
    translate_batch,
    translate_command,
    translate_compound_command,
    translate_full,
)

TRANSLATORS = {
    "full": translate_full,
    "compound": translate_compound_command,
    "command": translate_command,
}

EPILOG = """
Examples:
  cmdx translate --from windows --to linux "dir /w /s"
  cmdx translate --to windows "ls -la && clear"
  cmdx path --to linux "C:\\Users\\john"
  cmdx env --from windows --to linux "%USERPROFILE%\\docs"
  cmdx pkg --to pacman "sudo apt install -y vim"
  cmdx script deploy.bat --from windows --to linux
  cmdx list --from linux --to windows
  cmdx interactive
"""


def _os_arg(value: str) -> Os:
    try:
        return Os.parse(value)
    except TranslateError as e:
        raise argparse.ArgumentTypeError(str(e))


def _pm_arg(value: str) -> PackageManager:
    try:
        return PackageManager.parse(value)
    except TranslateError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per translator."""
    parser = argparse.ArgumentParser(
        prog="cmdx",
        description="cmdx - translate shell commands between operating systems",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument('--version', action='version', version=f'cmdx {__version__}')
    parser.add_argument('--config-dir', type=str,
                        help='Custom configuration directory (default: ~/.cmdx)')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    output = argparse.ArgumentParser(add_help=False)
    output.add_argument('--json', action='store_true', help='Print machine-readable JSON')
    output.add_argument('--no-color', action='store_true', help='Disable highlighting')

    os_pair = argparse.ArgumentParser(add_help=False)
    os_pair.add_argument('--from', dest='from_os', type=_os_arg,
                         help='Source OS (default: configured or detected)')
    os_pair.add_argument('--to', dest='to_os', type=_os_arg,
                         help='Target OS (default: configured or linux)')

    sub = parser.add_subparsers(dest='subcommand')

    p = sub.add_parser('translate', aliases=['t'], parents=[output, os_pair],
                       help='Translate a command line')
    p.add_argument('command', nargs='+', help="Command to translate ('-' reads lines from stdin)")
    p.add_argument('--mode', choices=sorted(TRANSLATORS), default='full',
                   help='full (paths and variables too), compound, or command')

    p = sub.add_parser('path', parents=[output, os_pair], help='Translate file paths')
    p.add_argument('paths', nargs='+')

    p = sub.add_parser('env', parents=[output, os_pair],
                       help='Translate environment variable references')
    p.add_argument('text')

    p = sub.add_parser('pkg', parents=[output], help='Translate a package manager command')
    p.add_argument('command', nargs='+')
    p.add_argument('--from', dest='from_pm', type=_pm_arg,
                   help='Source package manager (default: inferred from the command)')
    p.add_argument('--to', dest='to_pm', type=_pm_arg,
                   help='Target package manager or distribution (e.g. ubuntu)')

    p = sub.add_parser('script', parents=[output, os_pair], help='Translate a script file')
    p.add_argument('file')

    p = sub.add_parser('ext', parents=[output, os_pair], help='Translate a script file name')
    p.add_argument('filename')

    p = sub.add_parser('shebang', parents=[output, os_pair],
                       help='Translate a script interpreter line')
    p.add_argument('line')

    sub.add_parser('list', parents=[output, os_pair], help='List translatable commands')
    sub.add_parser('detect', parents=[output], help='Show the detected OS')
    sub.add_parser('os', parents=[output], help='List supported operating systems')
    sub.add_parser('interactive', aliases=['i'], parents=[os_pair],
                   help='Start an interactive translation session')
    return parser


class _Output:
    """Prints results as JSON or (optionally highlighted) text."""

    def __init__(self, args, config: Config):
        self.json = getattr(args, 'json', False) or config.get('json_output', False)
        self.color = (
            config.get('highlight', True)
            and not getattr(args, 'no_color', False)
            and sys.stdout.isatty()
        )
        self.show_warnings = config.get('show_warnings', True)

    def data(self, payload):
        print(json.dumps(payload, indent=2))

    def command(self, text: str):
        print(highlight(text) if self.color else text)

    def warnings(self, warnings):
        if self.show_warnings:
            for warning in warnings:
                print(f"Warning: {warning}", file=sys.stderr)


def _pair(args, config: Config):
    from_os = args.from_os or config.source_os()
    to_os = args.to_os or config.target_os()
    return from_os, to_os


def _run_translate(args, config: Config, out: _Output) -> int:
    from_os, to_os = _pair(args, config)
    translator = TRANSLATORS[args.mode]

    if args.command == ['-']:
        lines = [line.rstrip("\n") for line in sys.stdin if line.strip()]
        status = 0
        results = translate_batch(lines, from_os, to_os, translator)
        if out.json:
            out.data([
                r.to_dict() if not isinstance(r, TranslateError) else {"error": str(r)}
                for r in results
            ])
        for result in results:
            if isinstance(result, TranslateError):
                status = 1
                if not out.json:
                    print(f"Error: {result}", file=sys.stderr)
            elif not out.json:
                out.command(result.translated)
                out.warnings(result.warnings)
        return status

    result = translator(" ".join(args.command), from_os, to_os)
    if out.json:
        out.data(result.to_dict())
    else:
        out.command(result.translated)
        out.warnings(result.warnings)
    return 0


def _run_path(args, config: Config, out: _Output) -> int:
    to_os = args.to_os or config.target_os()
    if args.from_os:
        results = translate_paths(args.paths, args.from_os, to_os)
    else:
        results = []
        for path in args.paths:
            try:
                results.append(translate_path_auto(path, to_os))
            except TranslateError as e:
                results.append(e)

    status = 0
    rows = []
    for result in results:
        if isinstance(result, TranslateError):
            status = 1
            rows.append({"error": str(result)})
            if not out.json:
                print(f"Error: {result}", file=sys.stderr)
        else:
            rows.append(result.to_dict())
            if not out.json:
                print(result.path)
    if out.json:
        out.data(rows if len(rows) > 1 else rows[0])
    return status


def _run_pkg(args, config: Config, out: _Output) -> int:
    to_pm = args.to_pm or config.package_manager()
    if to_pm is None:
        print("Error: no target package manager (use --to)", file=sys.stderr)
        return 2
    command = " ".join(args.command)
    if args.from_pm:
        result = translate_package_command(command, args.from_pm, to_pm)
    else:
        result = translate_package_command_auto(command, to_pm)
    if out.json:
        out.data(result.to_dict())
    else:
        out.command(result.translated)
        out.warnings(result.warnings)
    return 0


def _run_script(args, config: Config, out: _Output) -> int:
    from_os, to_os = _pair(args, config)
    text = Path(args.file).read_text()
    result = translate_script(text, from_os, to_os)
    if out.json:
        out.data(result.to_dict())
    else:
        sys.stdout.write(result.translated)
        out.warnings(result.warnings)
    return 0


def _run_simple(args, config: Config, out: _Output) -> int:
    """Handle the string-in, string-out subcommands."""
    from_os, to_os = _pair(args, config)
    if args.subcommand == 'env':
        original, translated = args.text, translate_env_vars(args.text, from_os, to_os)
    elif args.subcommand == 'ext':
        original = args.filename
        translated = translate_script_extension(args.filename, from_os, to_os)
    else:
        original, translated = args.line, translate_shebang(args.line, from_os, to_os)

    if out.json:
        out.data({"original": original, "translated": translated,
                  "from": from_os.value, "to": to_os.value})
    else:
        print(translated)
    return 0


def _run_list(args, config: Config, out: _Output) -> int:
    from_os, to_os = _pair(args, config)
    commands = available_commands(from_os, to_os)
    if out.json:
        out.data({"from": from_os.value, "to": to_os.value, "commands": commands})
        return 0
    print(f"Commands translatable from {from_os} to {to_os}:")
    for name in commands:
        print(f"  {name}")
    return 0


def _run_detect(args, config: Config, out: _Output) -> int:
    detected = current_os()
    if out.json:
        out.data({"os": detected.value, "name": str(detected),
                  "unix_like": detected.is_unix_like, "bsd": detected.is_bsd})
    else:
        print(detected)
    return 0


def _run_os(args, config: Config, out: _Output) -> int:
    rows = [
        {"os": o.value, "name": str(o), "unix_like": o.is_unix_like, "bsd": o.is_bsd}
        for o in Os.all()
    ]
    if out.json:
        out.data({"os": rows,
                  "package_managers": [pm.value for pm in PackageManager.all()],
                  "operations": [op.value for op in PackageOperation]})
        return 0
    for row in rows:
        traits = [t for t, on in (("unix-like", row["unix_like"]), ("bsd", row["bsd"])) if on]
        print(f"  {row['os']:<10} {row['name']:<10} {', '.join(traits)}")
    return 0


HANDLERS = {
    'translate': _run_translate,
    't': _run_translate,
    'path': _run_path,
    'env': _run_simple,
    'ext': _run_simple,
    'shebang': _run_simple,
    'pkg': _run_pkg,
    'script': _run_script,
    'list': _run_list,
    'detect': _run_detect,
    'os': _run_os,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for cmdx."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug or os.getenv("CMDX_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if not args.subcommand:
        parser.print_help()
        return 0

    try:
        config = Config(config_dir=args.config_dir)

        if args.subcommand in ('interactive', 'i'):
            from_os, to_os = _pair(args, config)
            TranslatorShell(config, from_os, to_os).run()
            return 0

        return HANDLERS[args.subcommand](args, config, _Output(args, config))

    except TranslateError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\nInterrupted. Goodbye!")
        return 0


if __name__ == "__main__":
    sys.exit(main())
