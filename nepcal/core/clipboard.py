import platform
import shutil
import subprocess

from nepcal.core.base import ClipboardError, ClipboardUnavailableError

# First tool found on PATH wins
CLIPBOARD_COMMANDS: dict[str, list[list[str]]] = {
    'Darwin': [['pbcopy']],
    'Windows': [['clip']],
    'Linux': [
        ['wl-copy'],
        ['xclip', '-selection', 'clipboard'],
        ['xsel', '--clipboard', '--input'],
    ],
}


def find_clipboard_command(system: str | None = None) -> list[str] | None:
    system = system or platform.system()
    for command in CLIPBOARD_COMMANDS.get(system, CLIPBOARD_COMMANDS['Linux']):
        if shutil.which(command[0]):
            return command
    return None


def copy_to_clipboard(text: str) -> None:
    command = find_clipboard_command()
    if command is None:
        raise ClipboardUnavailableError('No clipboard tool found (install wl-copy, xclip or xsel)')

    try:
        result = subprocess.run(command, input=text, text=True, encoding='utf-8', capture_output=True, timeout=5)
    except (OSError, subprocess.TimeoutExpired) as e:
        raise ClipboardError(f'{command[0]} failed: {e}') from e
    if result.returncode != 0:
        raise ClipboardError(f'{command[0]} exited with {result.returncode}: {result.stderr.strip()}')
