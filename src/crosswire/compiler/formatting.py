"""Pretty-printing through the external ``prettier`` executable."""

import logging
import shutil
import subprocess
from typing import Optional

from crosswire.compiler.exceptions import FormatterError

log = logging.getLogger(__name__)

FORMAT_TIMEOUT = 30


def format_code(code: str, parser: str = "lwc", executable: Optional[str] = None) -> str:
    """Format ``code`` with prettier's ``parser`` dialect.

    Raises FormatterError when prettier is missing or rejects the input.
    """
    prettier = executable or shutil.which("prettier")
    if not prettier:
        raise FormatterError("prettier not found on PATH")

    args = [prettier, "--parser", parser]
    log.debug(f"Running command: {args}")
    try:
        result = subprocess.run(
            args,
            input=code,
            capture_output=True,
            text=True,
            timeout=FORMAT_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise FormatterError(f"prettier failed to run: {e}") from e

    if result.returncode != 0:
        raise FormatterError(result.stderr.strip() or f"prettier exited with {result.returncode}")
    return result.stdout
