import subprocess
from unittest.mock import patch

import pytest

from crosswire.compiler.exceptions import FormatterError
from crosswire.compiler.formatting import format_code


def test_missing_prettier():
    with patch("crosswire.compiler.formatting.shutil.which", return_value=None):
        with pytest.raises(FormatterError, match="not found"):
            format_code("<template></template>", parser="lwc")


def test_successful_format():
    completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="formatted\n", stderr="")
    with patch("crosswire.compiler.formatting.subprocess.run", return_value=completed) as run:
        assert format_code("raw", parser="lwc", executable="/bin/prettier") == "formatted\n"

    args, kwargs = run.call_args
    assert args[0] == ["/bin/prettier", "--parser", "lwc"]
    assert kwargs["input"] == "raw"


def test_formatter_rejects_input():
    completed = subprocess.CompletedProcess(
        args=[], returncode=2, stdout="", stderr="SyntaxError: Unexpected token"
    )
    with patch("crosswire.compiler.formatting.subprocess.run", return_value=completed):
        with pytest.raises(FormatterError, match="Unexpected token"):
            format_code("<template", parser="lwc", executable="/bin/prettier")


def test_formatter_timeout():
    with patch(
        "crosswire.compiler.formatting.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="prettier", timeout=30),
    ):
        with pytest.raises(FormatterError):
            format_code("x", parser="lwc", executable="/bin/prettier")
