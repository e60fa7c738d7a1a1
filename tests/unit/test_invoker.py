"""
Unit tests for core/conversion/invoker.py — converter launch and run_command.

Uses small shell scripts as converters.
"""
import io
from pathlib import Path

import pytest

from core.conversion import (
    ConverterExitError,
    ConverterInvoker,
    ConverterLaunchError,
    ConverterTimeoutError,
    run_command,
)


# ---------------------------------------------------------------------------
# ConverterInvoker
# ---------------------------------------------------------------------------

class TestBuildArgs:
    def test_argument_vector(self):
        invoker = ConverterInvoker("pandoc")
        args = invoker.build_args(Path("/tmp/in.html"), Path("/tmp/out.rtf"))
        assert args == ["pandoc", "-s", "/tmp/in.html", "-o", "/tmp/out.rtf"]


class TestConvert:
    @pytest.mark.asyncio
    async def test_success_writes_target(self, tmp_path, make_converter):
        tool = make_converter('cp "$2" "$4"')
        source = tmp_path / "in.html"
        source.write_text("<p>hi</p>")
        target = tmp_path / "out.rtf"

        await ConverterInvoker(tool).convert(source, target)

        assert target.read_text() == "<p>hi</p>"

    @pytest.mark.asyncio
    async def test_receives_flags_in_order(self, tmp_path, make_converter):
        tool = make_converter('echo "$1 $3" > "$4"')
        target = tmp_path / "out.rtf"
        await ConverterInvoker(tool).convert(tmp_path / "in.html", target)
        assert target.read_text().strip() == "-s -o"

    @pytest.mark.asyncio
    async def test_non_zero_exit(self, tmp_path, make_converter):
        tool = make_converter("exit 3")
        with pytest.raises(ConverterExitError) as exc_info:
            await ConverterInvoker(tool).convert(tmp_path / "in.html", tmp_path / "out.rtf")
        assert exc_info.value.returncode == 3
        assert not isinstance(exc_info.value, ConverterTimeoutError)

    @pytest.mark.asyncio
    async def test_missing_tool(self, tmp_path):
        with pytest.raises(ConverterLaunchError):
            await ConverterInvoker(str(tmp_path / "no-such-tool")).convert(
                tmp_path / "in.html", tmp_path / "out.rtf"
            )

    @pytest.mark.asyncio
    async def test_not_executable(self, tmp_path):
        tool = tmp_path / "plain.txt"
        tool.write_text("not a program")
        with pytest.raises(ConverterLaunchError):
            await ConverterInvoker(str(tool)).convert(tmp_path / "in.html", tmp_path / "out.rtf")

    @pytest.mark.asyncio
    async def test_timeout_kills_process(self, tmp_path, make_converter):
        tool = make_converter("exec sleep 10")
        with pytest.raises(ConverterTimeoutError) as exc_info:
            await ConverterInvoker(tool, timeout_seconds=0.3).convert(
                tmp_path / "in.html", tmp_path / "out.rtf"
            )
        assert exc_info.value.timeout_seconds == 0.3
        assert exc_info.value.returncode is not None


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------

class TestRunCommand:
    @pytest.mark.asyncio
    async def test_forwards_output(self, tmp_path, make_converter):
        script = make_converter('echo "to stdout"\necho "to stderr" >&2', name="talk.sh")
        out, err = io.StringIO(), io.StringIO()

        returncode = await run_command(tmp_path, script, stdout=out, stderr=err)

        assert returncode == 0
        assert out.getvalue() == "to stdout\n"
        assert err.getvalue() == "to stderr\n"

    @pytest.mark.asyncio
    async def test_splits_arguments_on_whitespace(self, tmp_path, make_converter):
        script = make_converter('echo "$#:$1:$2"', name="args.sh")
        out = io.StringIO()
        await run_command(tmp_path, f"{script}   alpha  beta", stdout=out, stderr=io.StringIO())
        assert out.getvalue() == "2:alpha:beta\n"

    @pytest.mark.asyncio
    async def test_runs_in_directory(self, tmp_path, make_converter):
        workdir = tmp_path / "work"
        workdir.mkdir()
        script = make_converter("pwd", name="where.sh")
        out = io.StringIO()
        await run_command(workdir, script, stdout=out, stderr=io.StringIO())
        assert Path(out.getvalue().strip()).resolve() == workdir.resolve()

    @pytest.mark.asyncio
    async def test_trailing_output_not_lost(self, tmp_path, make_converter):
        script = make_converter("i=0\nwhile [ $i -lt 2000 ]; do echo line$i; i=$((i+1)); done", name="many.sh")
        out = io.StringIO()
        await run_command(tmp_path, script, stdout=out, stderr=io.StringIO())
        lines = out.getvalue().splitlines()
        assert len(lines) == 2000
        assert lines[-1] == "line1999"

    @pytest.mark.asyncio
    async def test_invalid_utf8_replaced(self, tmp_path, make_converter):
        script = make_converter(r"printf 'ok\377\n'", name="bytes.sh")
        out = io.StringIO()
        await run_command(tmp_path, script, stdout=out, stderr=io.StringIO())
        assert out.getvalue() == "ok�\n"

    @pytest.mark.asyncio
    async def test_non_zero_exit(self, tmp_path, make_converter):
        script = make_converter('echo "bad input" >&2\nexit 2', name="fail.sh")
        err = io.StringIO()
        with pytest.raises(ConverterExitError) as exc_info:
            await run_command(tmp_path, script, stdout=io.StringIO(), stderr=err)
        assert exc_info.value.returncode == 2
        assert err.getvalue() == "bad input\n"

    @pytest.mark.asyncio
    async def test_missing_program(self, tmp_path):
        with pytest.raises(ConverterLaunchError):
            await run_command(tmp_path, str(tmp_path / "nope") + " --version")

    @pytest.mark.asyncio
    async def test_empty_command(self, tmp_path):
        with pytest.raises(ValueError, match="empty"):
            await run_command(tmp_path, "   ")

    @pytest.mark.asyncio
    async def test_timeout(self, tmp_path, make_converter):
        script = make_converter("exec sleep 10", name="slow.sh")
        with pytest.raises(ConverterTimeoutError):
            await run_command(
                tmp_path, script,
                stdout=io.StringIO(), stderr=io.StringIO(),
                timeout_seconds=0.3,
            )
