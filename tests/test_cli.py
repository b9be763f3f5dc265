## tibasic — CLI integration tests

import os, sys
import subprocess
from pathlib import Path


def repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def run_cli(*cli_args: str | Path, stdin: str | None = None, env: dict | None = None) -> subprocess.CompletedProcess:
    args = [sys.executable, "-m", "tibasic", "--plain", *(str(arg) for arg in cli_args)]
    merged_env = os.environ.copy()
    merged_env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(repo_root() / "src"), merged_env.get("PYTHONPATH")]))
    if env:
        merged_env.update(env)
    return subprocess.run(args, input=stdin if stdin is not None else "", capture_output=True, text=True, env=merged_env)


def write_program(tmp_path: Path, name: str, source: str) -> Path:
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    return path


def test_cli_runs_file(tmp_path: Path):
    result = run_cli(write_program(tmp_path, "store.tib", "5→A:Disp A\n"))
    assert result.returncode == 0, result.stdout
    assert result.stdout == "5.0\n"


def test_cli_inline_command():
    result = run_cli("-c", "Disp 2+3")
    assert result.returncode == 0
    assert result.stdout.strip() == "5.0"


def test_cli_program_from_stdin():
    result = run_cli(stdin="For(I,1,3)\nDisp I\nEnd\n")
    assert result.returncode == 0
    assert result.stdout.split() == ["1.0", "2.0", "3.0"]


def test_cli_prompt_reads_stdin(tmp_path: Path):
    result = run_cli(write_program(tmp_path, "ask.tib", "Prompt A\nDisp A*2\n"), stdin="\n21\n")
    assert result.returncode == 0
    assert "A?" in result.stdout
    assert result.stdout.rstrip().endswith("42.0")


def test_cli_runtime_error_shows_context(tmp_path: Path):
    result = run_cli(write_program(tmp_path, "bad.tib", "Disp 1\n1→L1(5)\n"))
    assert result.returncode != 0
    out = result.stdout
    assert "RUNTIME ERROR." in out
    assert "ERR:INVALID DIM" in out
    assert 'bad.tib", line 2' in out
    assert "1→L1(5)" in out


def test_cli_undefined_label(tmp_path: Path):
    result = run_cli(write_program(tmp_path, "jump.tib", "If 1\nThen\nGoto X\nEnd\n"))
    assert result.returncode != 0
    assert "ERR:LABEL" in result.stdout
    assert "line 3" in result.stdout


def test_cli_syntax_error_shows_context(tmp_path: Path):
    result = run_cli(write_program(tmp_path, "syntax.tib", "Disp 1\nDisp )\n"))
    assert result.returncode != 0
    assert "SYNTAX ERROR." in result.stdout
    assert "    2 | Disp )" in result.stdout


def test_cli_missing_file_is_fatal_even_with_ignore(tmp_path: Path):
    ok = write_program(tmp_path, "ok.tib", "Disp 1\n")
    result = run_cli("--ignore", tmp_path / "missing.tib", ok)
    assert result.returncode == 1
    assert "FILE ERROR." in result.stdout
    assert "1.0" not in result.stdout


def test_cli_ignore_continues_after_runtime_error(tmp_path: Path):
    bad = write_program(tmp_path, "bad.tib", "L₁+1→A\n")
    good = write_program(tmp_path, "good.tib", "Disp 7\n")
    result = run_cli("-i", bad, good)
    assert "ERR:DATA TYPE" in result.stdout
    assert "7.0" in result.stdout
    assert result.returncode == 1


def test_cli_program_from_tib_path(tmp_path: Path):
    write_program(tmp_path, "HELLO.tib", 'Disp "HELLO"\n')
    result = run_cli("HELLO", env={"TIB_PATH": str(tmp_path)})
    assert result.returncode == 0
    assert result.stdout == "HELLO\n"


def test_cli_stats(tmp_path: Path):
    result = run_cli("--stats", write_program(tmp_path, "s.tib", "1→A\n2→B\n"))
    assert result.returncode == 0
    assert "STATISTICS." in result.stdout
    assert "step\t2" in result.stdout


def test_cli_bad_typed_input_points_at_prompt_line(tmp_path: Path):
    result = run_cli(write_program(tmp_path, "ask.tib", "Disp 1\nDisp 2\nPrompt A\n"), stdin="1+*\n")
    assert result.returncode == 1
    out = result.stdout
    assert "SYNTAX ERROR." in out and "ERR:SYNTAX" in out
    assert 'ask.tib", line 3' in out
    assert "    Prompt A" in out
    assert "    1 | 1+*" in out
    assert "| Disp 1" not in out


def test_repl_bad_typed_input_does_not_rerun_program():
    result = run_cli("--repl", stdin="Disp 1:Prompt A\n(1+\nDisp 2\n")
    assert result.returncode == 1
    out = result.stdout
    assert out.count("1.0") == 1
    assert "SYNTAX ERROR." in out
    assert "2.0" in out
    assert "..." not in out


def test_repl_continues_incomplete_program():
    result = run_cli("--repl", stdin="For(I,1,2)\nDisp I\nEnd\n")
    assert result.returncode == 0
    assert "... " in result.stdout
    assert result.stdout.count("1.0") == 1 and "2.0" in result.stdout
