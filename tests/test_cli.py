import json
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def _run_cli(*args):
    return subprocess.run(
        [sys.executable, "-m", "rngcheck.cli", *args],
        cwd=ROOT,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )


def test_cli_analyze_outputs_valid_json(tmp_path):
    input_file = tmp_path / "input.bin"
    input_file.write_bytes(b"\xAA" * 32)
    output_file = tmp_path / "report.json"

    completed = _run_cli("analyze", str(input_file), "-o", str(output_file))
    assert completed.returncode == 0, completed.stderr.decode()
    assert output_file.exists(), f"stdout: {completed.stdout.decode()}; stderr: {completed.stderr.decode()}"

    data = json.loads(output_file.read_text(encoding="utf-8"))
    assert "results" in data and "scorecard" in data and "meta" in data
    assert data["scorecard"]["passed_tests"] == 2
    assert "monobit: PASS" in completed.stdout.decode()


def test_cli_analyze_yaml_config_and_block_size(tmp_path):
    input_file = tmp_path / "input.bin"
    input_file.write_bytes(b"\x00" * 32)
    config_file = tmp_path / "config.yaml"
    config_file.write_text("tests:\n  - name: block_frequency\n    params:\n      block_size: 64\n", encoding="utf-8")
    output_file = tmp_path / "report.json"

    completed = _run_cli("analyze", str(input_file), "-o", str(output_file), "-c", str(config_file), "--block-size", "16")
    assert completed.returncode == 0, completed.stderr.decode()

    data = json.loads(output_file.read_text(encoding="utf-8"))
    assert [r["test_name"] for r in data["results"]] == ["block_frequency"]
    assert data["results"][0]["metrics"]["block_size"] == 16
    assert data["results"][0]["passed"] is False


def test_cli_analyze_json_config(tmp_path):
    input_file = tmp_path / "input.bin"
    input_file.write_bytes(b"\xCC" * 32)
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"tests": ["monobit"]}), encoding="utf-8")
    output_file = tmp_path / "report.json"

    completed = _run_cli("analyze", str(input_file), "-o", str(output_file), "-c", str(config_file))
    assert completed.returncode == 0, completed.stderr.decode()
    data = json.loads(output_file.read_text(encoding="utf-8"))
    assert data["scorecard"]["total_tests"] == 1


def test_cli_osrng_seeded_buffer():
    completed = _run_cli("osrng", "--seed", "1", "--bytes", "100")
    assert completed.returncode == 0, completed.stderr.decode()
    out = completed.stdout.decode()
    assert "monobit:" in out
    assert "block_frequency:" in out


def test_cli_osrng_streamed_bits(tmp_path):
    output_file = tmp_path / "osrng.json"
    completed = _run_cli("osrng", "--seed", "3", "--bits", "512", "-o", str(output_file))
    assert completed.returncode == 0, completed.stderr.decode()
    data = json.loads(output_file.read_text(encoding="utf-8"))
    assert data["meta"]["source"] == "SeededRandom"
    for r in data["results"]:
        if r["status"] == "completed":
            assert r["bits_processed"] == 512


def test_cli_osrng_os_source():
    completed = _run_cli("osrng")
    assert completed.returncode == 0, completed.stderr.decode()
    assert "monobit:" in completed.stdout.decode()
