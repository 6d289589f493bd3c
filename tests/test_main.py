"""Tests for the command-line entry point."""

import json

from conftest import SAMPLE_JUDGMENT
from main import main


def test_formula_command(capsys) -> None:
    exit_code = main(["formula", "--salary", "1000", "--award", "nafkah_iddah"])
    output = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert output['nafkah_iddah']['amount'] == 200
    assert output['mutaah'] is None


def test_formula_command_with_specs(capsys) -> None:
    assert main(["formula", "--salary", "4500", "--specs"]) == 0
    output = json.loads(capsys.readouterr().out)

    assert output['out_of_scope'] is True
    assert 'business_rules' in output['specs']


def test_formula_command_rejects_negative_salary(capsys) -> None:
    exit_code = main(["formula", "--salary=-5"])

    assert exit_code == 1
    assert "negative" in capsys.readouterr().err


def test_process_text_command(tmp_path, capsys) -> None:
    path = tmp_path / "judgment.txt"
    path.write_text(SAMPLE_JUDGMENT, encoding='utf-8')
    output_path = tmp_path / "out" / "result.json"

    exit_code = main(["process", "--input", str(path), "--text", "--output", str(output_path)])
    output = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert output['status'] == 'completed'
    assert output['record']['case_number'] == 'SYC1234/2023'
    assert json.loads(output_path.read_text(encoding='utf-8'))['document_id'] == output['document_id']


def test_process_missing_file_fails(tmp_path, capsys) -> None:
    exit_code = main(["process", "--input", str(tmp_path / "missing.pdf")])
    output = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert output['status'] == 'failed'


def test_process_non_utf8_text_fails(tmp_path, capsys) -> None:
    path = tmp_path / "judgment.txt"
    path.write_bytes(b"\xff\xfe\x00bad")

    exit_code = main(["process", "--input", str(path), "--text"])

    assert exit_code == 1
    assert "Corrupted or unreadable file" in capsys.readouterr().err
