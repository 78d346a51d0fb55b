import pytest

from dspvm.cli import main


def test_example_program_listing_and_outputs(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "Program with 7 instructions:" in out
    assert "Literal Pool:" in out
    assert "output 1: 5" in out


def test_program_from_file(tmp_path, capsys):
    path = tmp_path / "prog.asm"
    path.write_text("MOV R0, #7\nEND\n")
    assert main([str(path), "--outputs", "1"]) == 0
    out = capsys.readouterr().out
    assert "output 0: 7" in out
    assert "output 1:" not in out


def test_missing_end_reports_error(tmp_path, capsys):
    path = tmp_path / "prog.asm"
    path.write_text("MOV R0, #7\n")
    assert main([str(path)]) == 1
    assert "error:" in capsys.readouterr().out


def test_missing_file_is_a_usage_error(tmp_path):
    with pytest.raises(SystemExit) as info:
        main([str(tmp_path / "absent.asm")])
    assert info.value.code == 2


def test_zero_vectors_rejected():
    with pytest.raises(SystemExit) as info:
        main(["--vectors", "0"])
    assert info.value.code == 2


def test_several_vectors_give_same_result(capsys):
    assert main(["--vectors", "3"]) == 0
    many = capsys.readouterr().out
    assert main([]) == 0
    once = capsys.readouterr().out
    assert many == once