from test_loaders import write_data
from timetable.cli import EXIT_EXPORT_FAILURE, EXIT_LOAD_FAILURE, main


def test_cli_prints_and_exports(tmp_path, capsys):
    data_dir = write_data(tmp_path)
    output = tmp_path / "timetable.csv"

    code = main(["--data-dir", str(data_dir), "--output", str(output), "--seed", "3"])

    assert code == 0
    out = capsys.readouterr().out
    assert "SMART TIMETABLE" in out
    assert ">>> Batch: CS Y2A" in out
    assert "required hours" in out
    assert output.read_text(encoding="utf-8").splitlines()[0] == "Day,Time,Batch,Subject,Faculty,Room"


def test_cli_reports_diagnostics(tmp_path, capsys):
    data_dir = write_data(
        tmp_path,
        faculty_csv="id,name,subjects\nF1,Dr. Rao,CS201\n",
    )

    code = main(["--data-dir", str(data_dir), "--output", str(tmp_path / "out.csv"),
                 "--seed", "1", "--max-attempts", "50", "-q"])

    assert code == 0
    out = capsys.readouterr().out
    assert "SMART TIMETABLE" not in out
    assert "no qualified faculty" in out
    assert "CS Y2A: CS202 (Operating Systems)" in out


def test_cli_same_seed_same_output(tmp_path):
    data_dir = write_data(tmp_path)
    a, b = tmp_path / "a.csv", tmp_path / "b.csv"

    main(["--data-dir", str(data_dir), "--output", str(a), "--seed", "8", "-q"])
    main(["--data-dir", str(data_dir), "--output", str(b), "--seed", "8", "-q"])

    assert a.read_bytes() == b.read_bytes()


def test_cli_json_export(tmp_path):
    data_dir = write_data(tmp_path)

    code = main(["--data-dir", str(data_dir), "--output", str(tmp_path / "t.csv"),
                 "--json", str(tmp_path / "t.json"), "-q"])

    assert code == 0
    assert (tmp_path / "t.json").exists()


def test_cli_load_failure(tmp_path):
    assert main(["--data-dir", str(tmp_path), "--output", str(tmp_path / "t.csv")]) == EXIT_LOAD_FAILURE


def test_cli_export_failure(tmp_path):
    data_dir = write_data(tmp_path)

    code = main(["--data-dir", str(data_dir), "--output", str(tmp_path), "-q"])

    assert code == EXIT_EXPORT_FAILURE
