"""Tests for the command line entry point."""

from steam_vdf.main import main


MANIFEST = '"AppState"\n{\n\t"appid"\t\t"440"\n\t"name"\t\t"Team Fortress 2"\n}\n'


def test_format(tmp_path, capsys):
    path = tmp_path / "appmanifest_440.acf"
    path.write_text("// comment\n" + MANIFEST.replace("\t\"appid\"", '"appid"'), encoding="utf-8")

    assert main(["--format", str(path)]) == 0
    assert capsys.readouterr().out == MANIFEST


def test_format_malformed(tmp_path, capsys):
    path = tmp_path / "bad.acf"
    path.write_text('"AppState"\n{\n', encoding="utf-8")

    assert main(["--format", str(path)]) == 1
    assert "still open" in capsys.readouterr().err


def test_format_missing_file(tmp_path, capsys):
    assert main(["--format", str(tmp_path / "missing.acf")]) == 1
    assert "Error" in capsys.readouterr().err


def test_format_invalid_utf8(tmp_path, capsys):
    path = tmp_path / "latin1.acf"
    path.write_bytes(b'"AppState"\n{\n\t"name"\t\t"Caf\xe9"\n}\n')

    assert main(["--format", str(path)]) == 1
    assert "UTF-8" in capsys.readouterr().err


def test_get_invalid_utf8(tmp_path, capsys):
    path = tmp_path / "latin1.acf"
    path.write_bytes(b"\xff\xfe")

    assert main(["--get", str(path), "AppState/name"]) == 1


def test_get_string(tmp_path, capsys):
    path = tmp_path / "appmanifest_440.acf"
    path.write_text(MANIFEST, encoding="utf-8")

    assert main(["--get", str(path), "AppState/name"]) == 0
    assert capsys.readouterr().out == "Team Fortress 2\n"


def test_get_section(tmp_path, capsys):
    path = tmp_path / "appmanifest_440.acf"
    path.write_text(MANIFEST, encoding="utf-8")

    assert main(["--get", str(path), "AppState"]) == 0
    assert capsys.readouterr().out == '"appid"\t\t"440"\n"name"\t\t"Team Fortress 2"\n'


def test_get_missing_key(tmp_path, capsys):
    path = tmp_path / "appmanifest_440.acf"
    path.write_text(MANIFEST, encoding="utf-8")

    assert main(["--get", str(path), "AppState/buildid"]) == 1
    assert "not found" in capsys.readouterr().err


def test_steamid(capsys):
    assert main(["--steamid", "[U:1:22202]"]) == 0
    assert capsys.readouterr().out == "76561197960287930\n"


def test_steamid_invalid(capsys):
    assert main(["--steamid", "nope"]) == 1


def test_list(tmp_path, capsys):
    steamapps = tmp_path / "steamapps"
    steamapps.mkdir()
    (steamapps / "appmanifest_440.acf").write_text(MANIFEST, encoding="utf-8")

    assert main(["--list", "--steam-root", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "Found 1 installed games" in out
    assert "Team Fortress 2" in out


def test_list_empty_library(tmp_path, capsys):
    assert main(["--list", "--steam-root", str(tmp_path)]) == 0
    assert "No installed games found." in capsys.readouterr().out
