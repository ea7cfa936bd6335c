import io

import pytest

from resp_parser.main import main


class TestMain:

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("RESP_MAX_DEPTH", "RESP_ENCODING", "RESP_STRICT_LENGTHS", "RESP_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

    def test_inline_data(self, capsys):
        assert main(["--data", r"*2\r\n:1\r\n$2\r\nhi\r\n"]) == 0
        assert capsys.readouterr().out == "[1, b'hi']\n"

    def test_file(self, tmp_path, capsys):
        path = tmp_path / "frame.resp"
        path.write_bytes(b"*1\r\n+OK\r\n")

        assert main([str(path)]) == 0
        assert capsys.readouterr().out == "['OK']\n"

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"$-1\r\n")))

        assert main([]) == 0
        assert capsys.readouterr().out == "None\n"

    def test_all_frames(self, capsys):
        assert main(["--all", "--data", r"+OK\r\n:5\r\n"]) == 0
        assert capsys.readouterr().out == "5\t'OK'\n4\t5\n"

    def test_reencode(self, capsysbinary):
        assert main(["--reencode", "--data", r":+7\r\n"]) == 0
        assert capsysbinary.readouterr().out == b":7\r\n"

    def test_decode_error(self, capsys):
        assert main(["--data", "data"]) == 1
        assert capsys.readouterr().err.endswith("error: [first-char] invalid first char\n")

    def test_max_depth_flag(self, capsys):
        assert main(["--max-depth", "1", "--data", r"*1\r\n*0\r\n"]) == 1
        assert "max depth exceeded" in capsys.readouterr().err

    def test_strict_lengths_flag(self, capsys):
        assert main(["--data", r"$3\r\nhi\r\n"]) == 0
        assert main(["--strict-lengths", "--data", r"$3\r\nhi\r\n"]) == 1
        assert "invalid length" in capsys.readouterr().err

    def test_bad_env(self, monkeypatch, capsys):
        monkeypatch.setenv("RESP_MAX_DEPTH", "deep")

        assert main(["--data", "+OK"]) == 1
        assert "RESP_MAX_DEPTH" in capsys.readouterr().err

    def test_unknown_encoding(self, monkeypatch, capsys):
        monkeypatch.setenv("RESP_ENCODING", "no-such-codec")

        assert main(["--data", r"+OK\r\n"]) == 1
        assert "no-such-codec" in capsys.readouterr().err

    def test_max_depth_over_limit(self, capsys):
        assert main(["--max-depth", "100000", "--data", r"*1\r\n:1\r\n"]) == 1
        assert "max_depth" in capsys.readouterr().err

    def test_log_level_flag(self, capsys):
        assert main(["--log-level", "debug", "--data", r":1\r\n"]) == 0
        assert capsys.readouterr().out == "1\n"

    def test_unknown_log_level_flag(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--log-level", "bogus", "--data", r":1\r\n"])

        assert exc_info.value.code == 2

    def test_unknown_log_level_env(self, monkeypatch, capsys):
        monkeypatch.setenv("RESP_LOG_LEVEL", "bogus")

        assert main(["--data", r":1\r\n"]) == 1
        assert "RESP_LOG_LEVEL" in capsys.readouterr().err
