import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import main as cli


class TestMain:
    def test_writes_report(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 10.0",
            "deposit, 2, 2, 5.0",
            "deposit, 1, 3, 3.0",
            "withdrawal, 1, 4, 8.0",
            "dispute, 2, 2,",
        ]))

        exit_code = cli.main([str(csv_file)])

        assert exit_code == 0
        assert capsys.readouterr().out.splitlines() == [
            "client,available,held,total,locked",
            "1,5.0,0,5.0,false",
            "2,0,5.0,5.0,false",
        ]

    def test_missing_argument(self, capsys):
        assert cli.main([]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "please provide a file name" in captured.err

    def test_too_many_arguments(self, capsys):
        assert cli.main(["a.csv", "b.csv"]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_wrong_extension(self, tmp_path, capsys):
        text_file = tmp_path / "transactions.txt"
        text_file.write_text("type,client,tx,amount\n")

        assert cli.main([str(text_file)]) == 1
        assert "must end with '.csv'" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert cli.main([str(tmp_path / "nope.csv")]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith("error: ")

    def test_log_level_from_environment(self, monkeypatch):
        calls = []
        monkeypatch.setattr(cli.logging, "basicConfig", lambda **kwargs: calls.append(kwargs))

        monkeypatch.setenv(cli.LOG_LEVEL_ENV, "debug")
        cli.configure_logging()
        monkeypatch.setenv(cli.LOG_LEVEL_ENV, "chatty")
        cli.configure_logging()
        monkeypatch.delenv(cli.LOG_LEVEL_ENV)
        cli.configure_logging()

        assert [call["level"] for call in calls] == [cli.logging.DEBUG, cli.logging.WARNING, cli.logging.WARNING]
