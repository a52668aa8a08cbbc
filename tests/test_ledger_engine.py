import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from ledger_engine import main


class TestMain:
    def test_prints_report(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 1.0",
            "deposit, 2, 2, 2.0",
            "deposit, 1, 3, 2.0",
            "withdrawal, 1, 4, 1.5",
            "withdrawal, 2, 5, 3.0",
        ]))

        main(["ledger_engine.py", str(csv_file)])

        captured = capsys.readouterr()
        assert captured.out == (
            "client,available,held,total,locked\n"
            "1,1.5000,0.0000,1.5000,false\n"
            "2,2.0000,0.0000,2.0000,false\n"
        )
        assert "Processed: 5" in captured.err
        assert "Rejected: 1" in captured.err

    def test_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["ledger_engine.py"])

        assert exc_info.value.code == 1
        assert "Usage" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["ledger_engine.py", str(tmp_path / "nope.csv")])

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Failed to read" in captured.err
        assert captured.out == ""

    def test_missing_header_column(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text("type, client, amount\ndeposit, 1, 1.0\n")

        with pytest.raises(SystemExit) as exc_info:
            main(["ledger_engine.py", str(csv_file)])

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "missing columns: tx" in captured.err
        assert captured.out == ""

    def test_invalid_utf8_midway_still_reports_processed_balances(self, tmp_path, capsys):
        """Rows decoded before the bad bytes are applied and reported."""
        rows = ["type, client, tx, amount"]
        for tx_id in range(1, 2001):
            rows.append(f"deposit, 1, {tx_id}, 0.0025")
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_bytes(("\n".join(rows) + "\n").encode("utf-8") + b"deposit, 2, 9999, \xff\xfe\n")

        with pytest.raises(SystemExit) as exc_info:
            main(["ledger_engine.py", str(csv_file)])

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Failed to read" in captured.err
        assert "can't decode" in captured.err
        lines = captured.out.splitlines()
        assert lines[0] == "client,available,held,total,locked"
        assert len(lines) == 2
        assert lines[1].startswith("1,")
        assert lines[1].endswith(",false")

    def test_oversized_field_midway_still_reports_processed_balances(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 5.0",
            "deposit, 1, 2, 1" + "0" * 200000,
            "deposit, 1, 3, 7.0",
        ]))

        with pytest.raises(SystemExit) as exc_info:
            main(["ledger_engine.py", str(csv_file)])

        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "field larger than field limit" in captured.err
        assert captured.out == (
            "client,available,held,total,locked\n"
            "1,5.0000,0.0000,5.0000,false\n"
        )
