import re

import pytest

from keyfob import otp_cli


def test_accounts(accounts_file, capsys):
    assert otp_cli.main(["--accounts", accounts_file, "accounts"]) == 0
    assert capsys.readouterr().out.splitlines() == ["0: Google", "1: GitHub", "2: Work"]


def test_hotp(accounts_file, capsys):
    assert otp_cli.main(["--accounts", accounts_file, "hotp", "--counter", "1"]) == 0
    assert capsys.readouterr().out.strip() == "Google HOTP(counter=1): 287082"


def test_hotp_largest_counter(accounts_file, capsys):
    argv = ["--accounts", accounts_file, "hotp", "--counter", "18446744073709551615"]
    assert otp_cli.main(argv) == 0
    assert re.match(r"Google HOTP\(counter=18446744073709551615\): \d{6}", capsys.readouterr().out)


@pytest.mark.parametrize("counter", ["-1", "18446744073709551616"])
def test_hotp_counter_out_of_range(accounts_file, capsys, counter):
    with pytest.raises(SystemExit) as exc:
        otp_cli.main(["--accounts", accounts_file, "hotp", "--counter", counter])
    assert exc.value.code == 2
    assert "counter must be in" in capsys.readouterr().err


@pytest.mark.parametrize("period", ["0", "-30"])
def test_period_must_be_positive(accounts_file, capsys, period):
    with pytest.raises(SystemExit) as exc:
        otp_cli.main(["--accounts", accounts_file, "--period", period, "code"])
    assert exc.value.code == 2
    assert "must be a positive integer" in capsys.readouterr().err


def test_code(accounts_file, capsys):
    assert otp_cli.main(["--accounts", accounts_file, "code", "-a", "work"]) == 0
    assert re.match(r"Work: \d{6}  \(valid ~[ \d]\ds\)", capsys.readouterr().out)


def test_uri(accounts_file, capsys):
    assert otp_cli.main(["--accounts", accounts_file, "uri", "-a", "1", "--issuer", "fob"]) == 0
    out = capsys.readouterr().out.strip()
    assert out.startswith("otpauth://totp/fob%3AGitHub?secret=JBSWY3DPEHPK3PXP")


def test_unknown_account(accounts_file, capsys):
    assert otp_cli.main(["--accounts", accounts_file, "code", "-a", "Bank"]) == 2
    assert "No account named 'Bank'" in capsys.readouterr().out


def test_missing_accounts_file(tmp_path, capsys):
    assert otp_cli.main(["--accounts", str(tmp_path / "x.json"), "accounts"]) == 2
    assert capsys.readouterr().out.startswith("[!] Accounts file not found")


def test_run_console(accounts_file, capsys):
    argv = ["--accounts", accounts_file, "run", "-a", "GitHub",
            "--tick-ms", "0", "--sync-timeout", "0", "--max-ticks", "3"]
    assert otp_cli.main(argv) == 0
    out = capsys.readouterr().out
    assert "GitHub: " in out
    assert out.rstrip().endswith("Bye.")


def test_no_command(capsys):
    assert otp_cli.main([]) == 0
    assert "No command specified" in capsys.readouterr().out
