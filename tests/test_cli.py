from dh_exchange.cli import main


def test_dh_default(capsys):
    assert main(["dh"]) == 0
    assert "Shared Secret: 12" in capsys.readouterr().out


def test_dh_custom_values(capsys):
    assert main(["dh", "--p", "23", "--g", "5", "--a", "4", "--b", "9"]) == 0
    assert f"Shared Secret: {pow(5, 36, 23)}" in capsys.readouterr().out


def test_dh_invalid_generator(capsys):
    assert main(["dh", "--g", "4"]) == 1
    assert "Error: 4 is not a primitive root modulo 13" in capsys.readouterr().err


def test_dh_invalid_text(capsys):
    assert main(["dh", "--a", "abc"]) == 1
    assert "Invalid input" in capsys.readouterr().err
    assert main(["dh", "--p", "12"]) == 1
    assert "Invalid input" in capsys.readouterr().err


def test_rotate(capsys):
    assert main(["rotate"]) == 0
    assert "p = " in capsys.readouterr().out


def test_x3dh_without_opk(capsys):
    assert main(["x3dh", "--no-opk"]) == 0
    assert "DH4 omitted" in capsys.readouterr().out


def test_mitm(capsys):
    assert main(["mitm", "--p", "23"]) == 0
    assert "MITM success" in capsys.readouterr().out


def test_dh_fallback_generator_is_flagged(capsys):
    assert main(["dh", "--p", "2"]) == 0
    out = capsys.readouterr().out
    assert "UNVERIFIED fallback" in out
    assert "The key exchange is successful" not in out


def test_x3dh_custom_parameters_and_keys(capsys):
    assert main(["x3dh", "--p", "23", "--g", "5", "--ik-a", "3", "--opk-b", "7"]) == 0
    out = capsys.readouterr().out
    assert "p = 23, g = 5" in out
    assert f"OPK_B: {pow(5, 7, 23)}" in out


def test_x3dh_invalid_generator(capsys):
    assert main(["x3dh", "--g", "4"]) == 1
    assert "Error: 4 is not a primitive root modulo 10007" in capsys.readouterr().err


def test_x3dh_invalid_key_text(capsys):
    assert main(["x3dh", "--ik-a", "abc"]) == 1
    assert "Invalid input" in capsys.readouterr().err
    assert main(["x3dh", "--spk-b", "-5"]) == 1
    assert "Invalid input" in capsys.readouterr().err
    assert main(["x3dh", "--p", "10008"]) == 1
    assert "Invalid input" in capsys.readouterr().err


def test_x3dh_rotate_and_generate(capsys):
    assert main(["x3dh", "--rotate", "--generate", "ek-a", "--generate", "spk-b"]) == 0
    assert "signature verified" in capsys.readouterr().out
