from dh_exchange.dh_mitm_demo import dh_mitm_simulation
from dh_exchange.keys import DomainParameters


def test_mitm_each_victim_shares_with_eve(capsys):
    secrets = dh_mitm_simulation(DomainParameters(p=10007, g=5))
    assert secrets["supplier"] == secrets["eve_with_supplier"]
    assert secrets["mill"] == secrets["eve_with_mill"]
    assert "MITM success" in capsys.readouterr().out
