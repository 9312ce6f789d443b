import pytest
import requests

from conftest import ACCOUNT_ID, FakeResponse
from zkship import cli
from zkship.runner import Runner


@pytest.fixture
def patched_runner(monkeypatch, prover, provider):
    def factory(settings, with_balance=False, progress=None):
        return Runner(settings, prover=prover, provider=provider,
                      with_balance=with_balance, progress=progress)

    monkeypatch.setattr(cli, 'Runner', factory)


def base_args(credentials_dir):
    return ['--credentials-dir', str(credentials_dir), '--account', ACCOUNT_ID]


def test_verify_seal_prints_totals(patched_runner, credentials_dir, tmp_path, capsys):
    seal = tmp_path / 'seal.bin'
    seal.write_bytes(b'\x00\xff')

    code = cli.main(base_args(credentials_dir) + ['verify-seal', str(seal)])

    out = capsys.readouterr().out
    assert code == 0
    assert 'Total GAS: 2428136082146' in out
    assert 'Connected to https://rpc.testnet.near.org (chain testnet)' in out
    assert 'Balance: 4.99 NEAR available of 5 NEAR' in out
    assert 'Total Tokens: 0.0002428136082146' in out


def test_turn_prints_hit(patched_runner, prover_session, credentials_dir, capsys):
    prover_session.routes['/prove/turn'] = FakeResponse(body={
        'receipt': 'abc123',
        'state': {'state': {'ships': [], 'salt': 1}, 'hit': 'Miss'},
    })
    code = cli.main(base_args(credentials_dir) + ['turn', 'my_fun_game', '5', '5'])

    assert code == 0
    assert 'Incoming shot: Miss' in capsys.readouterr().out


def test_prover_down_exit_code(patched_runner, prover_session, rpc_session, credentials_dir, capsys):
    prover_session.routes['/prove/init'] = requests.exceptions.ConnectionError('refused')

    code = cli.main(base_args(credentials_dir) + ['new-game', 'g'])

    assert code == 3
    assert 'unreachable' in capsys.readouterr().err
    assert rpc_session.calls == []


def test_missing_credentials_exit_code(patched_runner, tmp_path, capsys):
    seal = tmp_path / 'seal.bin'
    seal.write_bytes(b'\x00')
    code = cli.main(['--credentials-dir', str(tmp_path), 'verify-seal', str(seal)])
    assert code == 2
    assert 'Error:' in capsys.readouterr().err


def test_bad_board_file_exit_code(patched_runner, credentials_dir, tmp_path):
    board = tmp_path / 'board.json'
    board.write_text('[]')
    code = cli.main(base_args(credentials_dir) + ['new-game', 'g', '--board', str(board)])
    assert code == 6


def test_subcommand_required():
    with pytest.raises(SystemExit):
        cli.main([])


def test_no_balance_skips_lookup(patched_runner, rpc_session, credentials_dir, tmp_path, capsys):
    seal = tmp_path / 'seal.bin'
    seal.write_bytes(b'\x00')

    code = cli.main(base_args(credentials_dir) + ['--no-balance', 'verify-seal', str(seal)])

    out = capsys.readouterr().out
    assert code == 0
    assert 'Connected to' in out
    assert 'Balance:' not in out
    assert 'query:view_account' not in rpc_session.keys()


def test_prover_timeout_flag(monkeypatch, credentials_dir):
    seen = {}

    class Recorder:
        def __init__(self, settings, **kwargs):
            seen['timeout'] = settings.prover_timeout
            raise cli.SdkError('stop')

    monkeypatch.setattr(cli, 'Runner', Recorder)
    code = cli.main(base_args(credentials_dir) + ['--prover-timeout', '900', 'state', 'g'])

    assert code == 1
    assert seen['timeout'] == 900.0
