#!/usr/bin/env python3
# cli.py -- submit seals and battleship moves to the NEAR contract
# Usage: zkship turn my_fun_game 5 5
import argparse
import json
import logging
import sys

from .config import DEFAULT_SEAL_PATH, Settings
from .errors import SdkError
from .models import Position, default_state, load_state, random_state
from .runner import CallReport, Runner


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog='zkship',
        description='Submit seals and battleship receipts to a NEAR contract',
    )
    p.add_argument('--network', dest='network_id', help='network id (default: testnet)')
    p.add_argument('--node-url', help='RPC endpoint override')
    p.add_argument('--account', dest='account_id', help='signing account id')
    p.add_argument('--contract', dest='contract_id', help='contract id (default: the account)')
    p.add_argument('--prover-url', help='proving service base URL')
    p.add_argument('--credentials-dir', help='key store directory (default: ~/.near-credentials)')
    p.add_argument('--gas', type=int, help='gas ceiling for the call')
    p.add_argument('--prover-timeout', type=float,
                   help='seconds to wait for a receipt (default: no limit)')
    p.add_argument('--no-balance', action='store_true', help='skip the account balance lookup')
    p.add_argument('--show-outcome', action='store_true', help='print the raw call outcome')
    p.add_argument('-v', '--verbose', action='store_true')

    sub = p.add_subparsers(dest='command', required=True)

    seal = sub.add_parser('verify-seal', help='call verify with a seal file')
    seal.add_argument('seal', nargs='?', default=DEFAULT_SEAL_PATH)

    def board_args(cmd):
        cmd.add_argument('name', help='game name')
        group = cmd.add_mutually_exclusive_group()
        group.add_argument('--board', help='board JSON file')
        group.add_argument('--random-board', action='store_true')
        cmd.add_argument('--salt', type=lambda v: int(v, 0), help='board salt (default: 0xDEADBEEF)')

    new = sub.add_parser('new-game', help='commit a board and open a game')
    board_args(new)

    join = sub.add_parser('join-game', help='commit a board, join and shoot first')
    board_args(join)
    join.add_argument('x', type=int)
    join.add_argument('y', type=int)

    turn = sub.add_parser('turn', help='prove the last incoming shot and shoot back')
    board_args(turn)
    turn.add_argument('x', type=int)
    turn.add_argument('y', type=int)
    turn.add_argument('--incoming', nargs=2, type=int, metavar=('X', 'Y'),
                      help='opponent shot to prove (default: same as the shot)')

    state = sub.add_parser('state', help='show the contract view of a game')
    state.add_argument('name', help='game name')
    return p


def load_board(args):
    if args.board:
        state = load_state(args.board)
        if args.salt is not None:
            state.salt = args.salt
        return state
    kwargs = {} if args.salt is None else {'salt': args.salt}
    if args.random_board:
        return random_state(**kwargs)
    return default_state(**kwargs)


def print_report(report: CallReport, show_outcome: bool):
    if show_outcome:
        print(json.dumps(report.outcome, indent=2))
    if report.round_result is not None:
        print(f"Incoming shot: {report.round_result.describe_hit()}")
    print(f"Total GAS: {report.summary.total_gas_burnt}")
    print(f"Total Tokens: {report.summary.formatted_tokens_burnt}")


def run(args) -> int:
    settings = Settings.from_env(
        network_id=args.network_id,
        node_url=args.node_url,
        account_id=args.account_id,
        contract_id=args.contract_id,
        prover_url=args.prover_url,
        credentials_dir=args.credentials_dir,
        gas=args.gas,
        prover_timeout=args.prover_timeout,
    )
    runner = Runner(settings, with_balance=not args.no_balance, progress=print)

    if args.command == 'state':
        print(json.dumps(runner.game_state(args.name), indent=2))
        return 0

    print(f"{args.command} on {settings.contract_id} as {settings.account_id}")
    if args.command == 'verify-seal':
        report = runner.submit_seal(args.seal)
    elif args.command == 'new-game':
        report = runner.new_game(args.name, load_board(args))
    elif args.command == 'join-game':
        report = runner.join_game(args.name, load_board(args), Position(x=args.x, y=args.y))
    else:
        incoming = Position(x=args.incoming[0], y=args.incoming[1]) if args.incoming else None
        report = runner.turn(args.name, load_board(args), Position(x=args.x, y=args.y), incoming)

    print_report(report, args.show_outcome)
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    try:
        return run(args)
    except SdkError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code


if __name__ == '__main__':
    sys.exit(main())
