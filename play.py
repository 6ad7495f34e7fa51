
from __future__ import annotations
import argparse
import logging
from typing import Callable, Optional, Tuple

from minefield.engine import Board, MinefieldError, Status
from minefield.render import render_grid

MINES_PROMPT = 'How many mines do you want on the field?'
MOVE_PROMPT = 'Set/unset mines marks or claim a cell as free:'

STATUS_MESSAGES = {
    Status.WIN: 'Congratulations! You found all the mines!',
    Status.LOSE: 'You stepped on a mine and failed!',
    Status.UNFINISHED: 'Unfinished',
}

Reader = Callable[[], str]
Writer = Callable[[str], None]


def parse_move(line: str) -> Tuple[int, int, str]:
    tokens = line.split()
    if len(tokens) != 3:
        raise ValueError('Enter a move as: row column action (e.g. 3 4 reveal)')
    row, column, action = tokens
    try:
        return int(row), int(column), action
    except ValueError:
        raise ValueError('Row and column must be whole numbers') from None


def prompt_board(height: int, width: int, seed: Optional[int],
                 read: Optional[Reader] = None, write: Optional[Writer] = None) -> Optional[Board]:
    read = read or input
    write = write or print
    while True:
        write(MINES_PROMPT)
        try:
            line = read()
        except EOFError:
            return None
        try:
            return Board(height, width, int(line.strip()), seed=seed)
        except MinefieldError as exc:
            write(str(exc))
        except ValueError:
            write('Please enter a whole number')


def play_game(board: Board, read: Optional[Reader] = None, write: Optional[Writer] = None) -> Status:
    read = read or input
    write = write or print
    write(render_grid(board.snapshot()))
    while board.status() is Status.UNFINISHED:
        write(MOVE_PROMPT)
        try:
            line = read()
        except EOFError:
            write('[play] Input closed, leaving the game')
            break
        try:
            row, column, action = parse_move(line)
        except ValueError as exc:
            write(str(exc))
            continue
        try:
            board.submit_move(row, column, action)
        except MinefieldError as exc:
            write(str(exc))
            continue
        write(render_grid(board.snapshot()))
    status = board.status()
    write(STATUS_MESSAGES[status])
    return status


def main(argv=None):
    parser = argparse.ArgumentParser(description='Terminal minefield game')
    parser.add_argument('--height', type=int, default=9)
    parser.add_argument('--width', type=int, default=9)
    parser.add_argument('--mines', type=int, default=None, help='Mine count; asked interactively when omitted')
    parser.add_argument('--seed', type=int, default=-1, help='RNG seed; <0 uses OS entropy (random every game)')
    parser.add_argument('--verbose', action='store_true', help='Log mine placement and game transitions')
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='[%(name)s] %(message)s')
    seed = None if args.seed < 0 else args.seed

    if args.mines is not None:
        try:
            board = Board(args.height, args.width, args.mines, seed=seed)
        except MinefieldError as exc:
            parser.error(str(exc))
    else:
        try:
            Board(args.height, args.width, 0)
        except MinefieldError as exc:
            parser.error(str(exc))
        board = prompt_board(args.height, args.width, seed)
        if board is None:
            print('[play] No game started')
            return
    if seed is not None:
        print(f'[play] Using seed {seed}')

    play_game(board)


if __name__ == '__main__':
    main()
