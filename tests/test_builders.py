"""Tests for the go and position builders."""

import dataclasses

import chess
import pytest

from uzi.err import ErrKind, UziErr
from uzi.gui import Fen, Go, GoBuilder, Pos, PosBuilder, StartPos

E2E4 = chess.Move.from_uci("e2e4")
E7E5 = chess.Move.from_uci("e7e5")
G1F3 = chess.Move.from_uci("g1f3")


class TestGoBuilder:
    def test_nothing_set(self) -> None:
        with pytest.raises(UziErr) as exc:
            GoBuilder().build()
        assert exc.value.kind is ErrKind.NOTHING_SET_FOR_GO

    def test_fluent(self) -> None:
        go = GoBuilder().depth(5).infinite().build()
        assert go == Go(depth=5, infinite=True)

    def test_every_setter(self) -> None:
        go = (
            GoBuilder()
            .search_moves([E2E4])
            .ponder()
            .wtime(1)
            .btime(2)
            .winc(3)
            .binc(4)
            .moves_to_go(5)
            .depth(6)
            .nodes(7)
            .mate(8)
            .move_time(9)
            .infinite()
            .build()
        )
        assert go == Go((E2E4,), True, 1, 2, 3, 4, 5, 6, 7, 8, 9, True)

    def test_setters_do_not_validate(self) -> None:
        # Out-of-range values are the engine's business, not the builder's.
        assert GoBuilder().wtime(-5).build().wtime == -5

    def test_last_value_wins(self) -> None:
        assert GoBuilder().depth(3).depth(9).build() == Go(depth=9)

    def test_second_build_fails(self) -> None:
        builder = GoBuilder().move_time(100)
        assert builder.build() == Go(move_time=100)
        with pytest.raises(UziErr) as exc:
            builder.build()
        assert exc.value.kind is ErrKind.NOTHING_SET_FOR_GO

    def test_search_moves_are_copied(self) -> None:
        moves = [E2E4]
        builder = GoBuilder().search_moves(moves)
        moves.append(E7E5)
        assert builder.build().search_moves == (E2E4,)

    def test_go_is_immutable(self) -> None:
        go = GoBuilder().depth(1).build()
        with pytest.raises(dataclasses.FrozenInstanceError):
            go.depth = 2  # type: ignore[misc]


class TestPosBuilder:
    def test_missing_base_position(self) -> None:
        with pytest.raises(UziErr) as exc:
            PosBuilder().add_move(E2E4).build()
        assert exc.value.kind is ErrKind.POSITION

    def test_start_pos(self) -> None:
        assert PosBuilder().start_pos().build() == Pos(StartPos())

    def test_fen(self) -> None:
        fen = "8/8/8/8/8/8/8/K6k w - - 0 1"
        assert PosBuilder().fen(fen).build() == Pos(Fen(fen))

    def test_last_base_position_wins(self) -> None:
        assert PosBuilder().fen("x").start_pos().build().pos == StartPos()
        assert PosBuilder().start_pos().fen("x").build().pos == Fen("x")

    def test_moves_keep_order(self) -> None:
        pos = PosBuilder().add_move(E2E4).start_pos().add_move(E7E5).add_move(G1F3).build()
        assert pos.moves == (E2E4, E7E5, G1F3)

    def test_build_resets(self) -> None:
        builder = PosBuilder().start_pos().add_move(E2E4)
        builder.build()
        with pytest.raises(UziErr) as exc:
            builder.build()
        assert exc.value.kind is ErrKind.POSITION
        assert builder.fen("x").build().moves == ()
