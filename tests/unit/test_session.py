"""
Unit tests for GameSession.

Tests luck handling on clicks, marks, chording, the face button,
counters and settings.
"""
import numpy as np
import pytest
from minefield import GameConfig, Luck
from gameplay import GameSession, GameState
from consistency import AdjustOutcome


# ============================================================================
# Lifecycle Tests
# ============================================================================

class TestLifecycle:
    """Test game creation."""

    def test_new_session_is_playing(self, empty_config: GameConfig) -> None:
        """Sessions start a game immediately."""
        session = GameSession(empty_config, seed=0)
        assert session.game_state == GameState.PLAYING
        assert session.first_move is True
        assert (session.grid.width, session.grid.height) == (5, 3)

    def test_same_seed_same_minefield(self) -> None:
        """Seeded sessions are reproducible."""
        config = GameConfig(width=10, height=10, mine_density=0.3)
        a = GameSession(config, seed=5)
        b = GameSession(config, seed=5)
        assert np.array_equal(a.grid.mine_mask(), b.grid.mine_mask())

    def test_new_game_can_resize(self, empty_config: GameConfig) -> None:
        """new_game takes optional dimensions."""
        session = GameSession(empty_config, seed=0)
        session.new_game(width=7, height=4, mine_density=1.0)
        assert session.config.width == 7
        assert session.mines_total() == 28


# ============================================================================
# Click Tests
# ============================================================================

class TestClickLuck:
    """Test how each luck mode treats a click."""

    def test_first_click_is_promoted_to_great(self, session_factory) -> None:
        """Even neutral luck never loses on the first click."""
        session = session_factory(["*...", "....", "...."], luck=Luck.NEUTRAL)
        assert session.click(0, 0) is True
        assert not session.is_lost
        assert session.grid.cell(0, 0).is_revealed
        assert not session.grid.cell(0, 0).is_mine
        assert session.mines_total() == 1
        assert session.first_move is False

    def test_neutral_mine_explodes(self, session_factory) -> None:
        """After the first click, neutral luck leaves mines alone."""
        session = session_factory(["*.*", "...", "*.*"], luck=Luck.NEUTRAL)
        session.click(1, 1)
        assert session.grid.cell(1, 1).adjacent_mines == 4

        session.click(0, 0)

        assert session.is_lost
        assert session.grid.cell(0, 0).exploded
        assert session.grid.cell(0, 0).is_mine

    def test_bad_luck_plants_mine_on_first_click(self, session_factory) -> None:
        """Bad luck is not promoted and pulls a mine under the cursor."""
        session = session_factory(["....", "...*"], luck=Luck.BAD)
        session.click(0, 0)

        assert session.is_lost
        assert session.grid.cell(0, 0).is_mine
        assert session.grid.cell(0, 0).exploded
        assert not session.grid.cell(3, 1).is_mine
        assert session.mines_total() == 1

    def test_bad_luck_without_mines_is_safe(self, session_factory) -> None:
        """With no mine to move the click just opens the grid."""
        session = session_factory(["...", "..."], luck=Luck.BAD)
        session.click(0, 0)
        assert session.is_won

    def test_good_luck_next_to_revealed_cells(self, session_factory) -> None:
        """Good luck saves a click bordering the revealed region."""
        session = session_factory(["...*.*", "......"], luck=Luck.GOOD)
        session.click(0, 0)
        assert session.grid.cell(2, 0).adjacent_mines == 1

        session.click(3, 0)

        assert session.is_playing
        assert session.grid.cell(3, 0).is_revealed
        assert session.grid.cell(3, 1).is_mine
        assert session.grid.cell(2, 0).adjacent_mines == 1
        assert session.mines_total() == 2

    def test_good_luck_away_from_revealed_cells(self, session_factory) -> None:
        """Good luck does nothing for an isolated click."""
        session = session_factory(["...*.*", "......"], luck=Luck.GOOD)
        session.click(0, 0)
        session.click(5, 0)
        assert session.is_lost

    def test_great_luck_away_from_revealed_cells(self, session_factory) -> None:
        """Great luck moves an isolated mine into the deep region."""
        session = session_factory(["...*.*", "......"], luck=Luck.GREAT)
        session.click(0, 0)
        session.click(5, 0)
        assert not session.is_lost
        assert not session.grid.cell(5, 0).is_mine
        assert session.mines_total() == 2

    def test_great_luck_loses_when_no_layout_exists(self, session_factory) -> None:
        """If every consistent layout has a mine there, the click explodes."""
        session = session_factory(["*.*.."], luck=Luck.GREAT)
        session.click(1, 0)
        assert session.grid.cell(1, 0).adjacent_mines == 2

        session.click(0, 0)

        assert session.is_lost
        assert session.grid.cell(0, 0).exploded

    def test_revealing_last_safe_cell_wins(self, session_factory) -> None:
        """The game is won once only mines remain hidden."""
        session = session_factory(["*.."])
        session.click(2, 0)
        assert session.is_won


class TestClickIgnored:
    """Test clicks that are not processed."""

    def test_marked_cell_ignores_click(self, session_factory) -> None:
        """Flags protect cells from left clicks."""
        session = session_factory(["*.."])
        session.toggle_mark(1, 0)
        assert session.click(1, 0) is False
        assert session.grid.cell(1, 0).is_flagged
        assert session.first_move is True

    def test_out_of_bounds_click(self, session_factory) -> None:
        """Clicks outside the grid are ignored."""
        session = session_factory(["..."])
        assert session.click(3, 0) is False

    def test_click_after_game_over(self, session_factory) -> None:
        """Finished games ignore clicks."""
        session = session_factory(["*.."])
        session.click(2, 0)
        assert session.click(0, 0) is False
        assert session.is_won


# ============================================================================
# Mark Tests
# ============================================================================

class TestMarks:
    """Test flags and question marks."""

    def test_toggle_without_question_marks(self, session_factory) -> None:
        """Flag on, flag off."""
        session = session_factory(["*.."])
        assert session.toggle_mark(0, 0) is True
        assert session.grid.cell(0, 0).is_flagged
        session.toggle_mark(0, 0)
        assert not session.grid.cell(0, 0).is_marked

    def test_toggle_with_question_marks(self, session_factory) -> None:
        """Flag, then question mark."""
        session = session_factory(["*.."], question_marks=True)
        session.toggle_mark(0, 0)
        session.toggle_mark(0, 0)
        assert session.grid.cell(0, 0).is_questioned

    def test_disabling_question_marks_clears_them(self, session_factory) -> None:
        """Existing question marks disappear with the setting."""
        session = session_factory(["*.."], question_marks=True)
        session.toggle_mark(0, 0)
        session.toggle_mark(0, 0)
        session.set_question_marks(False)
        assert not session.grid.cell(0, 0).is_marked
        assert session.config.question_marks is False

    def test_revealed_cell_cannot_be_marked(self, session_factory) -> None:
        """Marks only apply to hidden cells."""
        session = session_factory(["*...", "....", "...."])
        session.click(1, 1)
        assert session.toggle_mark(1, 1) is False


# ============================================================================
# Chord Tests
# ============================================================================

class TestChord:
    """Test revealing around a satisfied number."""

    @pytest.fixture
    def opened(self, session_factory) -> GameSession:
        """A revealed 1 at (1, 1) with its mine at (0, 0)."""
        session = session_factory(["*..", "...", "..."], question_marks=True)
        session.click(1, 1)
        return session

    def test_correct_flag_opens_neighbors(self, opened: GameSession) -> None:
        """Chording a satisfied number opens everything else."""
        opened.toggle_mark(0, 0)
        assert opened.chord_reveal(1, 1) is True
        assert opened.grid.cell(2, 2).is_revealed
        assert opened.is_won

    def test_wrong_flag_explodes(self, opened: GameSession) -> None:
        """Chording never moves mines."""
        opened.toggle_mark(2, 2)
        opened.chord_reveal(1, 1)
        assert opened.is_lost
        assert opened.grid.cell(0, 0).exploded
        assert opened.grid.cell(2, 2).mistake

    def test_flag_count_mismatch_does_nothing(self, opened: GameSession) -> None:
        """Without the right number of flags the chord is refused."""
        assert opened.chord_reveal(1, 1) is False
        assert opened.grid.cell(1, 0).is_hidden

    def test_question_mark_aborts(self, opened: GameSession) -> None:
        """Any questioned neighbor cancels the chord."""
        opened.toggle_mark(0, 0)
        opened.toggle_mark(2, 2)
        opened.toggle_mark(2, 2)
        assert opened.chord_reveal(1, 1) is False
        assert opened.grid.cell(1, 0).is_hidden

    def test_hidden_cell_cannot_chord(self, opened: GameSession) -> None:
        """Chording needs a revealed number."""
        assert opened.chord_reveal(2, 2) is False


# ============================================================================
# Face Button Tests
# ============================================================================

class TestClickFace:
    """Test the smiley button."""

    def test_flags_on_every_mine_wins(self, session_factory) -> None:
        """Claiming victory with correct flags wins."""
        session = session_factory(["*..", "...", "..."])
        session.toggle_mark(0, 0)
        session.click_face()
        assert session.is_won

    def test_wrong_flags_lose(self, session_factory) -> None:
        """Claiming victory with a misplaced flag loses and shows it."""
        session = session_factory(["*..", "...", "..."])
        session.toggle_mark(2, 2)
        assert session.mines_displayed() == 0
        session.click_face()
        assert session.is_lost
        assert session.grid.cell(2, 2).mistake
        assert session.mines_displayed() == 1

    def test_resign(self, session_factory) -> None:
        """Pressing the face with mines unaccounted for resigns."""
        session = session_factory(["*..", "...", "..."])
        session.click_face()
        assert session.is_lost

    def test_restart_after_game_over(self, session_factory) -> None:
        """After the game, the face starts a new one."""
        session = session_factory(["*..", "...", "..."])
        session.click_face()
        session.click_face()
        assert session.is_playing
        assert session.first_move is True
        assert session.mines_total() == 0


# ============================================================================
# Engine Access Tests
# ============================================================================

class TestAdjustMine:
    """Test the session-level engine entry points."""

    def test_try_adjust_mine(self, session_factory) -> None:
        """Boolean wrapper over the engine."""
        session = session_factory(["*..", "...", "..."])
        assert session.try_adjust_mine(0, 0, False) is True
        assert not session.grid.cell(0, 0).is_mine
        assert session.mines_total() == 1

    def test_adjust_mine_reports_outcome(self, session_factory) -> None:
        """Full result is available for callers that care."""
        session = session_factory(["...", "..."])
        result = session.adjust_mine(0, 0, True)
        assert result.outcome == AdjustOutcome.IMPOSSIBLE


# ============================================================================
# Settings Tests
# ============================================================================

class TestSettings:
    """Test toolbar settings."""

    def test_cycle_luck(self, empty_config: GameConfig) -> None:
        """Luck advances through the cycle."""
        session = GameSession(empty_config, seed=0)
        assert session.cycle_luck() == Luck.GREAT
        assert session.config.luck == Luck.GREAT

    def test_adjust_density_limits(self, empty_config: GameConfig) -> None:
        """Density level 0 cannot go lower."""
        session = GameSession(empty_config, seed=0)
        assert session.adjust_density(-1) is False
        assert session.adjust_density(1) is True
        assert session.config.mine_density == pytest.approx(0.05)

    def test_adjust_size(self, empty_config: GameConfig) -> None:
        """Size steps along the level table and restarts."""
        session = GameSession(empty_config, seed=0)
        assert session.adjust_size(-1) is False
        assert session.adjust_size(1) is True
        assert (session.grid.width, session.grid.height) == (8, 5)
        assert session.first_move is True
