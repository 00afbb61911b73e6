from __future__ import annotations

# Facade module that re-exports the Piste rules engine.
# The Flask app and tests import from here; single-responsibility modules live under piste_core/*.

from piste_core.config import RulesConfig, DEFAULT_CONFIG
from piste_core.cards import (
    Card,
    CardDef,
    CardDimensions,
    CARD_DEFS,
    CARD_POOL,
    build_card_pool,
    card_by_name,
    card_dimensions,
    card_names,
    draw_card,
    make_card,
    mirror_card,
)
from piste_core.board import (
    Board,
    Coord,
    Space,
    SpaceKind,
    CORE,
    CONTROLLED,
    NOT_ON_BOARD,
    UNCONTROLLED,
    NEIGHBOR_DIRECTIONS,
    initialize_board,
    is_on_board,
    neighbors,
    row_limit_for_column,
    score_value,
    top_row_for_column,
)
from piste_core.moves import (
    CaptureMark,
    PlayPreview,
    RequiredMark,
    apply_captures,
    is_legal_play,
    legal_focuses,
    orient,
    preview_play,
    rejection_reason,
    target_space,
)
from piste_core.connectivity import connected_spaces, disconnected_spaces, prune_disconnected
from piste_core.state import GameState, PlayerState
from piste_core.engine import (
    Phase,
    PlayResult,
    attempt_play,
    clear_focus,
    deselect_card,
    end_of_turn_score,
    initialize_game,
    is_game_over,
    legality_preview,
    new_game,
    phase,
    play_selected,
    refill_hand,
    select_card,
    set_focus,
    toggle_card,
    winner,
)


def main() -> None:
    # CLI driver delegated to piste_core.cli
    from piste_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
