from __future__ import annotations

import logging
import os
import random
from typing import Any, Dict, List, Optional, Tuple, Union

from flask import Flask, jsonify, request

from game import (
    Board,
    Card,
    GameState,
    PlayerState,
    PlayPreview,
    RulesConfig,
    Space,
    CORE,
    CONTROLLED,
    NOT_ON_BOARD,
    UNCONTROLLED,
    CARD_DEFS,
    card_by_name,
    initialize_game,
    legal_focuses,
    legality_preview,
    phase,
    play_selected,
    attempt_play,
    score_value,
    toggle_card,
    deselect_card,
)

logger = logging.getLogger(__name__)

RULES = RulesConfig.from_env()

app = Flask(__name__)

# One character per cell, rows joined into strings. '-' marks grid cells that are not board spaces.
_CELL_CODES: Dict[Space, str] = {
    NOT_ON_BOARD: '-',
    UNCONTROLLED: '.',
    CORE[0]: 'A',
    CONTROLLED[0]: 'a',
    CORE[1]: 'B',
    CONTROLLED[1]: 'b',
}
_CODE_CELLS: Dict[str, Space] = {code: space for space, code in _CELL_CODES.items()}


class ApiError(ValueError):
    pass


def config_to_json(c: RulesConfig) -> Dict[str, Any]:
    return {
        "span": c.span,
        "midHeight": c.mid_height,
        "startingUncontrolledDepth": c.starting_uncontrolled_depth,
        "handSize": c.hand_size,
        "pointTarget": c.point_target,
        "numCols": c.num_cols,
        "numRows": c.num_rows,
    }


def _json_to_config(obj: Optional[Dict[str, Any]]) -> RulesConfig:
    if obj is None:
        return RULES
    return RulesConfig(
        span=int(obj.get("span", RULES.span)),
        mid_height=int(obj.get("midHeight", RULES.mid_height)),
        starting_uncontrolled_depth=int(obj.get("startingUncontrolledDepth", RULES.starting_uncontrolled_depth)),
        hand_size=int(obj.get("handSize", RULES.hand_size)),
        point_target=int(obj.get("pointTarget", RULES.point_target)),
    )


def card_to_json(card: Card) -> Dict[str, Any]:
    d = card.dimensions
    return {
        "name": card.name,
        "required": [list(delta) for delta in card.required],
        "capture": [list(delta) for delta in card.capture],
        "dimensions": {
            "columnCount": d.column_count,
            "rowCount": d.row_count,
            "colMin": d.col_min,
            "colMax": d.col_max,
            "rowMin": d.row_min,
            "rowMax": d.row_max,
            "columnOffset": d.column_offset,
            "rowOffset": d.row_offset,
        },
    }


def board_to_json(b: Board) -> List[str]:
    return [
        "".join(_CELL_CODES[b.at(col, row)] for col in range(b.num_cols))
        for row in range(b.num_rows)
    ]


def _json_to_board(rows: List[str], c: RulesConfig) -> Board:
    if len(rows) != c.num_rows or any(len(r) != c.num_cols for r in rows):
        raise ApiError(f"board must be {c.num_rows} rows of {c.num_cols} cells")
    cells: List[Space] = []
    for r in rows:
        for code in r:
            if code not in _CODE_CELLS:
                raise ApiError(f"unknown cell code {code!r}")
            cells.append(_CODE_CELLS[code])
    board = Board(c, tuple(cells))
    board.validate()
    return board


def state_to_json(s: GameState) -> Dict[str, Any]:
    return {
        "config": config_to_json(s.config),
        "board": board_to_json(s.board),
        "players": [
            {"hand": [card.name for card in p.hand], "score": int(p.score)}
            for p in s.players
        ],
        "activePlayer": s.active_player,
        "selectedCard": s.selected_card,
        "focus": list(s.focus) if s.focus is not None else None,
        "winner": s.winner,
        "phase": phase(s).value,
    }


def _json_to_state(obj: Dict[str, Any]) -> GameState:
    c = _json_to_config(obj.get("config"))
    board = _json_to_board(obj["board"], c)
    players_in = obj["players"]
    if len(players_in) != 2:
        raise ApiError("exactly two players required")
    players: List[PlayerState] = []
    for p in players_in:
        hand = tuple(card_by_name(str(name)) for name in p["hand"])
        if len(hand) != c.hand_size:
            raise ApiError(f"hands must hold {c.hand_size} cards")
        score = int(p.get("score", 0))
        if score < 0:
            raise ApiError("scores cannot be negative")
        players.append(PlayerState(hand, score))
    active = int(obj["activePlayer"])
    if active not in (0, 1):
        raise ApiError("activePlayer must be 0 or 1")
    selected = obj.get("selectedCard")
    if selected is not None:
        selected = int(selected)
        if not 0 <= selected < c.hand_size:
            raise ApiError("selectedCard out of range")
    focus_in = obj.get("focus")
    focus: Optional[Tuple[int, int]] = None
    if focus_in is not None:
        focus = (int(focus_in[0]), int(focus_in[1]))
        if not board.at(*focus).on_board:
            raise ApiError("focus must be an on-board space")
    win = obj.get("winner")
    if win is not None:
        win = int(win)
        if win not in (0, 1):
            raise ApiError("winner must be 0, 1 or null")
    return GameState(
        board=board,
        players=(players[0], players[1]),
        active_player=active,
        selected_card=selected,
        focus=focus,
        winner=win,
    )


def preview_to_json(p: PlayPreview) -> Dict[str, Any]:
    return {
        "focus": list(p.focus),
        "playable": p.playable,
        "corePoints": p.core_points,
        "required": [
            {"delta": list(ch.delta), "target": list(ch.target), "mark": ch.mark.value} for ch in p.required
        ],
        "capture": [
            {"delta": list(ch.delta), "target": list(ch.target), "mark": ch.mark.value} for ch in p.capture
        ],
    }


def _load_state(body: Dict[str, Any]) -> GameState:
    s_in = body.get("state")
    if not isinstance(s_in, dict):
        raise ApiError("state required")
    try:
        return _json_to_state(s_in)
    except ApiError:
        raise
    except (ValueError, KeyError, TypeError, IndexError) as e:
        raise ApiError(f"bad state: {e}") from e


def _card_index(body: Dict[str, Any], s: GameState) -> int:
    try:
        idx = int(body["card"])
    except (KeyError, TypeError, ValueError):
        raise ApiError("card index required") from None
    if not 0 <= idx < len(s.active().hand):
        raise ApiError("card index out of range")
    return idx


def _seed(body: Dict[str, Any]) -> Union[None, int, str]:
    seed = body.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, (int, str))):
        raise ApiError("seed must be an integer or string")
    return seed


def _coords(body: Dict[str, Any]) -> Tuple[int, int]:
    try:
        return int(body["col"]), int(body["row"])
    except (KeyError, TypeError, ValueError):
        raise ApiError("col and row required") from None


@app.errorhandler(ApiError)
def _api_error(e: ApiError) -> Any:
    logger.debug("Rejected request: %s", e)
    return jsonify({"ok": False, "error": str(e)}), 400


@app.get("/api/config")
def api_config() -> Any:
    score_values = [
        [score_value(RULES, col, row) for col in range(RULES.num_cols)]
        for row in range(RULES.num_rows)
    ]
    cards = []
    for card_def in CARD_DEFS:
        cards.extend(card_to_json(card_by_name(name)) for name in card_def.names)
    return jsonify({"ok": True, "config": config_to_json(RULES), "scoreValues": score_values, "cards": cards})


@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    state = initialize_game(_seed(body), RULES)
    return jsonify({"ok": True, "state": state_to_json(state)})


@app.post("/api/select")
def api_select() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    state = _load_state(body)
    if body.get("card") is None:
        next_state = deselect_card(state)
    else:
        next_state = toggle_card(state, _card_index(body, state))
    return jsonify({"ok": True, "state": state_to_json(next_state)})


@app.post("/api/preview")
def api_preview() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    state = _load_state(body)
    col, row = _coords(body)
    preview = legality_preview(state, _card_index(body, state), col, row)
    return jsonify({"ok": True, "preview": preview_to_json(preview)})


@app.post("/api/legal")
def api_legal() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    state = _load_state(body)
    card = state.active().hand[_card_index(body, state)]
    spots = legal_focuses(state.board, state.active_player, card)
    return jsonify({"ok": True, "focuses": [list(c) for c in spots]})


@app.post("/api/play")
def api_play() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    state = _load_state(body)
    col, row = _coords(body)
    seed = _seed(body)
    rng = random.Random(seed) if seed is not None else None
    if body.get("card") is None:
        result = play_selected(state, col, row, rng)
    else:
        result = attempt_play(state, _card_index(body, state), col, row, rng)
    if not result.accepted:
        return jsonify({"ok": False, "error": "Illegal play", "reason": result.reason,
                        "state": state_to_json(state)}), 400
    return jsonify({
        "ok": True,
        "state": state_to_json(result.state),
        "corePoints": result.core_points,
        "turnPoints": result.turn_points,
        "winner": result.state.winner,
    })


# Entrypoint for "python app.py"
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
