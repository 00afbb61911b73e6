"""
Piste core Python package.

Rules engine for Piste, a two-player territory game on a hex board played
with capture-pattern cards. Everything here is pure logic over immutable
values; rendering and input mapping live outside the package.
Modules:
- config.py: RulesConfig (board size, hand size, point target)
- cards.py: card catalog, geometry and the draw pool
- board.py: Board, Space, starting layout and space values
- moves.py: orientation, legality checks, previews and captures
- connectivity.py: pruning of territory cut off from its core
- state.py: GameState, PlayerState
- engine.py: turn, scoring and win handling
- cli.py: hot-seat terminal game
"""
