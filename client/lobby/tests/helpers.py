from typing import Any


def make_game(
    game_id: str,
    game_state: str = "waiting",
    time_limit: float = 600,
    white: float | None = None,
    black: float | None = None,
    spectators: int = 0,
) -> dict[str, Any]:
    """Build a room-list entry in wire (camelCase) form."""
    return {
        "gameId": game_id,
        "gameState": game_state,
        "timeLimit": time_limit,
        "white": None if white is None else {"displayName": f"{game_id}-white", "rating": white},
        "black": None if black is None else {"displayName": f"{game_id}-black", "rating": black},
        "spectators": [{"displayName": f"spec{i}", "rating": 1000} for i in range(spectators)],
    }


def player_info_message(token: str = "tok-1", name: str = "abcd_guest", rating: int = 1200) -> dict[str, Any]:
    return {"type": "player_info", "displayName": name, "rating": rating, "playerToken": token}


def games_message(*games: dict[str, Any]) -> dict[str, Any]:
    return {"type": "games", "games": list(games)}


def current_game_message(game_id: str) -> dict[str, Any]:
    return {"type": "current_game", "gameId": game_id}
