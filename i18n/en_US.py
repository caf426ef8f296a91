"""English translation table."""

STRINGS: dict[str, str] = {
    # ── exceptions ──
    "exc.protocol": "Request failed (code={code})",
    "exc.transport": "Connection lost",
    "exc.validation": "Invalid input",
    "exc.not_authenticated": "Please log in first",
    "exc.credentials": "Please enter a username and password",
    "exc.room_name": "Please enter a room name",
    "exc.no_room": "You are not in a room",
    "exc.move.no_game": "No game in progress",
    "exc.move.not_your_turn": "It is not your turn",
    "exc.move.out_of_bounds": "({x}, {y}) is off the board",
    "exc.move.occupied": "({x}, {y}) is already taken",
    # ── notifications ──
    "notify.register_ok": "Registered, please log in",
    "notify.forfeit_confirm": "Really resign?",
    "notify.opponent_joined": "A player joined, waiting for the game to start...",
    "notify.opponent_left": "Opponent left, waiting for a new player...",
    # ── room ──
    "room.default_name": "{user}'s room",
    "room.title": "Room {room_id}",
    "room.waiting": "Waiting...",
    "room.players": "Players: {count}/2",
    "room.full": "Full",
    "room.join": "Join",
    "room.empty": "No rooms yet",
    # ── game ──
    "stone.black": "Black",
    "stone.white": "White",
    "game.turn.mine": "Your move!",
    "game.turn.theirs": "Waiting for opponent...",
    "game.status": "You play {color} | {turn}",
    "game.status.mine": "your turn",
    "game.status.theirs": "opponent's turn",
    "outcome.win": "You win!",
    "outcome.lose": "You lose!",
    # ── lobby ──
    "lobby.user": "User: {user}",
    "lobby.score": "Score: {score}",
    "lobby.rank_line": "{index}. {username}  {score} pts | win rate {win_rate}",
    "lobby.leaderboard": "Leaderboard",
    "lobby.rooms": "Rooms",
    # ── cli ──
    "cli.prompt": "gomoku> ",
    "cli.help": (
        "Commands: login <user> <password> | register <user> <password> | logout | "
        "rooms | create [name] | join <room_id> | leave | move <x> <y> | forfeit | "
        "lobby | rank | help | quit"
    ),
    "cli.unknown": "Unknown command: {cmd}",
    "cli.usage": "Usage: {usage}",
    "cli.bye": "Bye!",
}
