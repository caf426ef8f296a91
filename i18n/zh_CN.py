"""简体中文翻译表。"""

STRINGS: dict[str, str] = {
    # ── 异常 ──
    "exc.protocol": "请求失败 (code={code})",
    "exc.transport": "连接已断开",
    "exc.validation": "输入不合法",
    "exc.not_authenticated": "请先登录",
    "exc.credentials": "请输入用户名和密码",
    "exc.room_name": "请输入房间名称",
    "exc.no_room": "当前不在任何房间",
    "exc.move.no_game": "当前没有进行中的对局",
    "exc.move.not_your_turn": "还没轮到你",
    "exc.move.out_of_bounds": "坐标 ({x}, {y}) 超出棋盘",
    "exc.move.occupied": "({x}, {y}) 已有棋子",
    # ── 通知 ──
    "notify.register_ok": "注册成功，请登录",
    "notify.forfeit_confirm": "确定要认输吗？",
    "notify.opponent_joined": "玩家已加入，等待游戏开始...",
    "notify.opponent_left": "对手已离开，等待新玩家...",
    # ── 房间 ──
    "room.default_name": "{user}的房间",
    "room.title": "房间 {room_id}",
    "room.waiting": "等待中...",
    "room.players": "玩家: {count}/2",
    "room.full": "已满",
    "room.join": "加入",
    "room.empty": "暂无房间",
    # ── 对局 ──
    "stone.black": "黑",
    "stone.white": "白",
    "game.turn.mine": "轮到你了！",
    "game.turn.theirs": "等待对手落子...",
    "game.status": "你是{color}方 | {turn}",
    "game.status.mine": "你的回合",
    "game.status.theirs": "对手回合",
    "outcome.win": "你赢了！",
    "outcome.lose": "你输了！",
    # ── 大厅 ──
    "lobby.user": "用户: {user}",
    "lobby.score": "积分: {score}",
    "lobby.rank_line": "{index}. {username}  {score}分 | 胜率 {win_rate}",
    "lobby.leaderboard": "排行榜",
    "lobby.rooms": "房间列表",
    # ── 命令行 ──
    "cli.prompt": "gomoku> ",
    "cli.help": (
        "命令: login <用户名> <密码> | register <用户名> <密码> | logout | rooms | "
        "create [名称] | join <房间号> | leave | move <x> <y> | forfeit | lobby | "
        "rank | help | quit"
    ),
    "cli.unknown": "未知命令: {cmd}",
    "cli.usage": "用法: {usage}",
    "cli.bye": "再见！",
}
