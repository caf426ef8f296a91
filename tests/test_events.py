"""
视图事件总线单元测试
"""

from game.events import EventBus, ViewEvent, ViewEventType


class TestEventBus:
    """事件总线测试"""

    def setup_method(self):
        """每个测试前重置"""
        self.bus = EventBus()
        self.received_events = []

    def test_subscribe_and_publish(self):
        """测试订阅和发布事件"""
        self.bus.subscribe(ViewEventType.ROOM_ENTERED, self.received_events.append)
        self.bus.emit(ViewEventType.ROOM_ENTERED, room_id=42)

        assert len(self.received_events) == 1
        assert self.received_events[0].data == {"room_id": 42}

    def test_other_types_not_delivered(self):
        self.bus.subscribe(ViewEventType.ROOM_ENTERED, self.received_events.append)
        self.bus.emit(ViewEventType.ROOM_LEFT)
        assert self.received_events == []

    def test_priority_order(self):
        """测试优先级顺序"""
        order = []
        self.bus.subscribe(ViewEventType.GAME_OVER, lambda e: order.append("low"), priority=1)
        self.bus.subscribe(ViewEventType.GAME_OVER, lambda e: order.append("high"), priority=10)
        self.bus.emit(ViewEventType.GAME_OVER)
        assert order == ["high", "low"]

    def test_subscribe_all(self):
        self.bus.subscribe_all(self.received_events.append)
        self.bus.emit(ViewEventType.LOGGED_IN)
        self.bus.emit(ViewEventType.BOARD_UPDATED)
        assert [e.event_type for e in self.received_events] == [
            ViewEventType.LOGGED_IN, ViewEventType.BOARD_UPDATED,
        ]

    def test_unsubscribe(self):
        handler = self.received_events.append
        self.bus.subscribe(ViewEventType.LOGGED_IN, handler)
        self.bus.unsubscribe(ViewEventType.LOGGED_IN, handler)
        self.bus.emit(ViewEventType.LOGGED_IN)
        assert self.received_events == []

    def test_handler_error_isolated(self):
        def broken(event):
            raise RuntimeError("render failed")

        self.bus.subscribe(ViewEventType.LOGGED_IN, broken, priority=5)
        self.bus.subscribe(ViewEventType.LOGGED_IN, self.received_events.append)
        self.bus.emit(ViewEventType.LOGGED_IN)
        assert len(self.received_events) == 1

    def test_history_bounded(self):
        bus = EventBus(max_history=3)
        for _ in range(5):
            bus.emit(ViewEventType.ROOMS_UPDATED)
        assert len(bus.get_history(10)) == 3

    def test_publish_returns_event(self):
        event = ViewEvent(ViewEventType.REGISTERED)
        assert self.bus.publish(event) is event

    def test_clear(self):
        self.bus.subscribe(ViewEventType.LOGGED_IN, self.received_events.append)
        self.bus.clear()
        self.bus.emit(ViewEventType.LOGGED_IN)
        assert self.received_events == []
