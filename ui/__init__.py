# -*- coding: utf-8 -*-
"""
UI模块
提供终端界面显示
"""

from .protocol import LegalMoveAt, Notifier, Renderer
from .rich_ui import RichBoardRenderer, RichNotifier, RichView

__all__ = ['LegalMoveAt', 'Notifier', 'Renderer', 'RichBoardRenderer', 'RichNotifier', 'RichView']
