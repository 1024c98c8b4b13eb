# 文件: PyPFCP/pfcp/solver/__init__.py
"""
求解驱动模块

- MaterialPointDriver: 单积分点时间推进 (缩步、状态提交)
"""

from .point_driver import MaterialPointDriver

__all__ = ['MaterialPointDriver']
