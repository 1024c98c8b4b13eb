# 文件: PyPFCP/pfcp/materials/damage/__init__.py
"""
相场断裂组件模块

- strain_split: 拉压分解损伤应力 (StrainSplitDamage)
"""

from .strain_split import StrainSplitDamage, DamageSplitResult, split_trace

__all__ = ['StrainSplitDamage', 'DamageSplitResult', 'split_trace']
