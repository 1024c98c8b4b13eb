# 文件: PyPFCP/pfcp/materials/elastic/__init__.py
"""
弹性模型模块

提供各种弹性响应模型:
- IsotropicElastic: 各向同性线弹性
- CubicElastic: 立方晶系线弹性 (晶粒弹性张量来源)
"""

from .isotropic import IsotropicElastic, lame_from_tensor
from .cubic import CubicElastic

__all__ = ['IsotropicElastic', 'CubicElastic', 'lame_from_tensor']
