# 文件: PyPFCP/pfcp/materials/grains/__init__.py
"""
多晶组件模块

- tracker: 晶粒数据服务 (EulerAngles, GrainDataTracker)
- interpolator: 多晶弹性张量插值 (PolycrystalElasticityInterpolator)
"""

from .tracker import EulerAngles, GrainDataTracker
from .interpolator import (
    PolycrystalElasticityInterpolator,
    PolycrystalElasticity,
    interpolation_weight,
    interpolation_weight_derivative,
    J_TO_EV,
)

__all__ = [
    'EulerAngles',
    'GrainDataTracker',
    'PolycrystalElasticityInterpolator',
    'PolycrystalElasticity',
    'interpolation_weight',
    'interpolation_weight_derivative',
    'J_TO_EV',
]
